"""
Вычисление пути к узлу для диагностических сообщений.
"""

from __future__ import annotations

from typing import Any, Optional

from .bridge import PathBridge
from .bridge.protocol import COMMENT_STEP, PI_STEP, TEXT_STEP


class LocationResolver:
    """
    Строит путь вида /doc[1]/section[2]/para[@id="intro"] от корня до узла.
    """

    def __init__(self, bridge: PathBridge):
        self.bridge = bridge

    def locate(self, node: Any) -> str:
        parent = self.bridge.parent(node)
        if parent is None:
            return ""

        name = self._step_name(node)
        if name is None:
            return self.locate(parent) + "/strange-node()"

        # Короткий путь для элементов с атрибутом id
        if self.bridge.is_element(node):
            node_id = self.bridge.to_string(self.bridge.evaluate("@id", node))
            if node_id:
                return f'{self.locate(parent)}/{name}[@id="{node_id}"]'

        # Сравнение по идентичности, а не через path-запросы
        brothers = self.bridge.children_named(parent, name)
        for i, brother in enumerate(brothers, start=1):
            if self.bridge.same_node(node, brother):
                return f"{self.locate(parent)}/{name}[{i}]"

        return f"{self.locate(parent)}/{name}[?]"

    def _step_name(self, node: Any) -> Optional[str]:
        if self.bridge.is_element(node):
            return self.bridge.tag_name(node)
        if self.bridge.is_text(node):
            return TEXT_STEP
        if self.bridge.is_comment(node):
            return COMMENT_STEP
        if self.bridge.is_pi(node):
            return PI_STEP
        return None


__all__ = ["LocationResolver"]
