"""
Реестр правил рендеринга.

Хранит соответствие селектор -> правило и поддерживает временные
переопределения правил на время рендеринга поддерева узла.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .types import Rule

logger = logging.getLogger(__name__)

WILDCARD = "*"
TEXT_SELECTORS = ("#text", "text()")
COMMENT_SELECTORS = ("#comment", "comment()")


@dataclass
class RuleSnapshot:
    """
    Сохраненное значение селектора на момент входа в поддерево.

    rule=None означает, что селектора в реестре не было.
    """
    selector: str
    rule: Optional[Rule]


class TemplateRegistry:
    """
    Реестр правил с динамической областью видимости переопределений.

    Переопределение, установленное через scoped_override(), видно только
    внутри блока with и снимается при любом выходе из него (в том числе
    по исключению). Переопределения вкладываются строго по стеку вызовов.
    """

    def __init__(self, rules: Optional[Mapping[str, Rule]] = None):
        self.rules: Dict[str, Rule] = dict(rules or {})

        # Стек снимков для вложенных переопределений
        self.snapshot_stack: List[RuleSnapshot] = []

        # Исходные правила, измененные merge_live в текущем проходе
        self._live_snapshot: Optional[Dict[str, Optional[Rule]]] = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Union[Rule, Mapping[str, Any]]]) -> TemplateRegistry:
        """
        Создает реестр из словаря селектор -> правило.

        Значения могут быть готовыми Rule или словарями полей правила.
        """
        registry = cls()
        for selector, rule in raw.items():
            registry.set_rule(selector, rule)
        return registry

    def set_rule(self, selector: str, rule: Union[Rule, Mapping[str, Any]]) -> Rule:
        """Регистрирует (или заменяет) правило для селектора."""
        if not isinstance(rule, Rule):
            rule = Rule.from_mapping(rule)
        self.rules[selector] = rule
        return rule

    def lookup(self, selector: str) -> Optional[Rule]:
        return self.rules.get(selector)

    def lookup_first(self, *selectors: str) -> Tuple[Optional[str], Optional[Rule]]:
        """
        Возвращает первое найденное правило из списка селекторов.

        Returns:
            Пара (селектор, правило) или (None, None)
        """
        for selector in selectors:
            rule = self.rules.get(selector)
            if rule is not None:
                return selector, rule
        return None, None

    def merge_live(self, selector: str, overrides: Mapping[str, Any]) -> Rule:
        """
        Заменяет действующее правило селектора копией с переопределениями.

        Изменение видно всем следующим узлам до конца прохода рендеринга
        (используется для текстовых узлов и комментариев). Вне прохода
        изменение постоянно. Зарегистрированный объект Rule не меняется.

        Returns:
            Новое действующее правило
        """
        if self._live_snapshot is not None and selector not in self._live_snapshot:
            self._live_snapshot[selector] = self.rules.get(selector)
        rule = self.rules[selector] = (self.rules.get(selector) or Rule()).merged(overrides)
        return rule

    @contextmanager
    def render_pass(self) -> Iterator[None]:
        """
        Ограничивает изменения merge_live одним проходом рендеринга.

        Вложенные проходы (apply_templates из колбэка) входят в проход
        верхнего уровня; снимок восстанавливается только при выходе из него.
        """
        if self._live_snapshot is not None:
            yield
            return

        self._live_snapshot = {}
        try:
            yield
        finally:
            snapshot, self._live_snapshot = self._live_snapshot, None
            for selector, rule in snapshot.items():
                if rule is None:
                    self.rules.pop(selector, None)
                else:
                    self.rules[selector] = rule
            if snapshot:
                logger.debug("Live rule changes for %s discarded at end of pass", ", ".join(sorted(snapshot)))

    @contextmanager
    def scoped_override(self, selector: str, rule: Rule) -> Iterator[Rule]:
        """
        Устанавливает rule как действующее правило selector на время блока.

        Предыдущее значение восстанавливается безусловно.
        """
        self.snapshot_stack.append(RuleSnapshot(selector, self.rules.get(selector)))
        self.rules[selector] = rule
        logger.debug("Scoped override for '%s' installed (depth %d)", selector, self.depth)
        try:
            yield rule
        finally:
            snapshot = self.snapshot_stack.pop()
            if snapshot.rule is None:
                self.rules.pop(snapshot.selector, None)
            else:
                self.rules[snapshot.selector] = snapshot.rule

    @property
    def depth(self) -> int:
        """Количество активных переопределений."""
        return len(self.snapshot_stack)

    def __contains__(self, selector: str) -> bool:
        return selector in self.rules

    def __len__(self) -> int:
        return len(self.rules)


__all__ = ["TemplateRegistry", "RuleSnapshot", "WILDCARD", "TEXT_SELECTORS", "COMMENT_SELECTORS"]
