"""
Функции языка стилей XPathScript.

Вызываются из колбэков правил во время рендеринга и работают с активным
проходом рендеринга. Пример колбэка для ссылки:

    def ulink(node, t):
        url = findvalue("@url", node)
        if findnodes("node()", node):
            t["pre"] = f'<a href="{url}">'
            t["post"] = "</a>"
            return DO_SELF_AND_KIDS
        t["pre"] = f'<a href="{url}">{url}</a>'
        t["post"] = ""
        return DO_SELF_ONLY
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from .context import current_engine
from .taint import is_utf8_tainted
from .types import Control, OverrideRecord, Rule

logger = logging.getLogger(__name__)

DO_SELF_AND_KIDS = Control.RENDER_SELF_AND_KIDS
DO_SELF_ONLY = Control.RENDER_SELF_ONLY
DO_NOT_PROCESS = Control.SKIP
DO_TEXT_AS_CHILD = Control.TEXT_AS_CHILD


def _bridge():
    return current_engine().bridge


# ---- Path-запросы ----

def findnodes(path: str, context: Optional[Any] = None) -> List[Any]:
    """Узлы, выбранные выражением (контекст по умолчанию - документ)."""
    return _bridge().find_nodes(path, context)


def findvalue(path: str, context: Optional[Any] = None) -> str:
    """Строковое значение выражения."""
    bridge = _bridge()
    return bridge.to_string(bridge.evaluate(path, context))


def findvalues(path: str, context: Optional[Any] = None) -> List[str]:
    """Строковые значения каждого выбранного узла."""
    bridge = _bridge()
    return [bridge.to_string(node) for node in bridge.find_nodes(path, context)]


def findnodes_as_string(path: str, context: Optional[Any] = None) -> str:
    """Склеенная разметка выбранных узлов (не обязательно корректный XML)."""
    bridge = _bridge()
    return "".join(bridge.serialize(node) for node in bridge.find_nodes(path, context))


def xpath_to_string(value: Any) -> str:
    return _bridge().to_string(value)


def matches(node: Any, path: str, context: Optional[Any] = None) -> bool:
    """Истинно, если node входит в узлы, выбранные path из context."""
    bridge = _bridge()
    return any(bridge.same_node(node, candidate) for candidate in bridge.find_nodes(path, context))


def set_namespace(prefix: str, uri: str) -> None:
    try:
        _bridge().set_namespace(prefix, uri)
    except ValueError as e:
        logger.warning("set_namespace failed: %s", e)


# ---- Рендеринг ----

def apply_templates(*args: Any) -> str:
    return current_engine().apply_templates(*args)


def call_template(node: Any, overrides: OverrideRecord, rule: Union[Rule, Mapping[str, Any], str]) -> Any:
    return current_engine().call_template(node, overrides, rule)


# ---- Классификация узлов ----

def is_element_node(node: Any) -> bool:
    return _bridge().is_element(node)


def is_text_node(node: Any) -> bool:
    """Истинно только для "настоящих" текстовых узлов (не комментариев)."""
    return _bridge().is_text(node)


def is_comment_node(node: Any) -> bool:
    return _bridge().is_comment(node)


def is_pi_node(node: Any) -> bool:
    return _bridge().is_pi(node)


def is_nodelist(node: Any) -> bool:
    return _bridge().is_nodeset(node)


def get_xpath_of_node(node: Any) -> str:
    """Путь от корня до узла - для сообщений об ошибках."""
    return current_engine().locator.locate(node)


__all__ = [
    "DO_SELF_AND_KIDS",
    "DO_SELF_ONLY",
    "DO_NOT_PROCESS",
    "DO_TEXT_AS_CHILD",
    "findnodes",
    "findvalue",
    "findvalues",
    "findnodes_as_string",
    "xpath_to_string",
    "matches",
    "set_namespace",
    "apply_templates",
    "call_template",
    "is_element_node",
    "is_text_node",
    "is_comment_node",
    "is_pi_node",
    "is_nodelist",
    "is_utf8_tainted",
    "get_xpath_of_node",
]
