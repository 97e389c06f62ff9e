from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)


class Control(enum.IntEnum):
    """
    Решение колбэка правила о том, как рендерить узел.

    Числовые значения совпадают с унаследованными кодами стилей,
    поэтому колбэк может вернуть как член перечисления, так и число.
    """

    RENDER_SELF_AND_KIDS = 1   # обертка узла + все дочерние узлы
    RENDER_SELF_ONLY = -1      # только обертка узла
    SKIP = 0                   # пустая строка
    TEXT_AS_CHILD = 2          # только для текстовых узлов: pre/post обрамляют текст


@dataclass(frozen=True)
class SelectChildren:
    """
    Обертка узла, затем рендеринг только тех узлов, которые выбирает
    path-выражение (вычисляется относительно текущего узла).
    """
    path: str


ControlResult = Union[Control, SelectChildren]

# Словарь, который колбэк заполняет переопределениями полей правила
OverrideRecord = Dict[str, Any]

RuleCallback = Callable[[Any, OverrideRecord], Any]

_NUMERIC_RESULT = re.compile(r"^-?\d+")

_CONTROL_BY_CODE = {int(member): member for member in Control}


def to_control(value: Any) -> ControlResult:
    """
    Приводит значение, возвращенное колбэком, к ControlResult.

    Единственная точка конвертации унаследованных числовых/строковых
    результатов. Нераспознанные значения трактуются как RENDER_SELF_AND_KIDS.
    """
    if isinstance(value, (Control, SelectChildren)):
        return value

    if isinstance(value, bool):
        return Control.RENDER_SELF_AND_KIDS if value else Control.SKIP

    if isinstance(value, str):
        m = _NUMERIC_RESULT.match(value)
        if m:
            return _control_from_code(int(m.group(0)))
        if value:
            return SelectChildren(value)
    elif isinstance(value, int):
        return _control_from_code(value)
    elif isinstance(value, float) and value.is_integer():
        return _control_from_code(int(value))

    logger.debug("Unrecognized control value %r, rendering self and kids", value)
    return Control.RENDER_SELF_AND_KIDS


def _control_from_code(code: int) -> Control:
    control = _CONTROL_BY_CODE.get(code)
    if control is None:
        logger.debug("Out-of-range control code %d, rendering self and kids", code)
        return Control.RENDER_SELF_AND_KIDS
    return control


# Legacy spellings used by stylesheets
_FIELD_ALIASES = {
    "showtag": "show_tag",
    "testcode": "callback",
}


@dataclass
class Rule:
    """
    Правило рендеринга для одного селектора.

    Фрагменты pre/post/prechild/postchild/prechildren/postchildren
    проходят через интерполяцию, intro/extro вставляются как есть.
    """
    pre: Optional[str] = None
    post: Optional[str] = None
    intro: Optional[str] = None
    extro: Optional[str] = None
    prechild: Optional[str] = None
    postchild: Optional[str] = None
    prechildren: Optional[str] = None
    postchildren: Optional[str] = None
    show_tag: bool = False
    callback: Optional[RuleCallback] = None
    # Произвольные ключи из переопределений (не валидируются)
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> Rule:
        """Строит правило из словаря (формат, который отдает компилятор стилей)."""
        return cls().merged(raw)

    def merged(self, overrides: Mapping[str, Any]) -> Rule:
        """
        Возвращает копию правила с наложенными переопределениями.

        Исходное правило не изменяется.
        """
        updates: Dict[str, Any] = {}
        extras = dict(self.extras)
        for key, value in overrides.items():
            name = _FIELD_ALIASES.get(key, key)
            if name in RULE_FIELDS:
                updates[name] = value
            else:
                extras[key] = value
        return replace(self, extras=extras, **updates)

    @property
    def wraps_children(self) -> bool:
        """Задает ли правило обертки для дочерних узлов."""
        return any(
            v is not None
            for v in (self.prechild, self.prechildren, self.postchild, self.postchildren)
        )


RULE_FIELDS = frozenset(f.name for f in fields(Rule) if f.name != "extras")


__all__ = [
    "Control",
    "SelectChildren",
    "ControlResult",
    "OverrideRecord",
    "RuleCallback",
    "Rule",
    "RULE_FIELDS",
    "to_control",
]
