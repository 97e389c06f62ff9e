"""
Подстановка path-выражений во фрагменты правил.

Фрагмент вида '<a href="{@url}">' превращается в '<a href="http://...">':
каждое вхождение шаблона-разделителя заменяется строковым значением
выражения, вычисленного относительно текущего узла.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Pattern, Union

from .bridge import PathBridge

DEFAULT_INTERPOLATION_REGEX = r"\{(.*?)\}"


class Interpolator:
    """
    Args:
        bridge: Адаптер для вычисления выражений
        enabled: Включена ли интерполяция
        regex: Шаблон разделителя; первая группа захвата - выражение
    """

    def __init__(
            self,
            bridge: PathBridge,
            enabled: bool = True,
            regex: Union[str, Pattern[str]] = DEFAULT_INTERPOLATION_REGEX,
    ):
        self.bridge = bridge
        self.enabled = enabled
        self.pattern = re.compile(regex, re.DOTALL) if isinstance(regex, str) else regex

    def interpolate(self, node: Any, template: Optional[str]) -> str:
        if not template:
            return ""
        if not self.enabled:
            return template

        # Один проход: подставленный текст повторно не сканируется
        return self.pattern.sub(
            lambda m: self.bridge.to_string(self.bridge.evaluate(m.group(1), node)),
            template,
        )


__all__ = ["Interpolator", "DEFAULT_INTERPOLATION_REGEX"]
