"""
Контроль смешивания символьного текста и байтов в выводе.

В строгом (байтовом) режиме результат рендеринга каждого узла должен
оставаться последовательностью байтовых символов: строка, в которой есть
символ вне однобайтового диапазона, "испорчена" (tainted) и при сборке
с байтовым выводом будет молча перекодирована.
"""

from __future__ import annotations

from typing import Any, Callable

from .errors import TaintMixingError


def is_utf8_tainted(value: Any) -> bool:
    """
    Истинно, если value - текст, который нельзя представить однобайтово.

    Байтовые строки никогда не испорчены. Текст испорчен, если его нельзя
    закодировать в latin-1 байт-в-символ.
    """
    if isinstance(value, (bytes, bytearray)):
        return False
    try:
        str(value).encode("latin-1")
    except UnicodeEncodeError:
        return True
    return False


class TaintGuard:
    """
    Args:
        strict: Включен ли строгий байтовый режим
        locate: Функция, вычисляющая путь к узлу для сообщения об ошибке
    """

    def __init__(self, strict: bool, locate: Callable[[Any], str]):
        self.strict = strict
        self.locate = locate

    def check(self, node: Any, rendered: str) -> None:
        """
        Raises:
            TaintMixingError: В строгом режиме, если результат испорчен
        """
        if self.strict and rendered and is_utf8_tainted(rendered):
            raise TaintMixingError(self.locate(node), rendered)


__all__ = ["is_utf8_tainted", "TaintGuard"]
