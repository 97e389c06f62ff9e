"""
Base exceptions of the XPathScript rendering engine.

Errors raised by stylesheet callbacks are NOT wrapped into these classes:
they propagate to the caller of the top-level render call unchanged.
"""

from __future__ import annotations


class XpsError(Exception):
    """
    Base class for all errors raised by the engine itself.
    """
    pass


class TaintMixingError(XpsError):
    """
    Результат рендеринга узла содержит символьный текст, а включен строгий
    (байтовый) режим вывода.

    Атрибуты location и text указывают на узел и на отрендеренный фрагмент.
    """

    def __init__(self, location: str, text: str):
        super().__init__(
            "Wrong translation by stylesheet (result is Unicode-tainted) "
            f"at {location}\n{text}\n"
        )
        self.location = location
        self.text = text


class ConfigError(XpsError):
    """Некорректная конфигурация рендеринга (файл или значения)."""
    pass


__all__ = ["XpsError", "TaintMixingError", "ConfigError"]
