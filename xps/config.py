from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .interpolation import DEFAULT_INTERPOLATION_REGEX

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class RenderConfig:
    """
    Настройки одного прохода рендеринга.

    Заполняются драйвером стилей до начала рендеринга; ядро их только читает.
    """
    interpolation: bool = True
    interpolation_regex: str = DEFAULT_INTERPOLATION_REGEX
    binmode: bool = False  # строгий контроль смешивания текста и байтов
    namespaces: Dict[str, str] = field(default_factory=dict)  # prefix -> uri
    backend: str = "lxml"

    def compiled_regex(self) -> re.Pattern[str]:
        return re.compile(self.interpolation_regex, re.DOTALL)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> RenderConfig:
        """
        Строит конфигурацию из словаря с проверкой типов.

        Raises:
            ConfigError: Неизвестные ключи, неверные типы или некорректный regex
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigError(f"Unknown render config keys: {', '.join(unknown)}")

        for key in ("interpolation", "binmode"):
            if key in raw and not isinstance(raw[key], bool):
                raise ConfigError(f"'{key}' must be a boolean, got {type(raw[key]).__name__}")

        for key in ("interpolation_regex", "backend"):
            if key in raw and not isinstance(raw[key], str):
                raise ConfigError(f"'{key}' must be a string, got {type(raw[key]).__name__}")

        namespaces = raw.get("namespaces") or {}
        if not isinstance(namespaces, Mapping):
            raise ConfigError("'namespaces' must be a mapping of prefix to URI")
        namespaces = {str(prefix): str(uri) for prefix, uri in namespaces.items()}

        cfg = cls(**{**raw, "namespaces": namespaces})
        cfg._validate_regex()
        return cfg

    def _validate_regex(self) -> None:
        try:
            pattern = self.compiled_regex()
        except re.error as e:
            raise ConfigError(f"Invalid interpolation_regex '{self.interpolation_regex}': {e}") from e
        if pattern.groups < 1:
            raise ConfigError(
                f"interpolation_regex '{self.interpolation_regex}' must capture the path in group 1"
            )


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_render_config(path: Path) -> RenderConfig:
    """
    Загрузить настройки рендеринга из YAML.

    • Если файла нет, вернуть дефолты.
    • Документ должен быть словарем.
    """
    if not path.is_file():
        return RenderConfig()

    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Failed to parse render config {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return RenderConfig.from_dict(raw)


__all__ = ["RenderConfig", "load_render_config"]
