"""
Адаптеры над провайдерами дерева и path-запросов.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .lxml_bridge import LxmlBridge
from .protocol import PathBridge
from ..errors import ConfigError

_BACKENDS = {
    LxmlBridge.name: LxmlBridge,
}


def create_bridge(
        backend: str = LxmlBridge.name,
        document: Any = None,
        namespaces: Optional[Dict[str, str]] = None,
) -> PathBridge:
    """
    Создает адаптер по имени бэкенда.

    Raises:
        ConfigError: Если бэкенд не известен
    """
    try:
        factory = _BACKENDS[backend]
    except KeyError:
        available = ", ".join(sorted(_BACKENDS))
        raise ConfigError(f"Unknown tree backend '{backend}'. Available backends: {available}") from None
    return factory(document=document, namespaces=namespaces)


__all__ = ["PathBridge", "LxmlBridge", "create_bridge"]
