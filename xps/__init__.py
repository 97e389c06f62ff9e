"""
XPathScript: рендеринг XML-документов по правилам, привязанным к именам тегов.

Предоставляет движок, который рекурсивно применяет правила стиля к узлам
дерева и собирает текстовый результат.
"""

from __future__ import annotations

from .config import RenderConfig, load_render_config
from .context import RenderContext
from .errors import ConfigError, TaintMixingError, XpsError
from .processor import RenderEngine, create_engine
from .registry import TemplateRegistry
from .types import Control, Rule, SelectChildren
from .version import tool_version

__version__ = tool_version()

__all__ = [
    "__version__",
    "RenderEngine",
    "RenderContext",
    "RenderConfig",
    "TemplateRegistry",
    "Rule",
    "Control",
    "SelectChildren",
    "XpsError",
    "TaintMixingError",
    "ConfigError",
    "create_engine",
    "load_render_config",
]
