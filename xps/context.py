"""
Контекст прохода рендеринга.

Хранит реестр правил, настройки и активный адаптер дерева, а также
отслеживает движок, который выполняет рендеринг прямо сейчас (для
функций языка стилей, вызываемых из колбэков).
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

from .bridge import PathBridge, create_bridge
from .config import RenderConfig
from .errors import XpsError
from .registry import TemplateRegistry

if TYPE_CHECKING:
    from .processor import RenderEngine


@dataclass
class RenderContext:
    """
    Состояние одного прохода рендеринга.

    Создается до начала рендеринга и отбрасывается после возврата из
    вызова верхнего уровня.
    """
    registry: TemplateRegistry
    bridge: PathBridge
    config: RenderConfig = field(default_factory=RenderConfig)

    @classmethod
    def create(
            cls,
            registry: TemplateRegistry,
            document=None,
            config: Optional[RenderConfig] = None,
    ) -> RenderContext:
        """Создает контекст с адаптером, выбранным по config.backend."""
        config = config or RenderConfig()
        bridge = create_bridge(config.backend, document=document, namespaces=config.namespaces)
        return cls(registry=registry, bridge=bridge, config=config)


_current_engine: ContextVar[Optional["RenderEngine"]] = ContextVar("xps_current_engine", default=None)


def current_engine() -> "RenderEngine":
    """
    Возвращает движок активного прохода рендеринга.

    Raises:
        XpsError: Если рендеринг не запущен
    """
    engine = _current_engine.get()
    if engine is None:
        raise XpsError("No active rendering pass: call this from within RenderEngine.render()")
    return engine


def current_context() -> RenderContext:
    return current_engine().context


@contextmanager
def activate(engine: "RenderEngine") -> Iterator["RenderEngine"]:
    """Делает engine активным на время блока (вложенные вызовы допустимы)."""
    token = _current_engine.set(engine)
    try:
        yield engine
    finally:
        _current_engine.reset(token)


__all__ = ["RenderContext", "current_engine", "current_context", "activate"]
