"""
Общая тестовая инфраструктура XPathScript.

Modules:
- documents: разбор XML и выбор узлов
- engine_utils: создание движка и рендеринг документов
"""

from .documents import parse_xml, text_nodes, first
from .engine_utils import make_engine, render_xml

__all__ = [
    "parse_xml", "text_nodes", "first",
    "make_engine", "render_xml",
]
