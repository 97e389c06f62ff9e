"""
Бэкенд PathBridge на базе lxml.

Текстовые узлы представлены "умными строками" lxml (результаты осей
node()/text()), которые знают свой элемент-владелец и слот (text/tail).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional
from xml.sax.saxutils import escape

from lxml import etree

from .protocol import COMMENT_STEP, PI_STEP, TEXT_STEP
from ..errors import XpsError

logger = logging.getLogger(__name__)

XML_NS = "http://www.w3.org/XML/1998/namespace"

_ATTR_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}


class LxmlBridge:
    """
    Адаптер над lxml.etree.

    Args:
        document: Документ (ElementTree или любой его элемент), относительно
                  которого вычисляются пути без явного контекста
        namespaces: Префиксы пространств имен для path-выражений
    """

    name = "lxml"

    def __init__(self, document: Any = None, namespaces: Optional[Dict[str, str]] = None):
        self.document: Optional[etree._ElementTree] = None
        self.namespaces: Dict[str, str] = {}
        if document is not None:
            self.bind(document)
        for prefix, uri in (namespaces or {}).items():
            self.set_namespace(prefix, uri)

    def bind(self, document: Any) -> None:
        """Привязывает документ по умолчанию."""
        if isinstance(document, etree._ElementTree):
            self.document = document
        elif isinstance(document, etree._Element):
            self.document = document.getroottree()
        else:
            raise TypeError(f"Cannot bind {type(document).__name__} as a document")

    # ======= Классификация =======

    def is_document(self, node: Any) -> bool:
        return isinstance(node, etree._ElementTree)

    def is_element(self, node: Any) -> bool:
        # Комментарии, PI и сущности в lxml тоже _Element, но с не-строковым tag
        return isinstance(node, etree._Element) and isinstance(node.tag, str)

    def is_text(self, node: Any) -> bool:
        return isinstance(node, etree._ElementUnicodeResult) and (node.is_text or node.is_tail)

    def is_comment(self, node: Any) -> bool:
        return isinstance(node, etree._Comment)

    def is_pi(self, node: Any) -> bool:
        return isinstance(node, etree._ProcessingInstruction)

    def is_nodeset(self, node: Any) -> bool:
        return isinstance(node, (list, tuple))

    def is_node(self, value: Any) -> bool:
        return isinstance(value, (etree._Element, etree._ElementTree, etree._ElementUnicodeResult))

    # ======= Навигация =======

    def document_element(self, document: Any) -> Any:
        return document.getroot()

    def children(self, node: Any) -> List[Any]:
        if self.is_document(node):
            root = node.getroot()
            if root is None:
                return []
            preceding = list(root.itersiblings(preceding=True))
            preceding.reverse()
            return preceding + [root] + list(root.itersiblings())
        if self.is_element(node):
            return node.xpath("node()")
        return []

    def has_children(self, node: Any) -> bool:
        if self.is_document(node):
            return node.getroot() is not None
        if self.is_element(node):
            return node.text is not None or len(node) > 0
        return False

    def parent(self, node: Any) -> Optional[Any]:
        if self.is_document(node):
            return None
        if self.is_text(node):
            owner = node.getparent()
            if owner is None:
                return None
            if not node.is_tail:
                return owner
            return self._element_parent(owner)
        if isinstance(node, etree._Element):
            return self._element_parent(node)
        return None

    @staticmethod
    def _element_parent(node: etree._Element) -> Any:
        # Родитель корня и узлов верхнего уровня - сам документ
        parent = node.getparent()
        return parent if parent is not None else node.getroottree()

    def same_node(self, a: Any, b: Any) -> bool:
        if self.is_text(a) and self.is_text(b):
            return a.getparent() is b.getparent() and a.is_tail == b.is_tail
        if self.is_document(a) and self.is_document(b):
            return a.getroot() is b.getroot()
        return a is b

    def step_name(self, node: Any) -> Optional[str]:
        """Имя шага пути для узла: имя элемента или токен типа узла."""
        if self.is_element(node):
            return self.tag_name(node)
        if self.is_text(node):
            return TEXT_STEP
        if self.is_comment(node):
            return COMMENT_STEP
        if self.is_pi(node):
            return PI_STEP
        return None

    def children_named(self, parent: Any, name: str) -> List[Any]:
        if self.is_document(parent):
            return [kid for kid in self.children(parent) if self.step_name(kid) == name]
        if not self.is_element(parent):
            return []
        if name in (TEXT_STEP, COMMENT_STEP, PI_STEP):
            return parent.xpath(f"./{name}")
        return parent.xpath("./*[name() = $name]", name=name)

    # ======= Имена и сериализация =======

    def tag_name(self, node: Any) -> Optional[str]:
        if self.is_pi(node):
            return node.target
        if not self.is_element(node):
            return None
        local = etree.QName(node).localname
        return f"{node.prefix}:{local}" if node.prefix else local

    def namespace_declarations(self, node: Any) -> Iterator[str]:
        parent = node.getparent()
        inherited = parent.nsmap if parent is not None else {}
        for prefix, uri in node.nsmap.items():
            if prefix in inherited and inherited[prefix] == uri:
                continue
            attr = f"xmlns:{prefix}" if prefix else "xmlns"
            yield f' {attr}="{escape(uri, _ATTR_ENTITIES)}"'

    def attributes(self, node: Any) -> Iterator[str]:
        for key, value in node.attrib.items():
            yield f' {self._attribute_name(node, key)}="{escape(value, _ATTR_ENTITIES)}"'

    @staticmethod
    def _attribute_name(node: etree._Element, key: str) -> str:
        if not key.startswith("{"):
            return key
        qname = etree.QName(key)
        if qname.namespace == XML_NS:
            return f"xml:{qname.localname}"
        for prefix, uri in node.nsmap.items():
            if prefix and uri == qname.namespace:
                return f"{prefix}:{qname.localname}"
        return qname.localname

    def serialize(self, node: Any) -> str:
        if self.is_text(node):
            return escape(str(node))
        if isinstance(node, etree._ElementUnicodeResult) and node.is_attribute:
            return f' {node.attrname}="{escape(str(node), _ATTR_ENTITIES)}"'
        if isinstance(node, etree._Element):
            return etree.tostring(node, encoding="unicode", with_tail=False)
        if self.is_document(node):
            return etree.tostring(node, encoding="unicode")
        return str(node)

    def text_content(self, node: Any) -> str:
        if self.is_document(node):
            root = node.getroot()
            return "" if root is None else self.text_content(root)
        if self.is_element(node):
            return node.xpath("string()")
        if isinstance(node, etree._Element):
            return node.text or ""
        return str(node)

    # ======= Path-выражения =======

    def evaluate(self, path: str, context: Optional[Any] = None, **variables: Any) -> Any:
        """
        Вычисляет path-выражение относительно context (по умолчанию -
        привязанный документ).

        Текстовый узел как контекст заменяется элементом, которому он
        принадлежит. Для документа относительные пути вычисляются от
        корневого элемента (поведение lxml).
        """
        if context is None:
            context = self.document
            if context is None:
                raise XpsError(f"No document bound to evaluate '{path}'")
        if self.is_text(context):
            context = self.parent(context)
        return context.xpath(path, namespaces=self.namespaces or None, **variables)

    def find_nodes(self, path: str, context: Optional[Any] = None) -> List[Any]:
        result = self.evaluate(path, context)
        if isinstance(result, list):
            return result
        return []

    def to_string(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            return str(int(value)) if value.is_integer() else str(value)
        if isinstance(value, (list, tuple)):
            return "".join(self.to_string(item) for item in value)
        if isinstance(value, str):
            return str(value)
        if isinstance(value, (etree._Element, etree._ElementTree)):
            return self.text_content(value)
        return str(value)

    def set_namespace(self, prefix: str, uri: str) -> None:
        if not prefix:
            raise ValueError("XPath does not support an empty namespace prefix")
        logger.debug("Registering namespace prefix '%s' -> %s", prefix, uri)
        self.namespaces[prefix] = uri


__all__ = ["LxmlBridge"]
