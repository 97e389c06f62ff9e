"""
Протокол адаптера над внешним провайдером дерева и path-запросов.

Движок рендеринга работает с узлами только через этот интерфейс и
никогда не ветвится по типу бэкенда.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Protocol, runtime_checkable

# Токены шагов пути для неэлементных узлов
TEXT_STEP = "text()"
COMMENT_STEP = "comment()"
PI_STEP = "processing-instruction()"


@runtime_checkable
class PathBridge(Protocol):
    """
    Возможности провайдера дерева, нужные движку.

    Узлы непрозрачны: движок их не создает и не хранит дольше одного
    вызова рендеринга.
    """

    name: str
    document: Any  # документ по умолчанию для путей без контекста

    # ---- Классификация узлов ----

    def is_document(self, node: Any) -> bool: ...

    def is_element(self, node: Any) -> bool: ...

    def is_text(self, node: Any) -> bool:
        """Истинно только для "настоящих" текстовых узлов (не комментариев)."""
        ...

    def is_comment(self, node: Any) -> bool: ...

    def is_pi(self, node: Any) -> bool: ...

    def is_nodeset(self, node: Any) -> bool: ...

    def is_node(self, value: Any) -> bool:
        """Истинно для любого узла дерева (в том числе текста и атрибутов)."""
        ...

    # ---- Навигация ----

    def document_element(self, document: Any) -> Any: ...

    def children(self, node: Any) -> List[Any]: ...

    def has_children(self, node: Any) -> bool: ...

    def parent(self, node: Any) -> Optional[Any]: ...

    def same_node(self, a: Any, b: Any) -> bool:
        """Сравнение узлов по идентичности (не по структуре)."""
        ...

    def children_named(self, parent: Any, name: str) -> List[Any]:
        """
        Дочерние узлы parent с заданным именем (запрос по оси child).

        name - имя элемента либо один из токенов text(), comment(),
        processing-instruction().
        """
        ...

    # ---- Имена и сериализация ----

    def tag_name(self, node: Any) -> Optional[str]: ...

    def namespace_declarations(self, node: Any) -> Iterable[str]:
        """Объявления пространств имен в виде ' xmlns:p="uri"'."""
        ...

    def attributes(self, node: Any) -> Iterable[str]:
        """Атрибуты в виде ' name="value"'."""
        ...

    def serialize(self, node: Any) -> str: ...

    def text_content(self, node: Any) -> str: ...

    # ---- Path-выражения ----

    def evaluate(self, path: str, context: Optional[Any] = None, **variables: Any) -> Any:
        """Вычисляет выражение: скаляр, строка или список узлов."""
        ...

    def find_nodes(self, path: str, context: Optional[Any] = None) -> List[Any]: ...

    def to_string(self, value: Any) -> str:
        """Строковое представление результата вычисления path-выражения."""
        ...

    def set_namespace(self, prefix: str, uri: str) -> None: ...


__all__ = ["PathBridge", "TEXT_STEP", "COMMENT_STEP", "PI_STEP"]
