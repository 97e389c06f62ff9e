"""
Движок рендеринга XPathScript.

Рекурсивно обходит дерево документа, для каждого узла находит правило
в реестре, вызывает колбэк правила и собирает результат из фрагментов
правила и отрендеренных дочерних узлов.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from .config import RenderConfig
from .context import RenderContext, activate
from .errors import XpsError
from .interpolation import Interpolator
from .locator import LocationResolver
from .registry import COMMENT_SELECTORS, TEXT_SELECTORS, WILDCARD, TemplateRegistry
from .taint import TaintGuard
from .types import Control, ControlResult, OverrideRecord, Rule, SelectChildren, to_control

logger = logging.getLogger(__name__)


class RenderEngine:
    """
    Основной движок рендеринга.
    """

    def __init__(self, context: RenderContext):
        """
        Args:
            context: Реестр правил, настройки и адаптер дерева
        """
        self.context = context
        self.registry = context.registry
        self.bridge = context.bridge

        config = context.config
        self.interpolator = Interpolator(self.bridge, config.interpolation, config.compiled_regex())
        self.locator = LocationResolver(self.bridge)
        self.taint_guard = TaintGuard(config.binmode, self.locator.locate)

    # ======= Публичный API =======

    def render(self, nodes: Iterable[Any]) -> str:
        """
        Рендерит узлы по порядку и склеивает результаты.

        Ошибки колбэков пробрасываются без изменений, частичный
        результат не возвращается.
        """
        with activate(self), self.registry.render_pass():
            return self._render_nodes(nodes)

    def apply_templates(self, *args: Any) -> str:
        """
        Применяет правила к узлам.

        Формы вызова:
            apply_templates()                 - весь документ
            apply_templates(path[, context])  - узлы, выбранные выражением
            apply_templates(nodelist)         - узлы списка
            apply_templates(node, ...)        - перечисленные узлы
        """
        if not args:
            if self.bridge.document is None:
                raise XpsError("No document bound to render")
            return self.render([self.bridge.document])

        first, *rest = args
        # Узел-строка (например, текстовый) - это узел, а не выражение
        if isinstance(first, str) and not self.bridge.is_node(first):
            context = rest[0] if rest else None
            return self.render(self.bridge.find_nodes(first, context))
        if self.bridge.is_nodeset(first):
            return self.render(first)
        return self.render(args)

    def render_one(self, node: Any) -> str:
        bridge = self.bridge

        if bridge.is_document(node):
            node = bridge.document_element(node)

        if bridge.is_element(node):
            result = self._render_element(node)
        elif bridge.is_text(node):
            result = self._render_text(node)
        elif bridge.is_comment(node):
            result = self._render_comment(node)
        elif bridge.is_pi(node):
            result = self._render_pi(node)
        else:
            result = bridge.serialize(node)

        self.taint_guard.check(node, result)
        return result

    def call_template(
            self,
            node: Any,
            overrides: OverrideRecord,
            rule: Union[Rule, Mapping[str, Any], str],
    ) -> Any:
        """
        Применяет правило к узлу, даже если селектор правила узлу не подходит.

        Предназначен для вызова из колбэков: возвращает результат, который
        колбэк может вернуть движку как свой.

        Args:
            node: Текущий узел
            overrides: Словарь переопределений вызывающего колбэка
            rule: Правило, словарь полей правила или имя селектора
        """
        rule = self._resolve_rule(rule)

        if rule.callback is not None:
            return rule.callback(node, overrides)

        if rule.wraps_children:
            logger.warning(
                "call_template: cannot handle rules with child wrappers yet; "
                "rendering %s with empty pre/post",
                self.locator.locate(node),
            )
            overrides["pre"] = ""
            overrides["post"] = ""
            return Control.RENDER_SELF_AND_KIDS

        overrides["pre"] = rule.pre
        overrides["post"] = rule.post
        return Control.RENDER_SELF_AND_KIDS

    def start_tag(self, node: Any) -> str:
        name = self.bridge.tag_name(node)
        if not name:
            return ""
        return (
            f"<{name}"
            + "".join(self.bridge.namespace_declarations(node))
            + "".join(self.bridge.attributes(node))
            + ">"
        )

    def end_tag(self, node: Any) -> str:
        name = self.bridge.tag_name(node)
        return f"</{name}>" if name else ""

    # ======= Внутренние методы =======

    def _render_nodes(self, nodes: Iterable[Any]) -> str:
        return "".join(self.render_one(node) for node in nodes)

    def _resolve_rule(self, rule: Union[Rule, Mapping[str, Any], str]) -> Rule:
        if isinstance(rule, Rule):
            return rule
        if isinstance(rule, str):
            found = self.registry.lookup(rule)
            if found is None:
                raise XpsError(f"No rule registered for selector '{rule}'")
            return found
        return Rule.from_mapping(rule)

    def _render_element(self, node: Any) -> str:
        bridge = self.bridge
        selector = bridge.tag_name(node)
        rule = self.registry.lookup(selector) if selector is not None else None

        # Нет своего правила - пробуем общее '*'
        if rule is None:
            selector = WILDCARD
            rule = self.registry.lookup(WILDCARD)
            if rule is None:
                # Ни своего, ни общего: узел выводится как есть
                parts = [self.start_tag(node)]
                for kid in bridge.children(node):
                    parts.append(self.render_one(kid))
                parts.append(self.end_tag(node))
                return "".join(parts)

        overrides: OverrideRecord = {}
        control: ControlResult = Control.RENDER_SELF_AND_KIDS
        if rule.callback is not None:
            control = to_control(rule.callback(node, overrides))
            if control is Control.SKIP:
                return ""

        # Копия правила с переопределениями действует на всё поддерево узла
        effective = rule.merged(overrides)
        with self.registry.scoped_override(selector, effective):
            prefix, suffix = self._wrappers(node, effective)

            if isinstance(control, SelectChildren):
                kids = bridge.find_nodes(control.path, node)
            elif control is Control.RENDER_SELF_ONLY:
                return prefix + suffix
            else:
                kids = bridge.children(node)

            # Не больше двух кадров стека на уровень вложенности
            interpolate = self.interpolator.interpolate
            parts = [prefix]
            for kid in kids:
                # Обертки prechild/postchild только вокруг элементов
                wrap = bridge.is_element(kid)
                if wrap:
                    parts.append(interpolate(node, effective.prechild))
                parts.append(self.render_one(kid))
                if wrap:
                    parts.append(interpolate(node, effective.postchild))
            parts.append(suffix)
            return "".join(parts)

    def _wrappers(self, node: Any, rule: Rule) -> Tuple[str, str]:
        """Фрагменты до и после дочерних узлов элемента."""
        interpolate = self.interpolator.interpolate
        has_kids = self.bridge.has_children(node)

        prefix = interpolate(node, rule.pre)
        if rule.show_tag:
            prefix += self.start_tag(node)
        prefix += rule.intro or ""
        if has_kids:
            prefix += interpolate(node, rule.prechildren)

        suffix = interpolate(node, rule.postchildren) if has_kids else ""
        suffix += rule.extro or ""
        if rule.show_tag:
            suffix += self.end_tag(node)
        suffix += interpolate(node, rule.post)
        return prefix, suffix

    def _render_text(self, node: Any) -> str:
        selector, rule = self.registry.lookup_first(*TEXT_SELECTORS)
        if rule is None:
            return self.bridge.serialize(node)

        middle = ""
        if rule.callback is not None:
            overrides: OverrideRecord = {}
            control = to_control(rule.callback(node, overrides))
            if control is Control.SKIP:
                return ""
            # Для текста переопределения действуют до конца прохода
            if overrides:
                rule = self.registry.merge_live(selector, overrides)
            if control is Control.TEXT_AS_CHILD:
                middle = self.bridge.serialize(node)

        return (rule.pre or "") + middle + (rule.post or "")

    def _render_comment(self, node: Any) -> str:
        selector, rule = self.registry.lookup_first(*COMMENT_SELECTORS)
        if rule is None:
            return self.bridge.serialize(node)

        middle = self.bridge.text_content(node)
        if rule.callback is not None:
            overrides: OverrideRecord = {}
            control = to_control(rule.callback(node, overrides))
            if control is Control.SKIP:
                return ""
            if overrides:
                rule = self.registry.merge_live(selector, overrides)
            if control is Control.RENDER_SELF_ONLY:
                middle = ""

        return (rule.pre or "") + middle + (rule.post or "")

    def _render_pi(self, node: Any) -> str:
        # Инструкции обработки верхнего уровня документа не выводятся
        parent = self.bridge.parent(node)
        if parent is None or self.bridge.parent(parent) is None:
            return ""
        return self.bridge.serialize(node)


def create_engine(
        rules: Union[TemplateRegistry, Mapping[str, Any]],
        document: Any = None,
        config: Optional[RenderConfig] = None,
) -> RenderEngine:
    """
    Создает движок с готовым контекстом рендеринга.

    Args:
        rules: Реестр или словарь селектор -> правило (Rule или словарь полей)
        document: Документ по умолчанию для путей без контекста
        config: Настройки рендеринга

    Returns:
        Настроенный движок
    """
    registry = rules if isinstance(rules, TemplateRegistry) else TemplateRegistry.from_mapping(rules)
    return RenderEngine(RenderContext.create(registry, document=document, config=config))


__all__ = ["RenderEngine", "create_engine"]
