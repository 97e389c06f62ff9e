"""
Тесты реестра правил и временных переопределений.
"""

import pytest

from xps.registry import TemplateRegistry, WILDCARD
from xps.types import Rule


class TestTemplateRegistry:

    def setup_method(self):
        self.registry = TemplateRegistry.from_mapping({
            "para": {"pre": "<p>", "post": "</p>"},
            WILDCARD: Rule(show_tag=True),
        })

    def test_lookup(self):
        assert self.registry.lookup("para").pre == "<p>"
        assert self.registry.lookup(WILDCARD).show_tag is True
        assert self.registry.lookup("missing") is None

    def test_lookup_first_prefers_order(self):
        self.registry.set_rule("text()", {"pre": "B"})
        assert self.registry.lookup_first("#text", "text()")[0] == "text()"

        self.registry.set_rule("#text", {"pre": "A"})
        selector, rule = self.registry.lookup_first("#text", "text()")
        assert selector == "#text"
        assert rule.pre == "A"

    def test_lookup_first_nothing_found(self):
        assert self.registry.lookup_first("#comment", "comment()") == (None, None)

    def test_scoped_override_restores_previous_rule(self):
        original = self.registry.lookup("para")

        with self.registry.scoped_override("para", original.merged({"pre": "<P>"})):
            assert self.registry.lookup("para").pre == "<P>"
            assert self.registry.depth == 1

        assert self.registry.lookup("para") is original
        assert self.registry.depth == 0

    def test_scoped_override_nested(self):
        with self.registry.scoped_override("para", Rule(pre="1")):
            with self.registry.scoped_override("para", Rule(pre="2")):
                assert self.registry.lookup("para").pre == "2"
                assert self.registry.depth == 2
            assert self.registry.lookup("para").pre == "1"
        assert self.registry.lookup("para").pre == "<p>"

    def test_scoped_override_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with self.registry.scoped_override("para", Rule(pre="tmp")):
                raise RuntimeError("boom")

        assert self.registry.lookup("para").pre == "<p>"
        assert self.registry.depth == 0

    def test_scoped_override_of_absent_selector_is_removed(self):
        with self.registry.scoped_override("note", Rule(pre="!")):
            assert "note" in self.registry

        assert "note" not in self.registry

    def test_merge_live_outside_pass_is_permanent(self):
        self.registry.merge_live("para", {"pre": "<para>"})
        assert self.registry.lookup("para").pre == "<para>"

        self.registry.merge_live("#text", {"post": "."})
        assert self.registry.lookup("#text").post == "."

    def test_merge_live_does_not_mutate_registered_rule(self):
        registered = self.registry.lookup("para")

        merged = self.registry.merge_live("para", {"pre": "<para>"})

        assert self.registry.lookup("para") is merged
        assert registered.pre == "<p>"

    def test_render_pass_discards_live_changes(self):
        registered = self.registry.lookup("para")

        with self.registry.render_pass():
            self.registry.merge_live("para", {"pre": "1"})
            self.registry.merge_live("para", {"post": "2"})
            self.registry.merge_live("#text", {"pre": "t"})
            assert (self.registry.lookup("para").pre, self.registry.lookup("para").post) == ("1", "2")

        assert self.registry.lookup("para") is registered
        assert "#text" not in self.registry

    def test_nested_render_pass_restores_only_at_outer_exit(self):
        with self.registry.render_pass():
            with self.registry.render_pass():
                self.registry.merge_live("#comment", {"pre": "c"})
            assert self.registry.lookup("#comment").pre == "c"

        assert "#comment" not in self.registry

    def test_render_pass_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with self.registry.render_pass():
                self.registry.merge_live("para", {"pre": "tmp"})
                raise RuntimeError("boom")

        assert self.registry.lookup("para").pre == "<p>"
