import io
import logging
from collections.abc import Mapping

import pytest

from varexport.exceptions import VariableError
from varexport.variables import ManagedVariable, Variable, escape_property


class StaticVariable(Variable):
    """Minimal concrete variable returning a fixed value."""

    def __init__(self, name, value, **kwargs):
        super().__init__(name, **kwargs)
        self._value = value

    def get_value(self):
        return self._value


class MutatingMapping(Mapping):
    """Mapping whose iteration modifies its own storage, like a map updated by another thread."""

    def __init__(self):
        self._data = {"a": 1, "b": 2}

    def __getitem__(self, key):
        return self._data[key]

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        for key in self._data:
            self._data[f"{key}-new"] = 0
            yield key


class TestEscapeProperty:
    def test_plain_text_unchanged(self):
        assert escape_property("queue-depth_1") == "queue-depth_1"

    def test_separators_and_comments_escaped(self):
        assert escape_property("a=b:c#d!e") == "a\\=b\\:c\\#d\\!e"

    def test_control_characters_escaped(self):
        assert escape_property("line1\nline2\ttab\\") == "line1\\nline2\\ttab\\\\"

    def test_spaces_in_keys_always_escaped(self):
        assert escape_property("a b", is_key=True) == "a\\ b"

    def test_only_leading_space_escaped_in_values(self):
        assert escape_property(" a b") == "\\ a b"

    def test_non_ascii_written_as_unicode_escape(self):
        assert escape_property("café") == "caf\\u00E9"

    def test_astral_characters_written_as_surrogate_pair(self):
        assert escape_property("\U0001F600") == "\\uD83D\\uDE00"


class TestVariableBasics:
    def test_identity_and_metadata(self):
        """Name, doc and tags are exposed as given."""
        var = StaticVariable("name", 1, doc="some doc", tags={"a", "b"})
        assert var.name == "name"
        assert var.doc == "some doc"
        assert var.tags == frozenset({"a", "b"})
        assert var.has_tag("a")
        assert not var.has_tag("c")

    def test_defaults(self):
        var = StaticVariable("name", 1, doc=None)
        assert var.doc == ""
        assert var.tags == frozenset()
        assert var.last_updated is None
        assert var.is_live is False

    def test_value_string_uses_null_for_none(self):
        assert StaticVariable("name", None).value_string() == "null"
        assert StaticVariable("name", 42).value_string() == "42"

    def test_expandable_requires_flag_and_mapping(self):
        assert StaticVariable("m", {"a": 1}, expand=True).is_expandable()
        assert not StaticVariable("m", {"a": 1}, expand=False).is_expandable()
        assert not StaticVariable("m", [1, 2], expand=True).is_expandable()

    def test_expand_returns_snapshot(self):
        """Expansion copies the mapping, so later changes do not leak into the snapshot."""
        data = {"a": 1, "b": 2}
        var = StaticVariable("m", data, expand=True)
        snapshot = var.expand()
        data["c"] = 3
        assert snapshot == {"a": 1, "b": 2}

    def test_expand_non_expandable_raises(self):
        with pytest.raises(VariableError, match="not expandable"):
            StaticVariable("m", 5, expand=True).expand()

    def test_expand_rechecks_value_it_iterates(self):
        class Flipping(StaticVariable):
            def can_expand(self):
                return True

        with pytest.raises(VariableError, match="not expandable"):
            Flipping("m", 5, expand=True).expand()

    def test_expand_concurrent_modification_yields_error_entry(self, caplog):
        """A mapping changing under iteration degrades to one 'error' entry and a warning."""
        var = StaticVariable("m", MutatingMapping(), expand=True)
        with caplog.at_level(logging.WARNING, logger="varexport"):
            result = var.expand()
        assert list(result) == ["error"]
        assert "changed size during iteration" in result["error"]
        assert "Failed to iterate map entries for variable m" in caplog.text


class TestVariableWrite:
    def test_write_plain_line(self):
        out = io.StringIO()
        StaticVariable("my var", "a=b").write(out)
        assert out.getvalue() == "my\\ var=a\\=b\n"

    def test_write_with_doc_and_timestamp(self, clock):
        clock.now = 1_700_000_000_000
        var = ManagedVariable("depth", value=3, doc="queue depth\nsecond line", clock=clock)
        out = io.StringIO()
        var.write(out, include_doc=True)
        lines = out.getvalue().splitlines()
        assert lines[0] == "# queue depth"
        assert lines[1] == "# second line"
        assert lines[2].startswith("# last updated 2023-11-")
        assert lines[3] == "depth=3"

    def test_write_with_doc_skips_empty_doc(self):
        out = io.StringIO()
        StaticVariable("x", 1).write(out, include_doc=True)
        assert out.getvalue() == "x=1\n"
