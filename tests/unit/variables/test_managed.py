import pytest

from varexport.exceptions import InvalidVariableError, VariableAccessError
from varexport.variables import LazilyManagedVariable, ManagedVariable


class TestManagedVariable:
    def test_builder_builds_variable(self):
        var = (
            ManagedVariable.builder()
            .set_name("myvar")
            .set_doc("my doc")
            .set_tags({"t"})
            .set_value(524)
            .build()
        )
        assert var.name == "myvar"
        assert var.doc == "my doc"
        assert var.tags == frozenset({"t"})
        assert var.get_value() == 524

    def test_builder_without_name_fails(self):
        with pytest.raises(InvalidVariableError, match="name must not be None"):
            ManagedVariable.builder().set_value(1).build()

    def test_builder_with_none_tags_fails(self):
        with pytest.raises(InvalidVariableError, match="tags must not be None"):
            ManagedVariable.builder().set_name("x").set_tags(None).build()

    def test_set_updates_value_and_timestamp(self, clock):
        """queueDepth scenario: value and last-updated follow every set call."""
        clock.now = 1_000
        var = ManagedVariable("queueDepth", value=5, clock=clock)
        assert var.get_value() == 5
        assert var.last_updated == 1_000

        clock.advance(250)
        var.set(12)
        assert var.get_value() == 12
        assert var.last_updated == 1_250

    def test_always_live(self):
        assert ManagedVariable("x").is_live is True

    def test_expandable_only_with_mapping_value(self):
        var = ManagedVariable("x", value=None, expand=True)
        assert not var.is_expandable()
        var.set({"a": 1})
        assert var.is_expandable()
        var.set("not a map")
        assert not var.is_expandable()

    def test_not_expandable_without_flag(self):
        assert not ManagedVariable("x", value={"a": 1}).is_expandable()


class TestLazilyManagedVariable:
    def test_supplier_called_once(self, clock):
        calls = []

        def supplier():
            calls.append(1)
            return len(calls)

        var = LazilyManagedVariable("lazy", supplier, clock=clock)
        assert var.last_updated is None
        assert var.get_value() == 1
        assert var.get_value() == 1
        assert len(calls) == 1
        assert var.last_updated == 0

    def test_invalidate_recomputes(self):
        values = iter([1, 2])
        var = LazilyManagedVariable("lazy", lambda: next(values))
        assert var.get_value() == 1
        var.invalidate()
        assert var.get_value() == 2

    def test_set_supplier_recomputes(self):
        var = LazilyManagedVariable("lazy", lambda: "old")
        assert var.get_value() == "old"
        var.set_supplier(lambda: "new")
        assert var.get_value() == "new"

    def test_supplier_failure_surfaces(self):
        def supplier():
            raise ValueError("boom")

        var = LazilyManagedVariable("lazy", supplier)
        with pytest.raises(VariableAccessError, match="boom") as exc:
            var.get_value()
        assert isinstance(exc.value.__cause__, ValueError)
