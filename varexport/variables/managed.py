import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from varexport.exceptions import InvalidVariableError, VariableAccessError
from varexport.variables.base import Clock, Variable, system_clock


class ManagedVariable(Variable):
    """
    A variable whose value is set explicitly by its owner.

    Use it instead of the `export` decorator when the value is pushed by the code
    rather than read from an attribute:

        queue_depth = ManagedVariable.builder().set_name("queueDepth").set_value(5).build()
        exporter.export_variable(queue_depth)
        ...
        queue_depth.set(12)
    """

    def __init__(
        self,
        name: str,
        value: Any = None,
        doc: str | None = "",
        expand: bool = False,
        tags: Iterable[str] | None = frozenset(),
        clock: Clock = system_clock,
    ):
        if name is None:
            raise InvalidVariableError("name must not be None for ManagedVariable")
        if tags is None:
            raise InvalidVariableError("tags must not be None for ManagedVariable", var_name=name)

        super().__init__(name, doc=doc, expand=expand, tags=tags)
        self._clock = clock
        self._value = value
        self._last_updated = clock()

    @staticmethod
    def builder() -> "ManagedVariableBuilder":
        return ManagedVariableBuilder()

    def set(self, value: Any) -> None:
        """Replace the value and stamp the update time."""
        self._value = value
        self._last_updated = self._clock()

    @property
    def is_live(self) -> bool:
        return True

    @property
    def last_updated(self) -> int:
        return self._last_updated

    def can_expand(self) -> bool:
        return self._value is not None and isinstance(self._value, Mapping)

    def get_value(self) -> Any:
        return self._value


class ManagedVariableBuilder:
    """Fluent builder for `ManagedVariable`. Validation happens in `build`."""

    def __init__(self) -> None:
        self._name: str | None = None
        self._doc = ""
        self._expand = False
        self._tags: Iterable[str] | None = frozenset()
        self._value: Any = None
        self._clock: Clock = system_clock

    def set_name(self, name: str) -> "ManagedVariableBuilder":
        self._name = name
        return self

    def set_doc(self, doc: str) -> "ManagedVariableBuilder":
        self._doc = doc
        return self

    def set_expand(self, expand: bool) -> "ManagedVariableBuilder":
        self._expand = expand
        return self

    def set_tags(self, tags: Iterable[str] | None) -> "ManagedVariableBuilder":
        self._tags = tags
        return self

    def set_value(self, value: Any) -> "ManagedVariableBuilder":
        self._value = value
        return self

    def set_clock(self, clock: Clock) -> "ManagedVariableBuilder":
        self._clock = clock
        return self

    def build(self) -> ManagedVariable:
        return ManagedVariable(
            self._name,
            value=self._value,
            doc=self._doc,
            expand=self._expand,
            tags=self._tags,
            clock=self._clock,
        )


class LazilyManagedVariable(Variable):
    """
    A variable computed by a supplier on first read and kept until invalidated.

    The supplier runs at most once per invalidation; concurrent first reads wait
    for the same computation.
    """

    def __init__(
        self,
        name: str,
        supplier: Callable[[], Any],
        doc: str | None = "",
        expand: bool = False,
        tags: Iterable[str] = frozenset(),
        clock: Clock = system_clock,
    ):
        if name is None:
            raise InvalidVariableError("name must not be None for LazilyManagedVariable")
        super().__init__(name, doc=doc, expand=expand, tags=tags)
        self._supplier = supplier
        self._clock = clock
        self._lock = threading.Lock()
        self._computed = False
        self._value: Any = None
        self._last_updated: int | None = None

    def set_supplier(self, supplier: Callable[[], Any]) -> None:
        """Swap the supplier; the next read recomputes."""
        with self._lock:
            self._supplier = supplier
            self._computed = False

    def invalidate(self) -> None:
        """Drop the computed value; the next read recomputes."""
        with self._lock:
            self._computed = False

    @property
    def last_updated(self) -> int | None:
        return self._last_updated

    def get_value(self) -> Any:
        with self._lock:
            if not self._computed:
                try:
                    self._value = self._supplier()
                except Exception as e:
                    raise VariableAccessError(f"supplier failed: {e}", var_name=self.name) from e
                self._computed = True
                self._last_updated = self._clock()
            return self._value
