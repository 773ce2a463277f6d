from collections.abc import Mapping
from typing import Any

from varexport.exceptions import InvalidVariableError
from varexport.variables.base import Clock, Variable, system_clock


class ProxyVariable(Variable):
    """
    Read-through view of another variable, optionally under a different name.

    Used to republish a namespace's variables in its parent namespace as
    ``<namespace>-<name>``, and as the base of `CachingVariable`. Everything except
    the name is delegated to the wrapped variable on every access.
    """

    def __init__(self, variable: Variable, name: str | None = None):
        super().__init__(variable.name if name is None else name)
        self._variable = variable

    @property
    def variable(self) -> Variable:
        """The wrapped variable."""
        return self._variable

    @property
    def doc(self) -> str:
        return self._variable.doc

    @property
    def tags(self) -> frozenset[str]:
        return self._variable.tags

    @property
    def is_live(self) -> bool:
        return self._variable.is_live

    @property
    def last_updated(self) -> int | None:
        return self._variable.last_updated

    @property
    def expand_declared(self) -> bool:
        return self._variable.expand_declared

    def can_expand(self) -> bool:
        return self._variable.can_expand()

    def is_expandable(self) -> bool:
        return self._variable.is_expandable()

    def get_value(self) -> Any:
        return self._variable.get_value()


class CachingVariable(ProxyVariable):
    """
    Proxy that memoizes the wrapped variable's value for ``timeout_ms`` milliseconds.

    The first read always fetches. Later reads fetch again only once more than
    ``timeout_ms`` has elapsed since the last fetch; `last_updated` reports the time
    of that last fetch rather than the wrapped variable's own stamp.

    Note:
        The cache state is updated without locking. Two threads missing the cache at
        the same moment will both call the wrapped variable and the last one to
        finish wins. Fetches are expected to be idempotent reads, so callers only
        ever observe a valid, possibly slightly fresher, value.
    """

    def __init__(self, variable: Variable, timeout_ms: int, clock: Clock = system_clock):
        if timeout_ms < 0:
            raise InvalidVariableError(f"cache timeout must not be negative, got {timeout_ms}", var_name=variable.name)
        super().__init__(variable)
        self._timeout_ms = timeout_ms
        self._clock = clock
        self._cached_value: Any = None
        self._last_cached: int | None = None

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def clock(self) -> Clock:
        return self._clock

    @clock.setter
    def clock(self, clock: Clock) -> None:
        self._clock = clock

    @property
    def last_updated(self) -> int | None:
        return self._last_cached

    def _is_cache_expired(self) -> bool:
        return self._last_cached is None or self._clock() - self._last_cached > self._timeout_ms

    def get_value(self) -> Any:
        if self._is_cache_expired():
            self._cached_value = super().get_value()
            self._last_cached = self._clock()
        return self._cached_value

    def can_expand(self) -> bool:
        return isinstance(self.get_value(), Mapping)

    def is_expandable(self) -> bool:
        # Judged on the cached value, the one expand() iterates
        return self.expand_declared and self.can_expand()
