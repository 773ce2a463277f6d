from collections.abc import Mapping
from typing import Any

from varexport.constants import SUB_VARIABLE_SEPARATOR
from varexport.variables.base import Variable


class EntryVariable(Variable):
    """
    One entry of an expandable variable, named ``<parent>#<key>``.

    The value is captured when the entry is created and never re-read; every
    traversal or lookup builds fresh entries. Documentation and update time come
    from the parent.
    """

    def __init__(self, key: Any, value: Any, parent: Variable):
        super().__init__(f"{parent.name}{SUB_VARIABLE_SEPARATOR}{key}", expand=True)
        self._key = key
        self._value = value
        self._parent = parent

    @property
    def key(self) -> Any:
        return self._key

    @property
    def parent(self) -> Variable:
        return self._parent

    @property
    def doc(self) -> str:
        return self._parent.doc

    @property
    def last_updated(self) -> int | None:
        return self._parent.last_updated

    def can_expand(self) -> bool:
        return isinstance(self._value, Mapping)

    def get_value(self) -> Any:
        return self._value
