import inspect
import logging
import typing
from collections.abc import Callable, Iterable, MutableMapping
from types import MappingProxyType
from typing import Any

from varexport.exceptions import VariableAccessError
from varexport.variables.base import Variable

logger = logging.getLogger(__name__)


def is_mutable_mapping_type(declared_type: Any) -> bool:
    """
    Check whether a declared type (e.g. a return annotation) is a mutable mapping.

    String annotations and anything that is not a class are treated as unknown.
    """
    origin = typing.get_origin(declared_type) or declared_type
    if not inspect.isclass(origin) or origin is MappingProxyType:
        return False
    return issubclass(origin, MutableMapping)


class AccessorVariable(Variable):
    """
    Variable reading its value through a zero-argument callable on every read.

    This is what discovered attributes, properties and methods turn into. A failure
    inside the accessor surfaces as `VariableAccessError`, chained to the original.
    """

    def __init__(
        self,
        name: str,
        accessor: Callable[[], Any],
        doc: str | None = "",
        expand: bool = False,
        tags: Iterable[str] = frozenset(),
        declared_type: Any = None,
    ):
        super().__init__(name, doc=doc, expand=expand, tags=tags)
        self._accessor = accessor
        if is_mutable_mapping_type(declared_type):
            logger.warning(
                "Variable %s is not an immutable mapping, which may result in sporadic errors", name
            )

    def get_value(self) -> Any:
        try:
            return self._accessor()
        except Exception as e:
            raise VariableAccessError(f"failed to read value: {e}", var_name=self.name) from e
