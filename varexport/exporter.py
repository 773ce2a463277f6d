"""
Namespaced variable registry.

A `VarExporter` holds the variables of one namespace. Variables added to an
exporter that has a parent are republished in the parent, read-through, as
``<namespace>-<name>``. Exporters are obtained from the process-wide
`NamespaceDirectory`, which creates them on first access.

Typical usage:

    from varexport import ManagedVariable, for_namespace

    exporter = for_namespace("scheduler").include_in_global()
    exporter.export(scheduler_instance, prefix="scheduler-")
    exporter.export_variable(ManagedVariable("queueDepth", value=5))
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any, TextIO

from varexport import formatters
from varexport.constants import (
    DEFAULT_START_TIME_FORMAT,
    GLOBAL_NAMESPACE,
    NAMESPACE_SEPARATOR,
    START_TIME_VARIABLE_DOC,
    START_TIME_VARIABLE_NAME,
    SUB_VARIABLE_SEPARATOR,
)
from varexport.exceptions import VariableError
from varexport.locator import discover, discover_named_member, to_variable
from varexport.variables import EntryVariable, ManagedVariable, ProxyVariable, Variable

logger = logging.getLogger(__name__)

Visitor = Callable[[Variable], None]


def create_start_time_variable(
    started_at: datetime, time_format: str = DEFAULT_START_TIME_FORMAT
) -> ManagedVariable:
    """Build the variable reporting when the exporter machinery started."""
    if started_at.tzinfo is None:
        started_at = started_at.astimezone()
    return (
        ManagedVariable.builder()
        .set_name(START_TIME_VARIABLE_NAME)
        .set_doc(START_TIME_VARIABLE_DOC)
        .set_value(started_at.strftime(time_format))
        .build()
    )


STARTED_AT = datetime.now().astimezone()

# Visited after the variables of any non-empty exporter; None disables it
start_time: ManagedVariable | None = create_start_time_variable(STARTED_AT)


def set_start_time_format(time_format: str) -> ManagedVariable:
    """Re-render the start-time variable with another strftime format."""
    global start_time  # noqa: PLW0603
    start_time = create_start_time_variable(STARTED_AT, time_format)
    return start_time


class VarExporter:
    """
    Registry of the variables of a single namespace.

    Registration and traversal may happen concurrently from any thread. Traversals
    work on a name-sorted copy taken under the lock, so they never observe a
    half-applied registration.
    """

    def __init__(self, namespace: str | None = None):
        self._namespace = namespace or GLOBAL_NAMESPACE
        self._variables: dict[str, Variable] = {}
        self._lock = threading.Lock()
        self._parent: VarExporter | None = None

    @property
    def namespace(self) -> str:
        """Namespace name; the empty string for the global namespace."""
        return self._namespace

    @property
    def parent_namespace(self) -> "VarExporter | None":
        return self._parent

    def include_in_global(self) -> "VarExporter":
        """
        Republish variables added from now on in the global namespace.

        Returns:
            This exporter (not the global one), for chaining.
        """
        if not self._namespace:
            return self
        return self.set_parent_namespace(global_exporter())

    def set_parent_namespace(self, parent: "VarExporter | None") -> "VarExporter":
        """
        Republish variables added from now on in ``parent`` as ``<namespace>-<name>``.

        Variables registered before the call are not forwarded. Setting an exporter as
        its own parent is ignored.

        Returns:
            This exporter (not the parent), for chaining.
        """
        if parent is not self:
            self._parent = parent
        return self

    def add_variable(self, variable: Variable) -> None:
        """
        Register a variable under its name, replacing any previous one with that name.

        If a parent is set, a `ProxyVariable` named ``<namespace>-<name>`` is
        registered there too.
        """
        name = variable.name
        with self._lock:
            previous = self._variables.get(name)
            self._variables[name] = variable
            parent = self._parent

        if previous is not None:
            logger.warning(
                "In namespace '%s': Exporting variable named %s hides a previously exported variable",
                self._namespace,
                name,
            )
        else:
            logger.debug("In namespace '%s': Added variable %s", self._namespace, name)

        if parent is not None and parent is not self:
            parent.add_variable(ProxyVariable(variable, name=f"{self._namespace}{NAMESPACE_SEPARATOR}{name}"))

    def export(self, target: Any, prefix: str = "") -> None:
        """
        Export every member of ``target`` decorated with `varexport.export`.

        Args:
            target: An object (all decorated public members) or a class (decorated
                static members only).
            prefix: Prepended to every variable name (e.g. "mywidget-").
        """
        for discovered in discover(target, prefix=prefix):
            self.add_variable(to_variable(discovered))

    def export_member(self, target: Any, member_name: str, prefix: str = "", name: str | None = None) -> None:
        """
        Export a single member, whether or not it carries the decorator.

        Useful for code that cannot be modified to add the decorator.

        Args:
            target: Object or class owning the member. For a class, the member must be static.
            member_name: Attribute name of the member.
            prefix: Prepended to the variable name.
            name: Variable name to use; ignored if the decorator provides one.

        Raises:
            ExportError: If the member is missing, or not static while ``target`` is a class.
            UnsupportedMemberError: If the member kind cannot be exported.
        """
        self.add_variable(to_variable(discover_named_member(target, member_name, prefix=prefix, name=name)))

    def export_variable(self, variable: Variable) -> None:
        """Export a variable built by the caller, such as a `ManagedVariable`."""
        if not isinstance(variable, Variable):
            raise VariableError(f"expected a Variable, got {type(variable).__name__}")
        self.add_variable(variable)

    def get_value(self, name: str) -> Any:
        """Current value of the named variable, or None if there is no such variable."""
        variable = self.get_variable(name)
        return None if variable is None else variable.get_value()

    def get_variable(self, name: str) -> Variable | None:
        """
        Look up a variable by name.

        ``<container>#<key>`` addresses one entry of an expandable variable, matching
        the key by its string form. When no such container or key exists, the name
        is looked up literally, so names containing ``#`` remain usable.

        Returns:
            The variable, a fresh `EntryVariable`, or None.
        """
        container_name, separator, key = name.partition(SUB_VARIABLE_SEPARATOR)
        if separator:
            entry = self._get_sub_variable(container_name, key)
            if entry is not None:
                return entry
        with self._lock:
            return self._variables.get(name)

    def _get_sub_variable(self, container_name: str, key: str) -> EntryVariable | None:
        with self._lock:
            container = self._variables.get(container_name)
        if container is None or not container.is_expandable():
            return None
        for entry_key, entry_value in container.expand().items():
            if str(entry_key) == key:
                return EntryVariable(entry_key, entry_value, container)
        return None

    def visit_variables(self, visitor: Visitor) -> None:
        """
        Call ``visitor`` for every variable, in name order.

        Expandable variables are visited as one `EntryVariable` per entry. The
        start-time variable is visited last, unless the exporter is empty.
        """
        with self._lock:
            snapshot = [self._variables[name] for name in sorted(self._variables)]

        for variable in snapshot:
            if variable.is_expandable():
                for key, value in variable.expand().items():
                    visitor(EntryVariable(key, value, variable))
            else:
                visitor(variable)

        if snapshot and start_time is not None:
            visitor(start_time)

    def variables(self) -> list[Variable]:
        """The variables `visit_variables` would visit, as a list."""
        visited: list[Variable] = []
        self.visit_variables(visited.append)
        return visited

    def dump(self, out: TextIO, include_doc: bool = False) -> None:
        """Write all variables as escaped ``name=value`` lines."""
        formatters.dump(self, out, include_doc=include_doc)

    def dump_json(self, out: TextIO) -> None:
        """Write all variables as ``{name='value', ...}`` with every value stringified."""
        formatters.dump_json(self, out)

    def reset(self) -> None:
        """Remove all variables of this namespace. Copies forwarded to a parent stay."""
        with self._lock:
            self._variables.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._variables)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._variables

    def __repr__(self) -> str:
        return f"VarExporter(namespace={self._namespace!r})"


class NamespaceDirectory:
    """Process-wide mapping of namespace name to `VarExporter`, created on demand."""

    def __init__(self) -> None:
        self._exporters: dict[str, VarExporter] = {}
        self._lock = threading.Lock()

    def for_namespace(self, namespace: str | None = None) -> VarExporter:
        """
        Return the exporter of ``namespace``, creating it on first access.

        None and the empty string both denote the global namespace.
        """
        key = namespace or GLOBAL_NAMESPACE
        with self._lock:
            exporter = self._exporters.get(key)
            if exporter is None:
                exporter = VarExporter(key)
                self._exporters[key] = exporter
                logger.debug("Created exporter for namespace '%s'", key)
            return exporter

    def global_exporter(self) -> VarExporter:
        return self.for_namespace(GLOBAL_NAMESPACE)

    def list_namespaces(self) -> list[str]:
        """Names of all namespaces accessed so far, the global one as ''."""
        with self._lock:
            return list(self._exporters)

    def __contains__(self, namespace: object) -> bool:
        with self._lock:
            return namespace in self._exporters


_directory = NamespaceDirectory()


def namespace_directory() -> NamespaceDirectory:
    """The process-wide namespace directory."""
    return _directory


def for_namespace(namespace: str | None = None) -> VarExporter:
    """Exporter of ``namespace``; use `global_exporter` (or None) for the global one."""
    return namespace_directory().for_namespace(namespace)


def global_exporter() -> VarExporter:
    return namespace_directory().global_exporter()


def list_namespaces() -> list[str]:
    return namespace_directory().list_namespaces()


def visit_namespace_variables(namespace: str | None, visitor: Visitor) -> None:
    for_namespace(namespace).visit_variables(visitor)


def register(namespace: str | None, variable: Variable) -> None:
    for_namespace(namespace).export_variable(variable)


def get_variable(namespace: str | None, name: str) -> Variable | None:
    return for_namespace(namespace).get_variable(name)


def get_value(namespace: str | None, name: str) -> Any:
    return for_namespace(namespace).get_value(name)

