"""
Discovery of exportable members on objects and classes.

Members are marked with the `export` decorator, which attaches an `ExportData`
record. Discovery walks the MRO, so a decorator placed on a base class or mixin
still applies when a subclass overrides the member; the value is always read
through normal attribute lookup on the target.

Discovery produces `DiscoveredMember` tuples. Turning one into a `Variable` is
the only contract the registry relies on.
"""

import inspect
import logging
from collections.abc import Callable, Iterator
from typing import Any, NamedTuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from varexport.constants import EXPORT_ATTRIBUTE
from varexport.exceptions import ExportError, UnsupportedMemberError
from varexport.variables import AccessorVariable, CachingVariable, Variable

logger = logging.getLogger(__name__)

MemberT = TypeVar("MemberT")


class ExportData(BaseModel):
    """Export metadata attached to a member by the `export` decorator."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Variable name; defaults to the member name")
    doc: str = Field(default="", description="Documentation shown in dumps")
    expand: bool = Field(default=False, description="Present mapping values as one variable per entry")
    cache_timeout_ms: int = Field(default=0, ge=0, description="Cache the value this long; 0 disables")
    tags: frozenset[str] = Field(default_factory=frozenset, description="Free-form tags")


class DiscoveredMember(NamedTuple):
    """Everything needed to build a variable for one exported member."""

    name: str
    doc: str
    expand: bool
    cache_timeout_ms: int
    accessor: Callable[[], Any]
    tags: frozenset[str] = frozenset()
    declared_type: Any = None


def export(
    name: str = "",
    doc: str = "",
    expand: bool = False,
    cache_timeout_ms: int = 0,
    tags: frozenset[str] | set[str] | tuple[str, ...] = frozenset(),
) -> Callable[[MemberT], MemberT]:
    """
    Mark a method, property, staticmethod or classmethod for export.

    Example:
        class Worker:
            @property
            @export(doc="Jobs waiting to run")
            def queue_depth(self) -> int:
                return len(self._queue)

    Args:
        name: Variable name; defaults to the member name.
        doc: Documentation shown in dumps.
        expand: Whether a mapping value is presented as one variable per entry.
        cache_timeout_ms: Cache the value for this many milliseconds; 0 disables caching.
        tags: Free-form tags attached to the variable.

    Returns:
        A decorator returning the member unchanged apart from the attached metadata.
    """
    data = ExportData(name=name, doc=doc, expand=expand, cache_timeout_ms=cache_timeout_ms, tags=frozenset(tags))

    def decorator(member: MemberT) -> MemberT:
        setattr(_unwrap(member), EXPORT_ATTRIBUTE, data)
        return member

    return decorator


def _unwrap(member: Any) -> Any:
    """Return the function underlying a property, staticmethod or classmethod."""
    if isinstance(member, property):
        return member.fget
    if isinstance(member, (staticmethod, classmethod)):
        return member.__func__
    return member


def get_export_data(member: Any) -> ExportData | None:
    """Return the export metadata attached to a member, if any."""
    data = getattr(_unwrap(member), EXPORT_ATTRIBUTE, None)
    return data if isinstance(data, ExportData) else None


def is_static_member(member: Any) -> bool:
    """Whether a raw class member can be read without an instance."""
    if isinstance(member, (staticmethod, classmethod)):
        return True
    return not (inspect.isfunction(member) or isinstance(member, property))


def _owner_name(target: Any) -> str:
    return target.__name__ if inspect.isclass(target) else type(target).__name__


def _declared_type(func: Callable[..., Any] | None) -> Any:
    if func is None:
        return None
    try:
        return inspect.signature(func).return_annotation
    except (TypeError, ValueError):
        return None


def member_accessor(target: Any, member_name: str, member: Any) -> tuple[Callable[[], Any], Any]:
    """
    Build the value accessor for one member of ``target``.

    Args:
        target: Object or class the member belongs to.
        member_name: Attribute name of the member.
        member: The raw member as stored in the class dict.

    Returns:
        A ``(accessor, declared_type)`` pair.

    Raises:
        UnsupportedMemberError: If the member is a class, a module, a builtin, or a
            method that cannot be called without arguments.
    """
    if inspect.isclass(member) or inspect.ismodule(member) or inspect.isbuiltin(member):
        raise UnsupportedMemberError(
            f"{type(member).__name__} members are not supported by export",
            member_name=member_name,
            owner=_owner_name(target),
        )

    if isinstance(member, property):
        return (lambda: getattr(target, member_name)), _declared_type(member.fget)

    if isinstance(member, (staticmethod, classmethod)) or inspect.isfunction(member):
        bound = getattr(target, member_name)
        required = [
            param.name
            for param in inspect.signature(bound).parameters.values()
            if param.default is inspect.Parameter.empty
            and param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        ]
        if required:
            raise UnsupportedMemberError(
                f"exported methods must be callable without arguments, requires {', '.join(required)}",
                member_name=member_name,
                owner=_owner_name(target),
            )
        return (lambda: getattr(target, member_name)()), _declared_type(_unwrap(member))

    return (lambda: getattr(target, member_name)), None


def _variable_name(data: ExportData | None, supplied_name: str | None, member_name: str) -> str:
    if data is not None and data.name:
        return data.name
    if supplied_name:
        return supplied_name
    return member_name


def discover_member(
    target: Any,
    member_name: str,
    member: Any,
    data: ExportData | None,
    prefix: str = "",
    supplied_name: str | None = None,
) -> DiscoveredMember:
    """Describe one member as a `DiscoveredMember`, resolving its final variable name."""
    accessor, declared_type = member_accessor(target, member_name, member)
    return DiscoveredMember(
        name=(prefix or "") + _variable_name(data, supplied_name, member_name),
        doc=data.doc if data else "",
        expand=data.expand if data else False,
        cache_timeout_ms=data.cache_timeout_ms if data else 0,
        accessor=accessor,
        tags=data.tags if data else frozenset(),
        declared_type=declared_type,
    )


def discover(target: Any, prefix: str = "") -> Iterator[DiscoveredMember]:
    """
    Yield every decorated public member of an object or class.

    For an instance, all decorated members qualify. For a class only static members
    (class attributes, staticmethods, classmethods) qualify; decorated instance
    members are skipped, since there is no instance to read them from.

    Args:
        target: Object instance or class to scan.
        prefix: Prepended to every variable name.

    Yields:
        One `DiscoveredMember` per exported member, in attribute name order.
    """
    static_only = inspect.isclass(target)
    cls = target if static_only else type(target)

    member_names = sorted({name for klass in cls.__mro__ for name in vars(klass) if not name.startswith("_")})
    for member_name in member_names:
        data = next(
            (found for klass in cls.__mro__ if (found := get_export_data(vars(klass).get(member_name))) is not None),
            None,
        )
        if data is None:
            continue

        member = inspect.getattr_static(cls, member_name)
        if static_only and not is_static_member(member):
            logger.debug("Skipping non-static member '%s' of class '%s'", member_name, cls.__name__)
            continue

        yield discover_member(target, member_name, member, data, prefix=prefix)


def discover_named_member(
    target: Any, member_name: str, prefix: str = "", name: str | None = None
) -> DiscoveredMember:
    """
    Describe a single member, decorated or not.

    Args:
        target: Object instance or class owning the member.
        member_name: Attribute name of the member.
        prefix: Prepended to the variable name.
        name: Variable name to use when the member carries no decorator name.

    Raises:
        ExportError: If the member does not exist, or ``target`` is a class and the
            member is not static.
        UnsupportedMemberError: If the member kind cannot be exported.
    """
    try:
        member = inspect.getattr_static(target, member_name)
    except AttributeError as e:
        raise ExportError("member not found", member_name=member_name, owner=_owner_name(target)) from e

    if inspect.isclass(target) and not is_static_member(member):
        raise ExportError("member is not static", member_name=member_name, owner=_owner_name(target))

    return discover_member(target, member_name, member, get_export_data(member), prefix=prefix, supplied_name=name)


def to_variable(discovered: DiscoveredMember) -> Variable:
    """Turn a discovered member into a variable, wrapped in a cache when requested."""
    variable: Variable = AccessorVariable(
        discovered.name,
        discovered.accessor,
        doc=discovered.doc,
        expand=discovered.expand,
        tags=discovered.tags,
        declared_type=discovered.declared_type,
    )
    if discovered.cache_timeout_ms > 0:
        variable = CachingVariable(variable, discovered.cache_timeout_ms)
    return variable
