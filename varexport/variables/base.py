import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any, TextIO

from varexport.constants import EXPANSION_ERROR_KEY, NULL_VALUE_STRING
from varexport.exceptions import VariableError

logger = logging.getLogger(__name__)

# Zero-argument callable returning the current time as epoch milliseconds
Clock = Callable[[], int]

# Characters that must be backslash-escaped to survive a round trip through a properties file
_PROPERTIES_SPECIALS = {
    "\\": "\\\\",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    "\f": "\\f",
    "=": "\\=",
    ":": "\\:",
    "#": "\\#",
    "!": "\\!",
}

_PRINTABLE_ASCII_MIN = 0x20
_PRINTABLE_ASCII_MAX = 0x7E


def system_clock() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def format_timestamp(epoch_ms: int) -> str:
    """Render an epoch milliseconds timestamp as local-time ISO 8601."""
    return datetime.fromtimestamp(epoch_ms / 1000).astimezone().isoformat(timespec="seconds")


def escape_property(text: str, is_key: bool = False) -> str:
    """
    Escape text so it can be written to a key=value properties file.

    Follows the escaping rules of Java's ``Properties.store``: backslash sequences for
    control and separator characters, ``\\uXXXX`` for anything outside printable ASCII.
    Spaces are escaped everywhere in keys, but only in leading position in values.

    Args:
        text: The text to escape.
        is_key: Whether the text is the key (name) part of the line.

    Returns:
        The escaped text.
    """
    escaped: list[str] = []
    for index, char in enumerate(text):
        if char == " ":
            escaped.append("\\ " if is_key or index == 0 else " ")
        elif char in _PROPERTIES_SPECIALS:
            escaped.append(_PROPERTIES_SPECIALS[char])
        elif _PRINTABLE_ASCII_MIN <= ord(char) <= _PRINTABLE_ASCII_MAX:
            escaped.append(char)
        else:
            # Characters outside the BMP are written as their UTF-16 surrogate pair
            utf16 = char.encode("utf-16-be")
            for offset in range(0, len(utf16), 2):
                escaped.append(f"\\u{int.from_bytes(utf16[offset:offset + 2], 'big'):04X}")
    return "".join(escaped)


class Variable(ABC):
    """
    A named, dynamically readable value exported for introspection.

    Identity is the name, which never changes. The value is produced on demand by
    `get_value` and may change between reads. A variable declared with ``expand=True``
    whose current value is a mapping is "expandable": consumers present it as one
    sub-variable per mapping entry rather than as a single value.
    """

    def __init__(
        self,
        name: str,
        doc: str | None = "",
        expand: bool = False,
        tags: Iterable[str] = frozenset(),
    ):
        self._name = name
        self._doc = doc or ""
        self._expand = expand
        self._tags = frozenset(tags)

    @property
    def name(self) -> str:
        return self._name

    @property
    def doc(self) -> str:
        return self._doc

    @property
    def tags(self) -> frozenset[str]:
        return self._tags

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    @property
    def is_live(self) -> bool:
        """Whether the value is held directly rather than derived from another source."""
        return False

    @property
    def last_updated(self) -> int | None:
        """Epoch milliseconds of the last value change, or None when unknown."""
        return None

    @abstractmethod
    def get_value(self) -> Any:
        """Return the current value."""

    def can_expand(self) -> bool:
        """Whether the current value can be presented as a mapping."""
        return isinstance(self.get_value(), Mapping)

    @property
    def expand_declared(self) -> bool:
        """Whether the variable was declared with ``expand=True``."""
        return self._expand

    def is_expandable(self) -> bool:
        return self.expand_declared and self.can_expand()

    def expand(self) -> dict[Any, Any]:
        """
        Take a snapshot of the mapping held by this variable.

        The mapping belongs to whoever produced the value and may be modified while we
        iterate it. If iteration fails because of that, the failure is logged and the
        snapshot degrades to a single ``{"error": <message>}`` entry.

        Returns:
            A new dict with the entries of the current value.

        Raises:
            VariableError: If the variable is not expandable.
        """
        if not self.is_expandable():
            raise VariableError("variable is not expandable", var_name=self.name)

        mapping = self.get_value()
        if not isinstance(mapping, Mapping):
            raise VariableError("variable is not expandable", var_name=self.name)
        snapshot: dict[Any, Any] = {}
        try:
            for key, value in mapping.items():
                snapshot[key] = value
        except RuntimeError as e:
            logger.warning("Failed to iterate map entries for variable %s: %s", self.name, e)
            return {EXPANSION_ERROR_KEY: str(e)}
        return snapshot

    def value_string(self) -> str:
        """The current value rendered as text, as used by dumps."""
        value = self.get_value()
        return NULL_VALUE_STRING if value is None else str(value)

    def write(self, out: TextIO, include_doc: bool = False) -> None:
        """
        Write this variable as a ``name=value`` properties line.

        Args:
            out: Text stream to write to.
            include_doc: Whether to precede the line with documentation comments.
        """
        if include_doc:
            for line in self.doc.splitlines():
                out.write(f"# {line}\n")
            last_updated = self.last_updated
            if last_updated is not None:
                out.write(f"# last updated {format_timestamp(last_updated)}\n")
        out.write(f"{escape_property(self.name, is_key=True)}={escape_property(self.value_string())}\n")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
