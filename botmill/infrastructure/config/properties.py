"""
Properties store and text codec.

This module provides the in-memory key/value configuration store and
reading/writing of the line-oriented ``.properties`` format used by
``botmill.properties``.
"""

import re
from datetime import datetime
from typing import IO, Any, Dict, Iterator, List, Mapping, MutableMapping, Optional, Tuple

from ...core.exceptions import PropertiesParseError

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_COMMENT_MARKERS = "#!"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


class Properties(MutableMapping[str, str]):
    """
    Mutable string-to-string configuration store.

    Keys and values must both be strings. Insertion order is preserved,
    and when a key is set twice the last value wins.
    """

    def __init__(self, data: Optional[Mapping[str, str]] = None) -> None:
        self._data: Dict[str, str] = {}
        if data:
            self.update(data)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError(
                f"Properties keys and values must be str, got "
                f"{type(key).__name__}={type(value).__name__}")
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Properties({self._data!r})"

    def get_property(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a property value, or ``default`` when the key is absent."""
        return self._data.get(key, default)

    def set_property(self, key: str, value: str) -> None:
        """Set a property value."""
        self[key] = value

    def copy(self) -> "Properties":
        """Return a shallow copy of this store."""
        return Properties(self._data)


def loads_properties(text: str) -> Properties:
    """
    Parse properties text into a new store.

    Args:
        text: Properties file content

    Returns:
        Parsed properties

    Raises:
        PropertiesParseError: If an escape sequence is malformed
    """
    properties = Properties()
    for line_number, logical_line in _logical_lines(text):
        key, value = _split_key_value(logical_line)
        properties[_unescape(key, line_number)] = _unescape(value, line_number)
    return properties


def load_properties(stream: IO[Any], encoding: str = "utf-8") -> Properties:
    """Parse properties from a text or binary stream."""
    content = stream.read()
    if isinstance(content, bytes):
        try:
            content = content.decode(encoding)
        except UnicodeDecodeError as e:
            raise PropertiesParseError(f"Cannot decode properties as {encoding}: {e}")
    return loads_properties(content)


def dumps_properties(properties: Mapping[str, str], comments: Optional[str] = None,
                     timestamp: bool = False) -> str:
    """
    Serialize a mapping to properties text.

    Keys and values are escaped so that parsing the output yields the
    same mapping.
    """
    lines: List[str] = []
    if comments:
        for comment_line in _LINE_BREAK.split(comments):
            lines.append(f"#{comment_line}")
    if timestamp:
        lines.append(f"#{datetime.now().strftime('%a %b %d %H:%M:%S %Y')}")

    for key, value in properties.items():
        lines.append(f"{_escape(key, is_key=True)}={_escape(value, is_key=False)}")

    return "\n".join(lines) + "\n" if lines else ""


def dump_properties(properties: Mapping[str, str], stream: IO[str],
                    comments: Optional[str] = None) -> None:
    """Write a mapping to a text stream in properties format."""
    stream.write(dumps_properties(properties, comments))


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (line number, logical line) pairs with continuations joined."""
    pending: Optional[str] = None
    start_line = 0

    for index, raw_line in enumerate(_LINE_BREAK.split(text), start=1):
        line = raw_line.lstrip(_WHITESPACE)

        if pending is None:
            if not line or line[0] in _COMMENT_MARKERS:
                continue
            start_line = index
            pending = ""

        # An odd run of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue

        yield start_line, pending + line
        pending = None

    if pending is not None:
        yield start_line, pending


def _split_key_value(line: str) -> Tuple[str, str]:
    """Split a logical line at its first unescaped separator."""
    length = len(line)
    index = 0
    escaped = False

    while index < length:
        char = line[index]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1

    key = line[:index]
    rest = line[index:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return key, rest


def _unescape(value: str, line_number: int) -> str:
    if "\\" not in value:
        return value

    result: List[str] = []
    index = 0
    length = len(value)
    while index < length:
        char = value[index]
        index += 1
        if char != "\\":
            result.append(char)
            continue
        if index >= length:
            break

        char = value[index]
        index += 1
        if char == "u":
            digits = value[index:index + 4]
            if len(digits) != 4 or not all(d in "0123456789abcdefABCDEF" for d in digits):
                raise PropertiesParseError(
                    f"Malformed \\uxxxx encoding: \\u{digits}", line_number)
            result.append(chr(int(digits, 16)))
            index += 4
        else:
            result.append(_ESCAPES.get(char, char))

    return "".join(result)


def _escape(value: str, is_key: bool) -> str:
    result: List[str] = []
    for position, char in enumerate(value):
        if char == "\\":
            result.append("\\\\")
        elif char == "\t":
            result.append("\\t")
        elif char == "\n":
            result.append("\\n")
        elif char == "\r":
            result.append("\\r")
        elif char == "\f":
            result.append("\\f")
        elif char == " " and (is_key or position == 0):
            result.append("\\ ")
        elif char in "=:#!":
            result.append("\\" + char)
        else:
            result.append(char)
    return "".join(result)
