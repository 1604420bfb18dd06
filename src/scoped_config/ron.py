"""Reader and writer for RON (Rusty Object Notation).

Python values map to RON as follows:

- dict: map ``{"key": value}``
- list: sequence ``[a, b]``
- tuple: tuple ``(a, b)``; the empty tuple is refused since ``()`` is unit
- str, int, float, bool: string, integer, float, ``true``/``false``
- None: ``None``

When reading, the rest of the RON grammar is accepted as well. Structs
(``Name(field: value)`` or ``(field: value)``) become dicts, ``Some(x)``
becomes ``x``, unit ``()`` becomes None, chars become one-letter strings,
bare enum variants become their name and tuple structs become tuples.
Comments, raw strings and ``#![enable(...)]`` attributes are supported.
"""

import math
import re
from typing import Any

INDENT = "    "

_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER = re.compile(
    r"[+-]?(?:0x[0-9A-Fa-f_]+|0o[0-7_]+|0b[01_]+"
    r"|(?:[0-9][0-9_]*(?:\.[0-9_]*)?|\.[0-9][0-9_]*)(?:[eE][+-]?[0-9_]+)?)"
)
_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
}


class RonError(ValueError):
    """RON text could not be parsed."""

    def __init__(self, message: str, text: str = "", pos: int = 0):
        line = text.count("\n", 0, pos) + 1
        column = pos - text.rfind("\n", 0, pos)
        super().__init__(f"{message} at line {line}, column {column}")
        self.line = line
        self.column = column


# ===== Writing =====


def dumps(value: Any, pretty: bool = True) -> str:
    """Serialize a Python value to RON text.

    Args:
        value: Value built from dicts, lists, tuples, strings, numbers,
            booleans and None
        pretty: Indent nested collections, one item per line

    Returns:
        RON document

    Raises:
        TypeError: If value contains an unsupported type

    Examples:
        >>> dumps({"accent": "#7a7af9"}, pretty=False)
        '{"accent":"#7a7af9"}'
    """
    out = _dump(value, 0, pretty)
    return out + "\n" if pretty else out


def _dump(value: Any, depth: int, pretty: bool) -> str:
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _dump_float(value)
    if isinstance(value, str):
        return _dump_str(value)
    if isinstance(value, dict):
        sep = ": " if pretty else ":"
        items = [f"{_dump(k, depth + 1, pretty)}{sep}{_dump(v, depth + 1, pretty)}" for k, v in value.items()]
        return _collection("{", "}", items, depth, pretty)
    if isinstance(value, tuple):
        if not value:
            raise TypeError("Empty tuple is not RON serializable, it would read back as unit")
        return _collection("(", ")", [_dump(v, depth + 1, pretty) for v in value], depth, pretty)
    if isinstance(value, list):
        return _collection("[", "]", [_dump(v, depth + 1, pretty) for v in value], depth, pretty)
    raise TypeError(f"Object of type {type(value).__name__} is not RON serializable")


def _dump_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = repr(value)
    if "." not in text and "e" not in text:
        text += ".0"
    return text


def _dump_str(value: str) -> str:
    out = ['"']
    for ch in value:
        if ch == '"':
            out.append('\\"')
        elif ch == "\\":
            out.append("\\\\")
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def _collection(open_: str, close: str, items: list[str], depth: int, pretty: bool) -> str:
    if not items:
        return open_ + close
    if not pretty:
        return open_ + ",".join(items) + close
    inner = INDENT * (depth + 1)
    body = "".join(f"{inner}{item},\n" for item in items)
    return f"{open_}\n{body}{INDENT * depth}{close}"


# ===== Reading =====


def loads(text: str) -> Any:
    """Parse a RON document into Python values.

    Args:
        text: RON document

    Returns:
        Parsed value

    Raises:
        RonError: If the text is not valid RON

    Examples:
        >>> loads('Colors(accent: "#7a7af9", dark: Some(true))')
        {'accent': '#7a7af9', 'dark': True}
    """
    parser = _Parser(text)
    parser.skip_attributes()
    value = parser.value()
    parser.skip_ws()
    if parser.pos != len(text):
        raise parser.error("Trailing characters")
    return value


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, message: str) -> RonError:
        return RonError(message, self.text, self.pos)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_ws(self) -> None:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end < 0 else end + 1
            elif text.startswith("/*", self.pos):
                self._skip_block_comment()
            else:
                break

    def _skip_block_comment(self) -> None:
        depth = 0
        text = self.text
        while self.pos < len(text):
            if text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                self.pos += 1
        raise self.error("Unterminated block comment")

    def expect(self, ch: str) -> None:
        self.skip_ws()
        if self.peek() != ch:
            raise self.error(f"Expected {ch!r}")
        self.pos += 1

    def skip_attributes(self) -> None:
        self.skip_ws()
        while self.text.startswith("#!", self.pos):
            self.pos += 2
            self.expect("[")
            depth = 1
            while depth:
                ch = self.peek()
                if not ch:
                    raise self.error("Unterminated attribute")
                depth += {"[": 1, "]": -1}.get(ch, 0)
                self.pos += 1
            self.skip_ws()

    def value(self) -> Any:
        self.skip_ws()
        ch = self.peek()
        if not ch:
            raise self.error("Unexpected end of input")
        if ch == "{":
            return self.map()
        if ch == "[":
            return self.seq()
        if ch == "(":
            return self.paren()
        if ch == '"':
            return self.string()
        if ch == "'":
            return self.char()
        if ch == "r" and self.text.startswith(('r"', "r#"), self.pos):
            return self.raw_string()
        if ch in "+-.0123456789":
            return self.number()
        match = _IDENT.match(self.text, self.pos)
        if match:
            return self.ident(match.group())
        raise self.error(f"Unexpected character {ch!r}")

    def _items(self, close: str, item) -> list:
        items = []
        while True:
            self.skip_ws()
            if self.peek() == close:
                self.pos += 1
                return items
            items.append(item())
            self.skip_ws()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != close:
                raise self.error(f"Expected ',' or {close!r}")

    def map(self) -> dict:
        self.expect("{")

        def entry():
            start = self.pos
            key = _hashable(self.value())
            try:
                hash(key)
            except TypeError:
                self.pos = start
                raise self.error("Unhashable map key") from None
            self.expect(":")
            return key, self.value()

        return dict(self._items("}", entry))

    def seq(self) -> list:
        self.expect("[")
        return self._items("]", self.value)

    def paren(self) -> Any:
        self.expect("(")
        self.skip_ws()
        if self._at_field():
            return dict(self._items(")", self.field))
        items = self._items(")", self.value)
        return tuple(items) if items else None

    def _at_field(self) -> bool:
        match = _IDENT.match(self.text, self.pos)
        if not match:
            return False
        end = match.end()
        while end < len(self.text) and self.text[end].isspace():
            end += 1
        return self.text.startswith(":", end) and not self.text.startswith("::", end)

    def field(self) -> tuple[str, Any]:
        self.skip_ws()
        match = _IDENT.match(self.text, self.pos)
        if not match:
            raise self.error("Expected field name")
        self.pos = match.end()
        self.expect(":")
        return match.group(), self.value()

    def ident(self, name: str) -> Any:
        self.pos += len(name)
        if name == "true":
            return True
        if name == "false":
            return False
        if name == "None":
            return None
        if name in ("inf", "NaN"):
            return float(name)
        self.skip_ws()
        if name == "Some":
            self.expect("(")
            inner = self.value()
            self.skip_ws()
            if self.peek() == ",":
                self.pos += 1
            self.expect(")")
            return inner
        if self.peek() == "(":
            return self.paren()
        # Bare enum variant or unit struct
        return name

    def number(self) -> int | float:
        text = self.text
        for special, result in (("inf", math.inf), ("NaN", math.nan)):
            for sign, factor in (("+", 1), ("-", -1)):
                if text.startswith(sign + special, self.pos):
                    self.pos += len(special) + 1
                    return factor * result
        match = _NUMBER.match(text, self.pos)
        if not match or not any(c.isdigit() for c in match.group()):
            raise self.error("Invalid number")
        self.pos = match.end()
        raw = match.group().replace("_", "")
        body = raw.lstrip("+-")
        sign = -1 if raw.startswith("-") else 1
        if body[:2] in ("0x", "0o", "0b"):
            return sign * int(body[2:], {"0x": 16, "0o": 8, "0b": 2}[body[:2]])
        if any(c in body for c in ".eE"):
            return float(raw)
        return int(raw)

    def string(self) -> str:
        self.pos += 1
        out = []
        text = self.text
        while True:
            if self.pos >= len(text):
                raise self.error("Unterminated string")
            ch = text[self.pos]
            if ch == '"':
                self.pos += 1
                return "".join(out)
            if ch == "\\":
                out.append(self.escape())
            else:
                out.append(ch)
                self.pos += 1

    def escape(self) -> str:
        self.pos += 1
        ch = self.peek()
        if ch in _ESCAPES:
            self.pos += 1
            return _ESCAPES[ch]
        if ch == "u":
            self.pos += 1
            if self.peek() == "{":
                end = self.text.find("}", self.pos)
                if end < 0:
                    raise self.error("Unterminated unicode escape")
                digits = self.text[self.pos + 1 : end]
                self.pos = end + 1
            else:
                digits = self.text[self.pos : self.pos + 4]
                self.pos += 4
            try:
                return chr(int(digits, 16))
            except ValueError:
                raise self.error(f"Invalid unicode escape {digits!r}") from None
        if ch == "x":
            digits = self.text[self.pos + 1 : self.pos + 3]
            self.pos += 3
            try:
                return chr(int(digits, 16))
            except ValueError:
                raise self.error(f"Invalid byte escape {digits!r}") from None
        raise self.error(f"Invalid escape {ch!r}")

    def raw_string(self) -> str:
        self.pos += 1
        hashes = 0
        while self.peek() == "#":
            hashes += 1
            self.pos += 1
        if self.peek() != '"':
            raise self.error("Expected '\"' after raw string prefix")
        terminator = '"' + "#" * hashes
        end = self.text.find(terminator, self.pos + 1)
        if end < 0:
            raise self.error("Unterminated raw string")
        value = self.text[self.pos + 1 : end]
        self.pos = end + len(terminator)
        return value

    def char(self) -> str:
        self.pos += 1
        if self.peek() == "\\":
            value = self.escape()
        else:
            value = self.peek()
            self.pos += 1
        if self.peek() != "'" or not value:
            raise self.error("Invalid char literal")
        self.pos += 1
        return value


def _hashable(key: Any) -> Any:
    if isinstance(key, list):
        return tuple(_hashable(k) for k in key)
    return key
