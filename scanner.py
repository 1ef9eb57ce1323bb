# scanner.py
# Character-level scanner and literal readers for the scene description format
#
# =============================================================================
#  SCANNER: ONE CHARACTER AT A TIME, ONE CHARACTER OF PUSHBACK
# =============================================================================
#
# The scene format is a tiny JSON dialect: strings without escapes, plain
# decimal numbers, and fixed three-element vectors. Every reader below pulls
# characters straight off the stream through Scanner.next_char(), which is
# the only place the line counter moves.
#
# Line numbers start at 1 and advance on every consumed newline. Pushing a
# newline back rewinds the counter, so a character is only ever counted once.
#
# =============================================================================

import io
import math
import re
from typing import List, NamedTuple, Optional, TextIO

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
MAX_STRING_LENGTH = 128          # Longest string literal accepted
PRINTABLE_MIN     = 32           # Lowest printable ASCII code allowed in strings
PRINTABLE_MAX     = 126          # Highest printable ASCII code allowed in strings
WHITESPACE        = " \t\n\v\f\r"
NUMBER_CHARS      = "0123456789+-.eE"

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# ---------------------------------------------------------------------------
# DIAGNOSTICS
# ---------------------------------------------------------------------------
class SceneError(Exception):
    """
    Base class for every failure raised while reading a scene.

    Each subclass names its own ``kind``; ``line`` is the 1-based line the
    problem was detected on, or None when no position applies.
    """
    kind = "SceneError"

    def __init__(self, message: str, line: Optional[int] = None):
        self.message = message
        self.line = line
        if line is None:
            super().__init__(message)
        else:
            super().__init__(f"{message} on line {line}")


class SceneIOError(SceneError):
    kind = "IoError"

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f'could not open file "{path}": {reason}')


class UnexpectedEndOfInput(SceneError):
    kind = "UnexpectedEndOfInput"

    def __init__(self, line: int):
        super().__init__("unexpected end of file", line)


class SceneSyntaxError(SceneError):
    """A character other than the one the grammar requires."""
    kind = "SyntaxError"

    def __init__(self, expected: str, line: int, found: Optional[str] = None):
        self.expected = expected
        self.found = found
        if found is None:
            message = f"expected {expected}"
        else:
            message = f"expected {expected}, got {found!r}"
        super().__init__(message, line)


class StringTooLong(SceneError):
    kind = "StringTooLong"

    def __init__(self, line: int):
        super().__init__(
            f"strings longer than {MAX_STRING_LENGTH} characters are not supported", line
        )


class UnsupportedEscape(SceneError):
    kind = "UnsupportedEscape"

    def __init__(self, line: int):
        super().__init__("strings with escape codes are not supported", line)


class NonAsciiCharacter(SceneError):
    kind = "NonAsciiCharacter"

    def __init__(self, char: str, line: int):
        self.char = char
        super().__init__(
            f"strings may contain only printable ascii characters, got code {ord(char)}", line
        )


class NumberFormatError(SceneError):
    kind = "NumberFormatError"

    def __init__(self, text: str, line: int):
        self.text = text
        if text:
            super().__init__(f'malformed number "{text}"', line)
        else:
            super().__init__("expected a number", line)


class MissingTypeKey(SceneError):
    kind = "MissingTypeKey"

    def __init__(self, key: str, line: int):
        self.key = key
        super().__init__(f'expected "type" key, got "{key}"', line)


class UnknownType(SceneError):
    kind = "UnknownType"

    def __init__(self, value: str, line: int):
        self.value = value
        super().__init__(f'unknown type "{value}"', line)


class UnknownProperty(SceneError):
    """Non-fatal: the parser records it and skips the property's value."""
    kind = "UnknownProperty"

    def __init__(self, key: str, line: int):
        self.key = key
        super().__init__(f'unknown property "{key}"', line)


class InvalidPropertyForType(SceneError):
    kind = "InvalidPropertyForType"

    def __init__(self, key: str, type_name: str, line: int):
        self.key = key
        self.type_name = type_name
        super().__init__(f'property "{key}" is not valid for a {type_name}', line)


class DuplicateProperty(SceneError):
    kind = "DuplicateProperty"

    def __init__(self, key: str, line: int):
        self.key = key
        super().__init__(f'duplicate property "{key}"', line)


class EmptySceneError(SceneError):
    kind = "EmptySceneError"

    def __init__(self, line: int):
        super().__init__("no objects in scene", line)

# ---------------------------------------------------------------------------
# VECTOR RECORD
# ---------------------------------------------------------------------------
class Vector3(NamedTuple):
    """Immutable (x, y, z) triple used for colors, positions and normals."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

# ---------------------------------------------------------------------------
# SCANNER
# ---------------------------------------------------------------------------
class Scanner:
    """
    Character reader over a text stream with a line counter and a
    single-slot pushback buffer.
    """
    def __init__(self, stream: TextIO):
        self._stream = stream
        self._pushback: Optional[str] = None
        self.line = 1

    @classmethod
    def from_text(cls, text: str) -> "Scanner":
        return cls(io.StringIO(text))

    def _read(self) -> str:
        if self._pushback is not None:
            c, self._pushback = self._pushback, None
            return c
        return self._stream.read(1)

    def next_char(self) -> str:
        """
        Consume one character. Running off the end of the stream is fatal:
        nothing in the grammar may legally end there.
        """
        c = self._read()
        if c == "":
            raise UnexpectedEndOfInput(self.line)
        if c == "\n":
            self.line += 1
        return c

    def unread(self, c: str) -> None:
        if self._pushback is not None:
            raise RuntimeError("scanner supports only one character of pushback")
        if c == "\n":
            self.line -= 1
        self._pushback = c

    def peek_char(self) -> str:
        c = self.next_char()
        self.unread(c)
        return c

    def expect_char(self, d: str) -> None:
        c = self.next_char()
        if c != d:
            raise SceneSyntaxError(repr(d), self.line, found=c)

    def skip_whitespace(self) -> None:
        c = self.next_char()
        while c in WHITESPACE:
            c = self.next_char()
        self.unread(c)

    def at_end(self) -> bool:
        """Skip trailing whitespace; True once nothing else is left."""
        while True:
            c = self._read()
            if c == "":
                return True
            if c == "\n":
                self.line += 1
            elif c not in WHITESPACE:
                self.unread(c)
                return False

# ---------------------------------------------------------------------------
# LITERAL READERS
# ---------------------------------------------------------------------------
def next_string(scanner: Scanner) -> str:
    """
    Read a double-quoted string literal.

    Escapes are not part of the format, and only printable ASCII may appear
    between the quotes.
    """
    c = scanner.next_char()
    if c != '"':
        raise SceneSyntaxError("string", scanner.line, found=c)
    chars: List[str] = []
    c = scanner.next_char()
    while c != '"':
        if len(chars) >= MAX_STRING_LENGTH:
            raise StringTooLong(scanner.line)
        if c == "\\":
            raise UnsupportedEscape(scanner.line)
        if not PRINTABLE_MIN <= ord(c) <= PRINTABLE_MAX:
            raise NonAsciiCharacter(c, scanner.line)
        chars.append(c)
        c = scanner.next_char()
    return "".join(chars)


def next_number(scanner: Scanner) -> float:
    """
    Read a decimal floating-point literal such as ``-1``, ``.5`` or ``2.5e-3``.
    The character that ends the literal is pushed back.
    """
    chars: List[str] = []
    c = scanner.next_char()
    while c in NUMBER_CHARS:
        chars.append(c)
        c = scanner.next_char()
    scanner.unread(c)
    text = "".join(chars)
    if not _NUMBER_RE.fullmatch(text):
        raise NumberFormatError(text, scanner.line)
    value = float(text)
    if not math.isfinite(value):
        raise NumberFormatError(text, scanner.line)
    return value


def next_vector(scanner: Scanner) -> Vector3:
    """Read ``[x, y, z]``; whitespace is allowed around every token."""
    scanner.expect_char("[")
    scanner.skip_whitespace()
    x = next_number(scanner)
    scanner.skip_whitespace()
    scanner.expect_char(",")
    scanner.skip_whitespace()
    y = next_number(scanner)
    scanner.skip_whitespace()
    scanner.expect_char(",")
    scanner.skip_whitespace()
    z = next_number(scanner)
    scanner.skip_whitespace()
    scanner.expect_char("]")
    return Vector3(x, y, z)


__all__ = [
    "MAX_STRING_LENGTH",
    "Scanner",
    "Vector3",
    "next_string",
    "next_number",
    "next_vector",
    "SceneError",
    "SceneIOError",
    "UnexpectedEndOfInput",
    "SceneSyntaxError",
    "StringTooLong",
    "UnsupportedEscape",
    "NonAsciiCharacter",
    "NumberFormatError",
    "MissingTypeKey",
    "UnknownType",
    "UnknownProperty",
    "InvalidPropertyForType",
    "DuplicateProperty",
    "EmptySceneError",
]
