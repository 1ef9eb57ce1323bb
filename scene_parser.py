# scene_parser.py
# Recursive-descent parser for raycaster scene files
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT OVER A CHARACTER SCANNER
# =============================================================================
#
# A scene file is a JSON-like array of objects:
#
#   [
#     { "type": "camera", "width": 2, "height": 2 },
#     { "type": "sphere", "color": [1, 0, 0], "position": [0, 1, -5], "radius": 2 },
#     { "type": "plane", "color": [0, 0, 1], "position": [0, 0, 0], "normal": [0, 1, 0] }
#   ]
#
# Each grammar rule maps to one function. Lexing happens inline through the
# readers in scanner.py; there is no separate token stream.
#
# Object layout:
# 1. "type" must be the first key and selects Camera, Sphere or Plane.
# 2. Every later key must belong to the selected variant.
# 3. Unknown keys are recorded as diagnostics and their values skipped.
# 4. Missing properties keep their zero defaults.
#
# An empty array is a valid scene with no objects unless the caller passes
# allow_empty=False.
#
# =============================================================================

import argparse
import sys
from dataclasses import dataclass, fields
from typing import Dict, List, Optional, TextIO, Tuple, Type, Union

from scanner import (
    DuplicateProperty,
    EmptySceneError,
    InvalidPropertyForType,
    MissingTypeKey,
    Scanner,
    SceneError,
    SceneIOError,
    SceneSyntaxError,
    UnknownProperty,
    UnknownType,
    Vector3,
    next_number,
    next_string,
    next_vector,
)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
FILE_ENCODING  = "latin-1"       # One character per byte; high bytes fail the ASCII check
SCENE_SUFFIX   = ".json"         # Both CLI paths must mention this

SCALAR_PROPERTIES = ("width", "height", "radius")
VECTOR_PROPERTIES = ("color", "position", "normal")

# ---------------------------------------------------------------------------
# SCENE OBJECTS
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Camera:
    width: float = 0.0
    height: float = 0.0
    kind = "camera"


@dataclass(frozen=True)
class Sphere:
    color: Vector3 = Vector3()
    position: Vector3 = Vector3()
    radius: float = 0.0
    kind = "sphere"


@dataclass(frozen=True)
class Plane:
    color: Vector3 = Vector3()
    position: Vector3 = Vector3()
    normal: Vector3 = Vector3()
    kind = "plane"


SceneObject = Union[Camera, Sphere, Plane]

OBJECT_TYPES: Dict[str, Type] = {
    "camera": Camera,
    "sphere": Sphere,
    "plane": Plane,
}


class SceneDocument(Tuple[SceneObject, ...]):
    """
    Immutable, file-ordered sequence of scene objects.

    ``diagnostics`` holds the UnknownProperty reports collected while
    parsing. Equality only looks at the objects.
    """
    def __new__(cls, objects=(), diagnostics=()):
        self = super().__new__(cls, objects)
        self._diagnostics = tuple(diagnostics)
        return self

    @property
    def diagnostics(self) -> Tuple[SceneError, ...]:
        return self._diagnostics

    def first(self, kind: str) -> Optional[SceneObject]:
        """First object of the given kind, in file order."""
        for obj in self:
            if obj.kind == kind:
                return obj
        return None

# ---------------------------------------------------------------------------
# OBJECT PARSER
# ---------------------------------------------------------------------------
def _skip_value(scanner: Scanner) -> None:
    c = scanner.peek_char()
    if c == '"':
        next_string(scanner)
    elif c == "[":
        next_vector(scanner)
    else:
        next_number(scanner)


def parse_object(scanner: Scanner, diagnostics: List[SceneError], allow_dup: bool = False) -> SceneObject:
    """
    Parse one ``{ "type": ..., key: value, ... }`` object.

    Properties that belong to another variant are rejected. Unknown keys are
    appended to ``diagnostics`` and their values consumed so the scanner
    stays in step with the grammar.
    """
    scanner.skip_whitespace()
    scanner.expect_char("{")
    scanner.skip_whitespace()

    key = next_string(scanner)
    if key != "type":
        raise MissingTypeKey(key, scanner.line)
    scanner.skip_whitespace()
    scanner.expect_char(":")
    scanner.skip_whitespace()

    type_name = next_string(scanner)
    cls = OBJECT_TYPES.get(type_name)
    if cls is None:
        raise UnknownType(type_name, scanner.line)
    allowed = {f.name for f in fields(cls)}
    seen = {"type"}
    values = {}

    scanner.skip_whitespace()
    while True:
        c = scanner.next_char()
        if c == "}":
            break
        if c != ",":
            raise SceneSyntaxError("',' or '}'", scanner.line, found=c)

        scanner.skip_whitespace()
        key = next_string(scanner)
        key_line = scanner.line
        scanner.skip_whitespace()
        scanner.expect_char(":")
        scanner.skip_whitespace()

        if key in seen and not (allow_dup and key != "type"):
            raise DuplicateProperty(key, key_line)
        if key in SCALAR_PROPERTIES or key in VECTOR_PROPERTIES:
            if key not in allowed:
                raise InvalidPropertyForType(key, type_name, key_line)
            if key in SCALAR_PROPERTIES:
                values[key] = next_number(scanner)
            else:
                values[key] = next_vector(scanner)
            seen.add(key)
        else:
            diagnostics.append(UnknownProperty(key, key_line))
            _skip_value(scanner)
        scanner.skip_whitespace()

    return cls(**values)

# ---------------------------------------------------------------------------
# SCENE PARSER
# ---------------------------------------------------------------------------
def parse_scene(scanner: Scanner, *, allow_dup: bool = False, allow_empty: bool = True) -> SceneDocument:
    """Parse the top-level ``[ object, ... ]`` array and require nothing after it."""
    objects: List[SceneObject] = []
    diagnostics: List[SceneError] = []

    scanner.skip_whitespace()
    scanner.expect_char("[")
    while True:
        scanner.skip_whitespace()
        c = scanner.peek_char()
        if c == "]" and not objects:
            scanner.next_char()
            if not allow_empty:
                raise EmptySceneError(scanner.line)
            break
        if c != "{":
            raise SceneSyntaxError("'{'", scanner.line, found=c)

        objects.append(parse_object(scanner, diagnostics, allow_dup))
        scanner.skip_whitespace()
        c = scanner.next_char()
        if c == "]":
            break
        if c != ",":
            raise SceneSyntaxError("',' or ']'", scanner.line, found=c)

    if not scanner.at_end():
        raise SceneSyntaxError("end of file after scene array", scanner.line, found=scanner.peek_char())
    return SceneDocument(objects, diagnostics)

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse_stream(stream: TextIO, **options) -> SceneDocument:
    return parse_scene(Scanner(stream), **options)


def parse(text: str, **options) -> SceneDocument:
    """
    Parse scene text into a SceneDocument.

    Options: ``allow_dup`` lets a repeated property overwrite the earlier
    one; ``allow_empty=False`` turns ``[]`` into an EmptySceneError.
    """
    return parse_scene(Scanner.from_text(text), **options)


def parse_file(path: str, **options) -> SceneDocument:
    """Open, parse and close a scene file. The handle is closed on every path."""
    try:
        handle = open(path, "r", encoding=FILE_ENCODING, newline="")
    except OSError as exc:
        raise SceneIOError(path, exc.strerror or str(exc)) from None
    with handle:
        return parse_stream(handle, **options)

# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
class _ArgumentParser(argparse.ArgumentParser):
    """argparse with usage errors mapped to exit code 1."""
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"please enter a number, got {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero, got {value}")
    return value


def _scene_path(text: str) -> str:
    if SCENE_SUFFIX not in text:
        raise argparse.ArgumentTypeError(f"{text!r} is not a {SCENE_SUFFIX} file")
    return text


def _cli(argv: List[str]):
    """
    Command-line interface: validate the arguments, parse the input scene.

    0 on success, 1 on any usage or scene error.
    """
    ap = _ArgumentParser(description="Raycaster scene reader")
    ap.add_argument("width", type=_positive_int, help="output image width in pixels")
    ap.add_argument("height", type=_positive_int, help="output image height in pixels")
    ap.add_argument("input", type=_scene_path, help="scene file to read")
    ap.add_argument("output", type=_scene_path, help="output image path")
    ap.add_argument("--debug", action="store_true", help="dump the parsed objects")
    ap.add_argument("--allow-dup-keys", action="store_true")
    ap.add_argument("--strict-empty", action="store_true", help="reject a scene with no objects")
    args = ap.parse_args(argv)

    try:
        scene = parse_file(args.input, allow_dup=args.allow_dup_keys, allow_empty=not args.strict_empty)
    except SceneError as exc:
        print(f"Error: {exc}.", file=sys.stderr)
        return 1

    for diag in scene.diagnostics:
        print(f"Warning: {diag}.", file=sys.stderr)
    if args.debug:
        for obj in scene:
            print(obj)
    print(f"OK: {len(scene)} object(s)")
    return 0


def main():
    return _cli(sys.argv[1:])

# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main())
