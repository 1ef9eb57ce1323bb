import pytest

import scene_parser as sp
from scanner import (
    DuplicateProperty,
    EmptySceneError,
    InvalidPropertyForType,
    MissingTypeKey,
    NumberFormatError,
    SceneSyntaxError,
    UnexpectedEndOfInput,
    UnknownType,
    Vector3,
)


def test_single_camera():
    doc = sp.parse('[ { "type": "camera", "width": 1, "height": 1 } ]')
    assert list(doc) == [sp.Camera(width=1.0, height=1.0)]

def test_compact_sphere():
    doc = sp.parse('[{"type":"sphere","color":[1,0,0],"position":[0,0,-1],"radius":1}]')
    assert len(doc) == 1
    sphere = doc[0]
    assert isinstance(sphere, sp.Sphere)
    assert sphere.color == Vector3(1, 0, 0)
    assert sphere.position == Vector3(0, 0, -1)
    assert sphere.radius == 1.0

def test_unknown_type():
    with pytest.raises(UnknownType) as ei:
        sp.parse('[{"type":"box"}]')
    assert ei.value.value == "box"
    assert ei.value.line == 1

def test_object_never_closed():
    with pytest.raises(SceneSyntaxError) as ei:
        sp.parse('[{"type": "camera" ]')
    assert ei.value.line == 1
    assert ei.value.found == "]"

def test_objects_kept_in_file_order():
    doc = sp.parse('[{"type":"plane","normal":[0,1,0]},{"type":"camera","width":2,"height":2}]')
    assert [obj.kind for obj in doc] == ["plane", "camera"]
    assert doc[0] == sp.Plane(normal=Vector3(0, 1, 0))
    assert doc[1] == sp.Camera(width=2.0, height=2.0)

def test_empty_array_is_empty_scene():
    doc = sp.parse("[]")
    assert len(doc) == 0
    assert doc.diagnostics == ()
    assert len(sp.parse(" [ \n ] \n")) == 0

def test_empty_array_rejected_on_request():
    with pytest.raises(EmptySceneError) as ei:
        sp.parse("[\n]", allow_empty=False)
    assert ei.value.line == 2

def test_missing_fields_default_to_zero():
    doc = sp.parse('[{"type":"sphere"}]')
    assert doc[0] == sp.Sphere(color=Vector3(), position=Vector3(), radius=0.0)

def test_parse_twice_gives_equal_documents():
    text = '[{"type":"camera","width":3,"height":4},{"type":"sphere","radius":2}]'
    assert sp.parse(text) == sp.parse(text)

def test_type_must_come_first():
    with pytest.raises(MissingTypeKey) as ei:
        sp.parse('[\n{ "width": 1, "type": "camera" }]')
    assert ei.value.key == "width"
    assert ei.value.line == 2

def test_property_for_other_variant_rejected():
    with pytest.raises(InvalidPropertyForType) as ei:
        sp.parse('[{"type":"plane",\n"radius":4}]')
    assert ei.value.key == "radius"
    assert ei.value.type_name == "plane"
    assert ei.value.line == 2

def test_camera_rejects_vectors():
    with pytest.raises(InvalidPropertyForType):
        sp.parse('[{"type":"camera","color":[1,1,1]}]')

def test_unknown_property_is_skipped_and_reported():
    doc = sp.parse(
        '[{"type":"camera","fov":45,"width":2,"up":[0,1,0],\n"name":"main","height":3}]'
    )
    assert doc[0] == sp.Camera(width=2.0, height=3.0)
    assert [d.key for d in doc.diagnostics] == ["fov", "up", "name"]
    assert [d.line for d in doc.diagnostics] == [1, 1, 2]

def test_duplicate_property_rejected_by_default():
    with pytest.raises(DuplicateProperty):
        sp.parse('[{"type":"sphere","radius":1,"radius":2}]')

def test_duplicate_property_last_wins_when_allowed():
    doc = sp.parse('[{"type":"sphere","radius":1,"radius":2}]', allow_dup=True)
    assert doc[0].radius == 2.0

def test_repeated_type_always_rejected():
    with pytest.raises(DuplicateProperty):
        sp.parse('[{"type":"sphere","type":"plane"}]', allow_dup=True)

def test_bad_number_in_property():
    with pytest.raises(NumberFormatError) as ei:
        sp.parse('[\n\n{"type":"sphere","radius":1.2.3}]')
    assert ei.value.line == 3

def test_missing_comma_between_objects():
    with pytest.raises(SceneSyntaxError) as ei:
        sp.parse('[{"type":"camera"} {"type":"plane"}]')
    assert ei.value.expected == "',' or ']'"

def test_trailing_comma_in_array():
    with pytest.raises(SceneSyntaxError) as ei:
        sp.parse('[{"type":"camera"},]')
    assert ei.value.expected == "'{'"

def test_garbage_inside_object():
    with pytest.raises(SceneSyntaxError) as ei:
        sp.parse('[{"type":"camera";"width":1}]')
    assert ei.value.expected == "',' or '}'"

def test_root_must_be_array():
    with pytest.raises(SceneSyntaxError):
        sp.parse('{"type":"camera"}')

def test_extra_data_after_array():
    with pytest.raises(SceneSyntaxError) as ei:
        sp.parse('[{"type":"camera"}]\n x')
    assert ei.value.line == 2
    assert ei.value.found == "x"

def test_truncated_input():
    with pytest.raises(UnexpectedEndOfInput) as ei:
        sp.parse('[\n{"type":"camera",\n')
    assert ei.value.line == 3

def test_first_finds_camera():
    doc = sp.parse('[{"type":"sphere"},{"type":"camera","width":5},{"type":"camera"}]')
    assert doc.first("camera") == sp.Camera(width=5.0)
    assert doc.first("plane") is None

def test_diagnostics_are_read_only():
    doc = sp.parse('[{"type":"camera","fov":45}]')
    with pytest.raises(AttributeError):
        doc.diagnostics = ()
    assert [d.key for d in doc.diagnostics] == ["fov"]

def test_infinite_radius_rejected():
    with pytest.raises(NumberFormatError):
        sp.parse('[{"type":"sphere","radius":1e999}]')
