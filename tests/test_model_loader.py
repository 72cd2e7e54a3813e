import json
import os

import pytest

from model import Encoding, TypeKind
from model_loader import ModelLoadError, build_model_from_dict, load_model_file, validate_model_dict
from tests.test_utils import model_dict


def point_struct(**overrides):
    struct = {
        "name": "Point",
        "compact": True,
        "encodings": ["Slice2", "Slice1"],
        "fields": [
            {"name": "x", "type": {"kind": "primitive", "name": "int32"}},
            {"name": "y", "type": {"kind": "primitive", "name": "int32"}, "default": 0},
        ],
    }
    struct.update(overrides)
    return struct


def test_build_simple_model():
    model = build_model_from_dict(model_dict([point_struct()]))
    [(module, struct)] = list(model.iter_structs())
    assert module.name == "Demo"
    assert struct.scoped_name == "::Demo::Point"
    assert struct.is_compact
    assert list(struct.supported_encodings) == [Encoding.SLICE1, Encoding.SLICE2]
    assert [f.name for f in struct.fields] == ["x", "y"]
    assert struct.fields[1].default == 0
    assert model.file is None


def test_nested_types_are_converted():
    fields = [
        {"name": "tags", "type": {"kind": "sequence", "element": {"kind": "primitive", "name": "string"}}},
        {"name": "scores", "tag": 1, "type": {
            "kind": "dictionary", "optional": True,
            "key": {"kind": "primitive", "name": "string"},
            "value": {"kind": "enum", "name": "Demo::Level"},
        }},
    ]
    struct = build_model_from_dict(model_dict([point_struct(compact=False, fields=fields)])).modules[0].structs[0]
    tags, scores = struct.fields
    assert tags.type_ref.kind == TypeKind.SEQUENCE
    assert tags.type_ref.element.name == "string"
    assert scores.is_tagged and scores.is_optional
    assert scores.type_ref.value.kind == TypeKind.ENUM


@pytest.mark.parametrize("data", [
    {},
    {"modules": [{"name": "Demo", "structs": [{"name": "S", "fields": []}]}]},
    model_dict([point_struct(encodings=[])]),
    model_dict([point_struct(encodings=["Slice3"])]),
    model_dict([point_struct(fields=[{"name": "x", "type": {"kind": "primitive", "name": "int128"}}])]),
    model_dict([point_struct(fields=[{"name": "x", "type": {"kind": "sequence"}}])]),
    model_dict([point_struct(unexpected=True)]),
])
def test_schema_violations_are_reported(data):
    with pytest.raises(ModelLoadError) as excinfo:
        validate_model_dict(data)
    assert "Model does not match the expected schema" in str(excinfo.value)


def test_invalid_struct_is_reported_with_its_name():
    tagged_required = {"name": "x", "tag": 1, "type": {"kind": "primitive", "name": "int32"}}
    with pytest.raises(ModelLoadError) as excinfo:
        build_model_from_dict(model_dict([point_struct(compact=False, fields=[tagged_required])]))
    assert "Invalid struct 'Demo::Point'" in str(excinfo.value)


def test_compact_struct_with_tags_is_rejected():
    tagged = {"name": "x", "tag": 1, "type": {"kind": "primitive", "name": "int32", "optional": True}}
    with pytest.raises(ModelLoadError):
        build_model_from_dict(model_dict([point_struct(fields=[tagged])]))


def test_load_model_file(temp_dir):
    path = os.path.join(temp_dir, "model.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(model_dict([point_struct()]), f)
    model = load_model_file(path)
    assert model.file == os.path.abspath(path)
    assert model.modules[0].structs[0].fields[0].file == path


def test_missing_file(temp_dir):
    with pytest.raises(ModelLoadError) as excinfo:
        load_model_file(os.path.join(temp_dir, "missing.json"))
    assert "Cannot read model file" in str(excinfo.value)


def test_malformed_json(temp_dir):
    path = os.path.join(temp_dir, "bad.json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("{ not json")
    with pytest.raises(ModelLoadError) as excinfo:
        load_model_file(path)
    assert "Invalid JSON" in str(excinfo.value)
