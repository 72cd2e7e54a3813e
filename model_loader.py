# model_loader.py
# Reads the JSON model emitted by the Slice front-end and builds a Model for SliceWrangler.
# The front-end has already parsed, type-checked and computed supported encodings; this loader
# only checks the document shape and converts it.
import json
import os
from typing import Any, Dict, Optional

import jsonschema

from model import (
    Model,
    ModelModule,
    ModelStruct,
    ModelField,
    ModelTypeRef,
    PRIMITIVE_TYPE_NAMES,
    SupportedEncodings,
    TypeKind,
)


class ModelLoadError(RuntimeError):
    pass


TYPE_SCHEMA = {
    "type": "object",
    "properties": {
        "kind": {"enum": [k.value for k in TypeKind]},
        "name": {"type": "string"},
        "optional": {"type": "boolean"},
        "element": {"$ref": "#/definitions/type"},
        "key": {"$ref": "#/definitions/type"},
        "value": {"$ref": "#/definitions/type"},
    },
    "required": ["kind"],
    "additionalProperties": False,
    "allOf": [
        {
            "if": {"properties": {"kind": {"const": "sequence"}}},
            "then": {"required": ["element"]},
        },
        {
            "if": {"properties": {"kind": {"const": "dictionary"}}},
            "then": {"required": ["key", "value"]},
        },
        {
            "if": {"properties": {"kind": {"enum": ["primitive", "enum", "struct", "class", "proxy", "custom"]}}},
            "then": {"required": ["name"]},
        },
        {
            "if": {"properties": {"kind": {"const": "primitive"}}},
            "then": {"properties": {"name": {"enum": list(PRIMITIVE_TYPE_NAMES)}}},
        },
    ],
}

INPUT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "SliceWrangler model",
    "type": "object",
    "definitions": {
        "type": TYPE_SCHEMA,
        "field": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "type": {"$ref": "#/definitions/type"},
                "tag": {"type": ["integer", "null"], "minimum": 0},
                "default": {},
                "doc": {"type": ["string", "null"]},
                "deprecated": {"type": ["string", "null"]},
                "line": {"type": "integer"},
            },
            "required": ["name", "type"],
            "additionalProperties": False,
        },
        "struct": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "fields": {"type": "array", "items": {"$ref": "#/definitions/field"}},
                "encodings": {
                    "type": "array",
                    "items": {"enum": ["Slice1", "Slice2"]},
                    "minItems": 1,
                    "uniqueItems": True,
                },
                "compact": {"type": "boolean"},
                "readonly": {"type": "boolean"},
                "doc": {"type": ["string", "null"]},
                "deprecated": {"type": ["string", "null"]},
                "line": {"type": "integer"},
            },
            "required": ["name", "fields", "encodings"],
            "additionalProperties": False,
        },
    },
    "properties": {
        "modules": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "doc": {"type": ["string", "null"]},
                    "structs": {"type": "array", "items": {"$ref": "#/definitions/struct"}},
                },
                "required": ["name", "structs"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["modules"],
}


def load_model_file(model_file_path: str) -> Model:
    try:
        with open(model_file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise ModelLoadError(f"Cannot read model file '{model_file_path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ModelLoadError(f"Invalid JSON in '{model_file_path}': {e}") from e
    return build_model_from_dict(data, file=model_file_path)


def validate_model_dict(data: Any) -> None:
    """Raise ModelLoadError listing every schema violation, sorted by location."""
    validator = jsonschema.Draft7Validator(INPUT_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        details = "\n".join(
            f"  at /{'/'.join(str(p) for p in e.absolute_path)}: {e.message}" for e in errors
        )
        raise ModelLoadError(f"Model does not match the expected schema:\n{details}")


def build_model_from_dict(data: Dict[str, Any], file: Optional[str] = None) -> Model:
    validate_model_dict(data)
    modules = []
    for module_data in data["modules"]:
        module_name = module_data["name"]
        structs = [_build_struct(s, module_name, file) for s in module_data["structs"]]
        modules.append(ModelModule(module_name, structs, doc=module_data.get("doc")))
    return Model(file=os.path.abspath(file) if file else None, modules=modules)


def _build_type(type_data: Dict[str, Any]) -> ModelTypeRef:
    def sub(key):
        return _build_type(type_data[key]) if key in type_data else None
    return ModelTypeRef(
        kind=TypeKind(type_data["kind"]),
        name=type_data.get("name"),
        optional=type_data.get("optional", False),
        element=sub("element"),
        key=sub("key"),
        value=sub("value"),
    )


def _build_struct(struct_data: Dict[str, Any], module_name: str, file: Optional[str]) -> ModelStruct:
    qualified = f"{module_name}::{struct_data['name']}" if module_name else struct_data['name']
    try:
        fields = [
            ModelField(
                name=f["name"],
                type_ref=_build_type(f["type"]),
                tag=f.get("tag"),
                default=f.get("default"),
                doc=f.get("doc"),
                deprecated=f.get("deprecated"),
                file=file,
                line=f.get("line"),
            )
            for f in struct_data["fields"]
        ]
        return ModelStruct(
            name=struct_data["name"],
            fields=fields,
            supported_encodings=SupportedEncodings(struct_data["encodings"]),
            is_compact=struct_data.get("compact", False),
            module=module_name or None,
            doc=struct_data.get("doc"),
            is_readonly=struct_data.get("readonly", False),
            deprecated=struct_data.get("deprecated"),
            file=file,
            line=struct_data.get("line"),
        )
    except ValueError as e:
        raise ModelLoadError(f"Invalid struct '{qualified}': {e}") from e
