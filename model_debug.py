"""
model_debug.py
Pretty-print and debug dump utilities for SliceWrangler models.
"""
import os
import json
from enum import Enum
from typing import Any

from model import Model, ModelTypeRef, TypeKind


def pretty_print_model(model: Any, file_path: str = None, out_dir: str = "./generated/model_debug"):
    """
    Pretty-print the model to a file (as JSON) for inspection.
    If file_path is not given, use out_dir/model_debug_dump.json.
    """
    if file_path is None:
        file_path = os.path.join(out_dir, "model_debug_dump.json")
    else:
        file_path = os.path.join(out_dir, file_path)

    os.makedirs(os.path.dirname(file_path), exist_ok=True)

    # Use a custom encoder to handle non-serializable objects
    def default_encoder(obj):
        if isinstance(obj, Enum):
            return obj.value
        if hasattr(obj, '__iter__'):
            return list(obj)
        if hasattr(obj, '__dict__'):
            return {k: v for k, v in obj.__dict__.items() if not k.startswith('_')}
        return str(obj)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(model, f, indent=2, default=default_encoder, sort_keys=True)
    print(f"[DEBUG] Model pretty-printed to {file_path}")
    return file_path


def type_ref_to_string(type_ref: ModelTypeRef) -> str:
    kind = type_ref.kind
    if kind == TypeKind.SEQUENCE:
        text = f"sequence<{type_ref_to_string(type_ref.element)}>"
    elif kind == TypeKind.DICTIONARY:
        text = f"dictionary<{type_ref_to_string(type_ref.key)}, {type_ref_to_string(type_ref.value)}>"
    else:
        text = type_ref.name or '?'
    return text + "?" if type_ref.optional else text


def model_to_string(model: Model) -> str:
    lines = [f"Model(file={model.file!r})"]
    for module in model.modules:
        lines.append(f"  module {module.name}")
        for struct in module.structs:
            flags = [e.value for e in struct.supported_encodings]
            if struct.is_compact:
                flags.append("compact")
            lines.append(f"    struct {struct.name} [{', '.join(flags)}]")
            for field in struct.fields:
                tag = f"tag({field.tag}) " if field.is_tagged else ""
                lines.append(f"      {tag}{field.name}: {type_ref_to_string(field.type_ref)}")
    return "\n".join(lines)
