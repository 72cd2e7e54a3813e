"""
Per-field encoding rules.

Maps (field, encoding, direction) to the instructions that encode or decode that field.
The function is total: schema validation already rejected any field an encoding cannot
carry, so every combination that reaches this module has an answer.
"""
from typing import List, Optional

from model import Encoding, ModelField, ModelTypeRef, TypeKind
from generators.encoding_instructions import (
    Direction,
    TagFormat,
    Instruction,
    EncodeField,
    DecodeField,
    EncodeNullableField,
    DecodeNullableField,
    EncodeBitSequenceField,
    DecodeBitSequenceField,
    EncodeTaggedField,
    DecodeTaggedField,
)

# primitive -> (fixed encoded size or None, Slice1 tag format or None)
# Primitives without a Slice1 tag format only exist in Slice2.
SLICE_PRIMITIVES = {
    'bool': (1, TagFormat.F1),
    'int8': (1, None),
    'uint8': (1, TagFormat.F1),
    'int16': (2, TagFormat.F2),
    'uint16': (2, None),
    'int32': (4, TagFormat.F4),
    'uint32': (4, None),
    'varint32': (None, None),
    'varuint32': (None, None),
    'int64': (8, TagFormat.F8),
    'uint64': (8, None),
    'varint62': (None, None),
    'varuint62': (None, None),
    'float32': (4, TagFormat.F4),
    'float64': (8, TagFormat.F8),
    'string': (None, TagFormat.OVSIZE),
}


def fixed_size(type_ref: ModelTypeRef) -> Optional[int]:
    """Encoded size of a non-optional value of this type, when it does not depend on the value."""
    if type_ref.kind == TypeKind.PRIMITIVE and type_ref.name in SLICE_PRIMITIVES:
        return SLICE_PRIMITIVES[type_ref.name][0]
    return None


def slice1_tag_format(type_ref: ModelTypeRef) -> Optional[TagFormat]:
    """
    Tag format used when a value of this type is tagged under Slice1.
    None means the type cannot be tagged with Slice1 and the value is left off the wire.
    """
    kind = type_ref.kind
    if kind == TypeKind.PRIMITIVE:
        entry = SLICE_PRIMITIVES.get(type_ref.name)
        return entry[1] if entry else None
    if kind == TypeKind.ENUM:
        return TagFormat.SIZE
    if kind == TypeKind.CLASS:
        return TagFormat.CLASS
    if kind == TypeKind.SEQUENCE:
        element = type_ref.element
        if element is not None and not element.optional and fixed_size(element) is not None:
            return TagFormat.VSIZE
        return TagFormat.FSIZE
    if kind == TypeKind.DICTIONARY:
        key, value = type_ref.key, type_ref.value
        if (key is not None and value is not None and not value.optional
                and fixed_size(key) is not None and fixed_size(value) is not None):
            return TagFormat.VSIZE
        return TagFormat.FSIZE
    if kind in (TypeKind.STRUCT, TypeKind.PROXY):
        return TagFormat.FSIZE
    return None


def uses_bit_sequence(field: ModelField, encoding: Encoding) -> bool:
    return encoding == Encoding.SLICE2 and field.is_optional and not field.is_tagged


def instructions_for(field: ModelField, encoding: Encoding, direction: Direction) -> List[Instruction]:
    encode = direction == Direction.ENCODE

    if not field.is_tagged:
        if not field.is_optional:
            return [EncodeField(field) if encode else DecodeField(field)]
        if encoding == Encoding.SLICE1:
            return [EncodeNullableField(field) if encode else DecodeNullableField(field)]
        return [EncodeBitSequenceField(field) if encode else DecodeBitSequenceField(field)]

    tagged = EncodeTaggedField if encode else DecodeTaggedField
    if encoding == Encoding.SLICE1:
        tag_format = slice1_tag_format(field.type_ref.as_required())
        if tag_format is None:
            return []
        return [tagged(field, encoding, tag_format=tag_format)]
    # The decoder reads the size from the wire.
    size = fixed_size(field.type_ref.as_required()) if encode else None
    return [tagged(field, encoding, size=size)]
