import pytest

from model import Encoding, TypeKind
from generators.encoding_instructions import (
    Direction,
    TagFormat,
    EncodeField,
    DecodeField,
    EncodeNullableField,
    DecodeNullableField,
    EncodeBitSequenceField,
    DecodeBitSequenceField,
    EncodeTaggedField,
    DecodeTaggedField,
)
from generators.encoding_strategy import instructions_for, slice1_tag_format, fixed_size
from tests.test_utils import prim, named, seq, dictionary, field


@pytest.mark.parametrize("encoding", [Encoding.SLICE1, Encoding.SLICE2])
def test_required_field_is_encoding_independent(encoding):
    x = field("x", prim("int32"))
    assert instructions_for(x, encoding, Direction.ENCODE) == [EncodeField(x)]
    assert instructions_for(x, encoding, Direction.DECODE) == [DecodeField(x)]


def test_optional_field_uses_nullable_encoding_with_slice1():
    node = field("next", named(TypeKind.CLASS, "Demo::Node", optional=True))
    assert instructions_for(node, Encoding.SLICE1, Direction.ENCODE) == [EncodeNullableField(node)]
    assert instructions_for(node, Encoding.SLICE1, Direction.DECODE) == [DecodeNullableField(node)]


def test_optional_field_uses_bit_sequence_with_slice2():
    name = field("name", prim("string", optional=True))
    assert instructions_for(name, Encoding.SLICE2, Direction.ENCODE) == [EncodeBitSequenceField(name)]
    assert instructions_for(name, Encoding.SLICE2, Direction.DECODE) == [DecodeBitSequenceField(name)]


def test_tagged_field_framing_differs_between_encodings():
    count = field("count", prim("int32", optional=True), tag=3)
    slice1 = instructions_for(count, Encoding.SLICE1, Direction.ENCODE)
    slice2 = instructions_for(count, Encoding.SLICE2, Direction.ENCODE)
    assert slice1 == [EncodeTaggedField(count, Encoding.SLICE1, tag_format=TagFormat.F4)]
    assert slice2 == [EncodeTaggedField(count, Encoding.SLICE2, size=4)]
    assert slice1 != slice2


def test_tagged_decode_does_not_carry_size():
    count = field("count", prim("int64", optional=True), tag=3)
    assert instructions_for(count, Encoding.SLICE2, Direction.DECODE) == [
        DecodeTaggedField(count, Encoding.SLICE2)
    ]
    assert instructions_for(count, Encoding.SLICE1, Direction.DECODE) == [
        DecodeTaggedField(count, Encoding.SLICE1, tag_format=TagFormat.F8)
    ]


def test_slice2_only_tagged_field_has_no_slice1_instructions():
    count = field("count", prim("varint32", optional=True), tag=1)
    assert instructions_for(count, Encoding.SLICE1, Direction.ENCODE) == []
    assert instructions_for(count, Encoding.SLICE1, Direction.DECODE) == []
    assert instructions_for(count, Encoding.SLICE2, Direction.ENCODE) == [
        EncodeTaggedField(count, Encoding.SLICE2, size=None)
    ]


@pytest.mark.parametrize("type_ref, expected", [
    (prim("bool"), TagFormat.F1),
    (prim("uint8"), TagFormat.F1),
    (prim("int16"), TagFormat.F2),
    (prim("float32"), TagFormat.F4),
    (prim("float64"), TagFormat.F8),
    (prim("string"), TagFormat.OVSIZE),
    (prim("uint16"), None),
    (prim("varuint62"), None),
    (named(TypeKind.ENUM, "Demo::Color"), TagFormat.SIZE),
    (named(TypeKind.STRUCT, "Demo::Point"), TagFormat.FSIZE),
    (named(TypeKind.PROXY, "Demo::Greeter"), TagFormat.FSIZE),
    (named(TypeKind.CLASS, "Demo::Node"), TagFormat.CLASS),
    (named(TypeKind.CUSTOM, "Demo::Timestamp"), None),
    (seq(prim("int32")), TagFormat.VSIZE),
    (seq(prim("string")), TagFormat.FSIZE),
    (dictionary(prim("int32"), prim("int64")), TagFormat.VSIZE),
    (dictionary(prim("string"), prim("int64")), TagFormat.FSIZE),
])
def test_slice1_tag_formats(type_ref, expected):
    assert slice1_tag_format(type_ref) == expected


def test_fixed_size_is_only_known_for_fixed_width_primitives():
    assert fixed_size(prim("int16")) == 2
    assert fixed_size(prim("uint64")) == 8
    assert fixed_size(prim("varint62")) is None
    assert fixed_size(prim("string")) is None
    assert fixed_size(named(TypeKind.STRUCT, "Demo::Point")) is None
