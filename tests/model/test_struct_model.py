import pytest

from model import Encoding, ModelField, ModelStruct, ModelTypeRef, SupportedEncodings, TypeKind
from tests.test_utils import prim, seq, field, make_struct


def test_supported_encodings_are_stored_oldest_first():
    encodings = SupportedEncodings([Encoding.SLICE2, Encoding.SLICE1])
    assert list(encodings) == [Encoding.SLICE1, Encoding.SLICE2]
    assert encodings[0] == Encoding.SLICE1
    assert len(encodings) == 2


def test_supported_encodings_accept_names_and_drop_duplicates():
    encodings = SupportedEncodings(["Slice2", "Slice2"])
    assert list(encodings) == [Encoding.SLICE2]
    assert Encoding.SLICE1 not in encodings


def test_empty_supported_encodings_are_rejected():
    with pytest.raises(ValueError, match="at least one encoding"):
        SupportedEncodings([])


def test_tagged_field_requires_optional_type():
    with pytest.raises(ValueError, match="must have an optional type"):
        ModelField("count", prim("int32"), tag=1)
    tagged = ModelField("count", prim("int32", optional=True), tag=1)
    assert tagged.is_tagged
    assert tagged.is_optional


def test_compact_struct_cannot_have_tagged_fields():
    with pytest.raises(ValueError, match="Compact struct"):
        make_struct([field("a", prim("int32", optional=True), tag=1)], compact=True)


def test_struct_fields_are_immutable_and_ordered():
    a = field("a", prim("int32"))
    b = field("b", prim("string"))
    struct = make_struct([a, b])
    assert struct.fields == (a, b)
    assert isinstance(struct.fields, tuple)
    assert struct.scoped_name == "::Demo::S"


def test_struct_accepts_plain_encoding_list():
    struct = ModelStruct("S", [], [Encoding.SLICE2, Encoding.SLICE1])
    assert isinstance(struct.supported_encodings, SupportedEncodings)
    assert list(struct.supported_encodings) == [Encoding.SLICE1, Encoding.SLICE2]
    assert struct.scoped_name == "::S"


def test_type_refs_compare_by_value():
    assert seq(prim("int32")) == seq(prim("int32"))
    assert seq(prim("int32")) != seq(prim("int32", optional=True))
    assert hash(prim("string")) == hash(prim("string"))
    assert prim("int32", optional=True).as_required() == prim("int32")


def test_value_type_mapping():
    assert prim("int32").is_value_type
    assert not prim("string").is_value_type
    assert ModelTypeRef(TypeKind.STRUCT, "Demo::Point").is_value_type
    assert ModelTypeRef(TypeKind.PROXY, "Demo::Greeter").is_value_type
    assert not ModelTypeRef(TypeKind.CLASS, "Demo::Node").is_value_type
    assert not seq(prim("int32")).is_value_type


def test_field_default_flag():
    assert field("a", prim("int32"), default=5).has_default
    assert not field("a", prim("int32")).has_default
