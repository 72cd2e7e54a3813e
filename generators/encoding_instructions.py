"""
Intermediate representation for generated encode/decode bodies.

Each instruction is a small immutable value. Two instructions are equal when they would
produce the same code, which lets the merger compare whole blocks without rendering them.
"""
from enum import Enum
from typing import Iterable, Optional

from model import Encoding, ModelField


class Direction(Enum):
    ENCODE = "encode"
    DECODE = "decode"


class TagFormat(Enum):
    """Slice1 tag formats, written in the tag header of a tagged value."""
    F1 = "F1"
    F2 = "F2"
    F4 = "F4"
    F8 = "F8"
    SIZE = "Size"
    VSIZE = "VSize"
    FSIZE = "FSize"
    CLASS = "Class"
    OVSIZE = "OVSize"


class Instruction:
    def _key(self):
        return ()

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__,) + self._key())

    def __repr__(self):
        return f"{type(self).__name__}{self._key()!r}"


class _FieldInstruction(Instruction):
    def __init__(self, field: ModelField):
        self.field = field

    def _key(self):
        return (self.field.name, self.field.type_ref, self.field.tag)


class EncodeField(_FieldInstruction):
    pass


class DecodeField(_FieldInstruction):
    pass


class EncodeNullableField(_FieldInstruction):
    pass


class DecodeNullableField(_FieldInstruction):
    pass


class EncodeBitSequenceField(_FieldInstruction):
    pass


class DecodeBitSequenceField(_FieldInstruction):
    pass


class BitSequenceStart(Instruction):
    def __init__(self, direction: Direction, size: int):
        self.direction = direction
        self.size = size

    def _key(self):
        return (self.direction, self.size)


class _TaggedInstruction(_FieldInstruction):
    """
    A tag-framed value. Under Slice1 the frame carries a TagFormat; under Slice2 it carries
    the encoded size when that size is known up front.
    """
    def __init__(self, field: ModelField, encoding: Encoding, tag_format: Optional[TagFormat] = None,
                 size: Optional[int] = None):
        super().__init__(field)
        self.encoding = encoding
        self.tag_format = tag_format
        self.size = size

    def _key(self):
        return super()._key() + (self.encoding, self.tag_format, self.size)


class EncodeTaggedField(_TaggedInstruction):
    pass


class DecodeTaggedField(_TaggedInstruction):
    pass


class SkipTagged(Instruction):
    pass


class EncodeTagEndMarker(Instruction):
    pass


class EncodingGuard(Instruction):
    """Runs `block` only when the live encoding is not Slice1."""
    def __init__(self, direction: Direction, block: 'EncodingBlock'):
        self.direction = direction
        self.block = block

    def _key(self):
        return (self.direction, self.block)


class EncodingBranch(Instruction):
    """Runs `slice1_block` under Slice1 and `slice2_block` otherwise."""
    def __init__(self, direction: Direction, slice1_block: 'EncodingBlock', slice2_block: 'EncodingBlock'):
        self.direction = direction
        self.slice1_block = slice1_block
        self.slice2_block = slice2_block

    def _key(self):
        return (self.direction, self.slice1_block, self.slice2_block)


class EncodingBlock:
    """Ordered, immutable sequence of instructions for one (encoding, direction) pair."""
    def __init__(self, instructions: Iterable[Instruction] = ()):
        self.instructions = tuple(instructions)

    def is_empty(self) -> bool:
        return not self.instructions

    def __iter__(self):
        return iter(self.instructions)

    def __len__(self):
        return len(self.instructions)

    def __add__(self, other: 'EncodingBlock') -> 'EncodingBlock':
        return EncodingBlock(self.instructions + tuple(other))

    def __eq__(self, other):
        return isinstance(other, EncodingBlock) and self.instructions == other.instructions

    def __hash__(self):
        return hash(self.instructions)

    def __repr__(self):
        return f"EncodingBlock({list(self.instructions)!r})"
