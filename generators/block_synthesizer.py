"""
Builds one EncodingBlock per (encoding, direction) pair from a struct's fields.
"""
from typing import List, Sequence

from model import Encoding, ModelField, ModelStruct
from generators.encoding_instructions import (
    Direction,
    EncodingBlock,
    BitSequenceStart,
    SkipTagged,
    EncodeTagEndMarker,
)
from generators.encoding_strategy import instructions_for, uses_bit_sequence


def bit_sequence_size(fields: Sequence[ModelField], encoding: Encoding) -> int:
    return sum(1 for field in fields if uses_bit_sequence(field, encoding))


def wire_order(fields: Sequence[ModelField]) -> List[ModelField]:
    """
    Non-tagged fields in declared order, then tagged fields by increasing tag.
    Decoders read tagged values in tag order, whatever order they were declared in.
    """
    required = [f for f in fields if not f.is_tagged]
    tagged = sorted((f for f in fields if f.is_tagged), key=lambda f: f.tag)
    return required + tagged


def synthesize(fields: Sequence[ModelField], encoding: Encoding, direction: Direction) -> EncodingBlock:
    """Concatenate the per-field instructions in wire order."""
    instructions = []
    size = bit_sequence_size(fields, encoding)
    if size:
        instructions.append(BitSequenceStart(direction, size))
    for field in wire_order(fields):
        instructions.extend(instructions_for(field, encoding, direction))
    return EncodingBlock(instructions)


def framing(struct: ModelStruct, direction: Direction) -> EncodingBlock:
    """
    Trailing tag framing of a non-compact struct. It is the same for every encoding,
    so it is appended after the merged block rather than inside either arm.
    """
    if struct.is_compact:
        return EncodingBlock()
    if direction == Direction.DECODE:
        return EncodingBlock([SkipTagged()])
    return EncodingBlock([EncodeTagEndMarker()])
