"""
encoding_merger.py
Combines the Slice1 and Slice2 blocks of a struct into the body the generated code runs.

When both encodings are supported the generated code has to pick one at run time from the
encoder/decoder's Encoding. This module emits that choice only when the two blocks differ:

    equal blocks                 -> the shared block, no branch
    empty Slice1, other Slice2   -> if (encoding != Slice1) { slice2 }
    both non-empty               -> if (encoding == Slice1) { slice1 } else { slice2 }
    non-empty Slice1, empty Slice2 -> GenerationInvariantError
"""
from typing import Sequence

from model import Encoding, ModelField, ModelStruct
from generators.encoding_instructions import (
    Direction,
    EncodingBlock,
    EncodingGuard,
    EncodingBranch,
)
from generators.block_synthesizer import synthesize, framing


class GenerationInvariantError(RuntimeError):
    """The input broke an assumption the front-end guarantees. Generation must stop."""


def merge(slice1_block: EncodingBlock, slice2_block: EncodingBlock, direction: Direction) -> EncodingBlock:
    if slice1_block == slice2_block:
        return slice2_block

    if slice1_block.is_empty() and not slice2_block.is_empty():
        return EncodingBlock([EncodingGuard(direction, slice2_block)])

    if not slice1_block.is_empty() and not slice2_block.is_empty():
        return EncodingBlock([EncodingBranch(direction, slice1_block, slice2_block)])

    raise GenerationInvariantError(
        "it is not possible to have an empty Slice2 encoding block with a non empty Slice1 encoding block"
    )


def generate_encoding_blocks(fields: Sequence[ModelField], supported_encodings, direction: Direction) -> EncodingBlock:
    encodings = list(supported_encodings)
    if not encodings:
        raise GenerationInvariantError("No supported encodings")
    if len(encodings) == 1:
        return synthesize(fields, encodings[0], direction)
    if encodings != [Encoding.SLICE1, Encoding.SLICE2]:
        raise GenerationInvariantError(f"Unexpected supported encodings: {encodings!r}")

    slice1_block = synthesize(fields, Encoding.SLICE1, direction)
    slice2_block = synthesize(fields, Encoding.SLICE2, direction)
    return merge(slice1_block, slice2_block, direction)


def generate_struct_body(struct: ModelStruct, direction: Direction) -> EncodingBlock:
    """Merged field block followed by the struct's tag framing."""
    body = generate_encoding_blocks(struct.fields, struct.supported_encodings, direction)
    return body + framing(struct, direction)


def describe_body(block: EncodingBlock) -> str:
    """Short label of the merge shape, for debug output."""
    for instruction in block:
        if isinstance(instruction, EncodingBranch):
            return "branch"
        if isinstance(instruction, EncodingGuard):
            return "guard"
    return "shared"
