"""
Renders EncodingBlocks as C# statements.

The output is a pure function of the instruction values: equal blocks always render to the
same text. Nested types are encoded through the IceRpc encoder/decoder API, whose own
per-encoding layout (size prefixes, enum widths, ...) is resolved at run time.
"""
from typing import List, Optional

from model import Encoding, ModelField, ModelTypeRef, TypeKind
from generators.code_builder import CodeBlock
from generators.encoding_instructions import (
    Direction,
    EncodingBlock,
    Instruction,
    EncodeField,
    DecodeField,
    EncodeNullableField,
    DecodeNullableField,
    BitSequenceStart,
    EncodeBitSequenceField,
    DecodeBitSequenceField,
    EncodeTaggedField,
    DecodeTaggedField,
    SkipTagged,
    EncodeTagEndMarker,
    EncodingGuard,
    EncodingBranch,
)
from generators.generator_utils import cs_type, field_name, local_type_name, primitive_suffix


class CSharpEncodingRenderer:
    def __init__(self, namespace: Optional[str] = None):
        self.namespace = namespace

    # --- Blocks ---
    def render_block(self, block: EncodingBlock) -> CodeBlock:
        code = CodeBlock()
        for instruction in block:
            for line in self.render_instruction(instruction):
                code.writeln(line)
        return code

    def render_instruction(self, instruction: Instruction) -> List[str]:
        if isinstance(instruction, EncodeField):
            return [f"{self.encode_expr(instruction.field.type_ref, self._member(instruction.field))};"]
        if isinstance(instruction, DecodeField):
            return [f"{self._member(instruction.field)} = {self.decode_expr(instruction.field.type_ref)};"]
        if isinstance(instruction, EncodeNullableField):
            return [self._encode_nullable(instruction.field)]
        if isinstance(instruction, DecodeNullableField):
            return [self._decode_nullable(instruction.field)]
        if isinstance(instruction, BitSequenceStart):
            if instruction.direction == Direction.ENCODE:
                return [f"var bitSequenceWriter = encoder.GetBitSequenceWriter({instruction.size});"]
            return [f"var bitSequenceReader = decoder.GetBitSequenceReader({instruction.size});"]
        if isinstance(instruction, EncodeBitSequenceField):
            field = instruction.field
            member = self._member(field)
            return [
                f"bitSequenceWriter.Write({member} != null);",
                f"if ({member} != null)",
                "{",
                f"    {self.encode_expr(field.type_ref.as_required(), self._unwrapped(field))};",
                "}",
            ]
        if isinstance(instruction, DecodeBitSequenceField):
            field = instruction.field
            decode = self.decode_expr(field.type_ref.as_required())
            return [f"{self._member(field)} = bitSequenceReader.Read() ? {decode} : null;"]
        if isinstance(instruction, EncodeTaggedField):
            return self._encode_tagged(instruction)
        if isinstance(instruction, DecodeTaggedField):
            return [self._decode_tagged(instruction)]
        if isinstance(instruction, SkipTagged):
            return ["decoder.SkipTagged();"]
        if isinstance(instruction, EncodeTagEndMarker):
            return ["encoder.EncodeVarInt32(Slice2Definitions.TagEndMarker);"]
        if isinstance(instruction, EncodingGuard):
            return self._render_guard(instruction)
        if isinstance(instruction, EncodingBranch):
            return self._render_branch(instruction)
        raise TypeError(f"Unknown instruction: {instruction!r}")

    # --- Runtime encoding dispatch ---
    @staticmethod
    def _encoding_variable(direction: Direction) -> str:
        return "encoder.Encoding" if direction == Direction.ENCODE else "decoder.Encoding"

    def _render_guard(self, guard: EncodingGuard) -> List[str]:
        variable = self._encoding_variable(guard.direction)
        return [
            f"if ({variable} != SliceEncoding.Slice1) // Slice2 only",
            "{",
            str(self.render_block(guard.block).indent()),
            "}",
        ]

    def _render_branch(self, branch: EncodingBranch) -> List[str]:
        variable = self._encoding_variable(branch.direction)
        return [
            f"if ({variable} == SliceEncoding.Slice1)",
            "{",
            str(self.render_block(branch.slice1_block).indent()),
            "}",
            "else // Slice2",
            "{",
            str(self.render_block(branch.slice2_block).indent()),
            "}",
        ]

    # --- Fields ---
    @staticmethod
    def _member(field: ModelField) -> str:
        return f"this.{field_name(field.name)}"

    def _unwrapped(self, field: ModelField) -> str:
        member = self._member(field)
        return f"{member}.Value" if field.type_ref.is_value_type else member

    def _encode_nullable(self, field: ModelField) -> str:
        member = self._member(field)
        kind = field.type_ref.kind
        if kind == TypeKind.CLASS:
            return f"encoder.EncodeNullableClass({member});"
        if kind == TypeKind.PROXY:
            return f"encoder.EncodeNullableProxy({member});"
        value = f"{member}.Value" if field.type_ref.is_value_type else f"{member}!"
        return f"{self.encode_expr(field.type_ref.as_required(), value)};"

    def _decode_nullable(self, field: ModelField) -> str:
        member = self._member(field)
        required = field.type_ref.as_required()
        if required.kind == TypeKind.CLASS:
            return f"{member} = decoder.DecodeNullableClass<{cs_type(required, self.namespace)}>();"
        if required.kind == TypeKind.PROXY:
            return f"{member} = decoder.DecodeNullableProxy<{cs_type(required, self.namespace)}>();"
        return f"{member} = {self.decode_expr(required)};"

    def _encode_tagged(self, instruction: EncodeTaggedField) -> List[str]:
        field = instruction.field
        member = self._member(field)
        action = self.encode_action(field.type_ref.as_required())
        if instruction.encoding == Encoding.SLICE1:
            args = f"{field.tag}, TagFormat.{instruction.tag_format.value}, {self._unwrapped(field)}, {action}"
        elif instruction.size is not None:
            args = f"{field.tag}, size: {instruction.size}, {self._unwrapped(field)}, {action}"
        else:
            args = f"{field.tag}, {self._unwrapped(field)}, {action}"
        return [
            f"if ({member} != null)",
            "{",
            f"    encoder.EncodeTagged({args});",
            "}",
        ]

    def _decode_tagged(self, instruction: DecodeTaggedField) -> str:
        field = instruction.field
        func = self.decode_func(field.type_ref)
        if instruction.encoding == Encoding.SLICE1:
            return (f"{self._member(field)} = decoder.DecodeTagged({field.tag}, "
                    f"TagFormat.{instruction.tag_format.value}, {func}, useTagEndMarker: false);")
        return f"{self._member(field)} = decoder.DecodeTagged({field.tag}, {func}, useTagEndMarker: true);"

    # --- Types ---
    def encode_expr(self, type_ref: ModelTypeRef, value: str) -> str:
        """Expression encoding the non-null `value` of type `type_ref`."""
        kind = type_ref.kind
        if kind == TypeKind.PRIMITIVE:
            return f"encoder.Encode{primitive_suffix(type_ref)}({value})"
        if kind in (TypeKind.ENUM, TypeKind.CUSTOM):
            return f"encoder.Encode{local_type_name(type_ref.name)}({value})"
        if kind == TypeKind.STRUCT:
            return f"{value}.Encode(ref encoder)"
        if kind == TypeKind.CLASS:
            return f"encoder.EncodeClass({value})"
        if kind == TypeKind.PROXY:
            return f"encoder.EncodeProxy({value})"
        if kind == TypeKind.SEQUENCE:
            method = "EncodeSequenceOfOptionals" if type_ref.element.optional else "EncodeSequence"
            return f"encoder.{method}({value}, {self.encode_action(type_ref.element.as_required())})"
        if kind == TypeKind.DICTIONARY:
            method = "EncodeDictionaryWithOptionalValueType" if type_ref.value.optional else "EncodeDictionary"
            return (f"encoder.{method}({value}, {self.encode_action(type_ref.key)}, "
                    f"{self.encode_action(type_ref.value.as_required())})")
        raise TypeError(f"Unknown type kind: {kind!r}")

    def encode_action(self, type_ref: ModelTypeRef) -> str:
        return (f"(ref SliceEncoder encoder, {cs_type(type_ref, self.namespace)} value) => "
                f"{self.encode_expr(type_ref, 'value')}")

    def decode_expr(self, type_ref: ModelTypeRef) -> str:
        """Expression decoding a non-null value of type `type_ref`."""
        kind = type_ref.kind
        type_string = cs_type(type_ref.as_required(), self.namespace)
        if kind == TypeKind.PRIMITIVE:
            return f"decoder.Decode{primitive_suffix(type_ref)}()"
        if kind in (TypeKind.ENUM, TypeKind.CUSTOM):
            return f"decoder.Decode{local_type_name(type_ref.name)}()"
        if kind == TypeKind.STRUCT:
            return f"new {type_string}(ref decoder)"
        if kind == TypeKind.CLASS:
            return f"decoder.DecodeClass<{type_string}>()"
        if kind == TypeKind.PROXY:
            return f"decoder.DecodeProxy<{type_string}>()"
        if kind == TypeKind.SEQUENCE:
            method = "DecodeSequenceOfOptionals" if type_ref.element.optional else "DecodeSequence"
            return f"decoder.{method}({self.decode_func(type_ref.element)})"
        if kind == TypeKind.DICTIONARY:
            key_type = cs_type(type_ref.key, self.namespace)
            value_type = cs_type(type_ref.value, self.namespace)
            method = "DecodeDictionaryWithOptionalValueType" if type_ref.value.optional else "DecodeDictionary"
            return (f"decoder.{method}(count => new Dictionary<{key_type}, {value_type}>(count), "
                    f"{self.decode_func(type_ref.key)}, {self.decode_func(type_ref.value)})")
        raise TypeError(f"Unknown type kind: {kind!r}")

    def decode_func(self, type_ref: ModelTypeRef) -> str:
        """Decode lambda; optional value types are widened to T? so null can stand for absent."""
        body = self.decode_expr(type_ref.as_required())
        if type_ref.optional and type_ref.is_value_type:
            body += f" as {cs_type(type_ref, self.namespace)}"
        return f"(ref SliceDecoder decoder) => {body}"
