"""
C# generator for Slice structs.
Emits one file per Slice module, each struct becoming a partial record struct with a field-wise
constructor, a decode constructor and an Encode method.
"""
from typing import Any, Dict, Optional

from model import Model, ModelModule, ModelStruct, ModelField, TypeKind
from generators.code_builder import CodeBlock, CommentTag, ContainerBuilder, FunctionBuilder, obsolete_attribute
from generators.csharp_encoding_renderer import CSharpEncodingRenderer
from generators.encoding_instructions import Direction
from generators.encoding_merger import generate_struct_body, describe_body
from generators.generator_utils import (
    cs_namespace,
    cs_string_literal,
    cs_type,
    field_name,
    parameter_name,
)

GENERATOR_NAME = "slice_wrangler"

FILE_HEADER = """\
// <auto-generated/>
// {generator}

#nullable enable

#pragma warning disable CS1591 // Missing XML Comment
#pragma warning disable CS1573 // Parameter has no matching param tag in the XML comment

using IceRpc.Slice;
using System.Collections.Generic;
"""


class CSharpStructGenerator:
    def __init__(self, model: Model, options: Optional[Dict[str, Any]] = None, verbose: bool = False):
        self.model = model
        self.options = options or {}
        self.verbose = verbose

    def generate(self) -> Dict[str, str]:
        """
        Generate one C# source file per module.
        Returns a dict mapping filename to file content, in model order.
        """
        files = {}
        output_name = self.options.get("output_name")
        for module in self.model.modules:
            if output_name and len(self.model.modules) == 1:
                filename = f"{output_name}.cs"
            else:
                filename = f"{cs_namespace(module.name) or 'Global'}.cs"
            if filename in files:
                files[filename] += "\n" + self.generate_module_body(module)
            else:
                files[filename] = self.generate_module(module)
        return files

    def generate_module(self, module: ModelModule) -> str:
        lines = [FILE_HEADER.format(generator=GENERATOR_NAME)]
        namespace = cs_namespace(module.name)
        if namespace:
            lines.append(f"namespace {namespace};\n")
        lines.append(self.generate_module_body(module))
        return "\n".join(lines)

    def generate_module_body(self, module: ModelModule) -> str:
        namespace = cs_namespace(module.name)
        blocks = CodeBlock()
        for struct in module.structs:
            blocks.add_block(self.generate_struct(struct, namespace))
        return str(blocks) + "\n"

    def generate_struct(self, struct: ModelStruct, namespace: Optional[str] = None) -> CodeBlock:
        identifier = field_name(struct.name)
        declaration = ["public"]
        if struct.is_readonly:
            declaration.append("readonly")
        declaration.extend(["partial", "record", "struct"])

        builder = ContainerBuilder(" ".join(declaration), identifier)
        if struct.doc:
            builder.add_comment("summary", struct.doc)
        builder.add_comment(
            "remarks",
            f"The {GENERATOR_NAME} generator created this record struct from Slice struct <c>{struct.scoped_name}</c>.",
        )
        builder.add_obsolete_attribute(struct.deprecated)

        builder.add_block("\n\n".join(str(self._field_declaration(f, struct, namespace)) for f in struct.fields))
        builder.add_block(self._main_constructor(struct, identifier, namespace))
        builder.add_block(self._decode_constructor(struct, identifier, namespace))
        builder.add_block(self._encode_method(struct, namespace))
        return builder.build()

    def _field_declaration(self, field: ModelField, struct: ModelStruct, namespace: Optional[str]) -> CodeBlock:
        code = CodeBlock()
        if field.doc:
            code.writeln(str(CommentTag("summary", field.doc)))
        obsolete = obsolete_attribute(field.deprecated)
        if obsolete:
            code.writeln(f"[{obsolete}]")
        modifier = "public readonly" if struct.is_readonly else "public"
        code.writeln(f"{modifier} {cs_type(field.type_ref, namespace)} {field_name(field.name)};")
        return code

    def _main_constructor(self, struct: ModelStruct, identifier: str, namespace: Optional[str]) -> CodeBlock:
        constructor = FunctionBuilder("public", "", identifier)
        constructor.add_comment("summary", f'Constructs a new instance of <see cref="{identifier}" />.')

        # C# only allows default values on trailing parameters.
        defaults_from = len(struct.fields)
        while defaults_from > 0 and struct.fields[defaults_from - 1].has_default:
            defaults_from -= 1

        body = CodeBlock()
        for index, field in enumerate(struct.fields):
            default = _cs_literal(field) if index >= defaults_from else None
            constructor.add_parameter(cs_type(field.type_ref, namespace), parameter_name(field.name), default, field.doc)
            body.writeln(f"this.{field_name(field.name)} = {parameter_name(field.name)};")
        constructor.set_body(body)
        return constructor.build()

    def _decode_constructor(self, struct: ModelStruct, identifier: str, namespace: Optional[str]) -> CodeBlock:
        body = generate_struct_body(struct, Direction.DECODE)
        if self.verbose:
            print(f"[DEBUG] {struct.scoped_name}: decode body is {describe_body(body)}")
        constructor = FunctionBuilder("public", "", identifier)
        constructor.add_comment(
            "summary",
            f'Constructs a new instance of <see cref="{identifier}" /> and decodes its fields from a Slice decoder.',
        )
        constructor.add_parameter("ref SliceDecoder", "decoder", None, "The Slice decoder.")
        constructor.set_body(CSharpEncodingRenderer(namespace).render_block(body))
        return constructor.build()

    def _encode_method(self, struct: ModelStruct, namespace: Optional[str]) -> CodeBlock:
        body = generate_struct_body(struct, Direction.ENCODE)
        if self.verbose:
            print(f"[DEBUG] {struct.scoped_name}: encode body is {describe_body(body)}")
        method = FunctionBuilder("public readonly", "void", "Encode")
        method.add_comment("summary", "Encodes the fields of this struct with a Slice encoder.")
        method.add_parameter("ref SliceEncoder", "encoder", None, "The Slice encoder.")
        method.set_body(CSharpEncodingRenderer(namespace).render_block(body))
        return method.build()


def _cs_literal(field: ModelField) -> str:
    """C# literal for the default value of `field`."""
    value = field.default
    if isinstance(value, bool):
        return "true" if value else "false"
    type_ref = field.type_ref
    if type_ref.kind == TypeKind.PRIMITIVE and type_ref.name == "string":
        return cs_string_literal(str(value))
    if type_ref.kind == TypeKind.PRIMITIVE and type_ref.name == "float32":
        return f"{value}F"
    # Enumerators and other expressions are given in C# form by the front-end.
    return str(value)
