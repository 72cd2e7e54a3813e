"""
Small text builders shared by the C# generator.

CodeBlock is a chunk of generated source. Blocks compare by their rendered text and can be
indented as a unit. ContainerBuilder and FunctionBuilder assemble type and method
declarations around blocks, with their XML doc comments and attributes.
"""
from typing import List, Optional, Tuple, Union

from generators.generator_utils import cs_string_literal

INDENT = "    "


def obsolete_attribute(deprecated: Optional[str]) -> Optional[str]:
    """`deprecated` is the deprecation message; an empty string marks it without a reason."""
    if deprecated is None:
        return None
    if deprecated:
        return f"global::System.Obsolete({cs_string_literal(deprecated)})"
    return "global::System.Obsolete"


class CodeBlock:
    def __init__(self, content: str = ""):
        self.content = content

    def writeln(self, line: str = "") -> 'CodeBlock':
        self.content += line + "\n"
        return self

    def add_block(self, block: Union['CodeBlock', str]) -> 'CodeBlock':
        """Append `block`, separated from the existing content by one empty line."""
        text = str(block)
        if not text:
            return self
        if not self.is_empty():
            self.content = str(self) + "\n\n"
        self.content += text + "\n"
        return self

    def indent(self) -> 'CodeBlock':
        lines = [INDENT + line if line.strip() else "" for line in str(self).split("\n")]
        return CodeBlock("\n".join(lines))

    def is_empty(self) -> bool:
        return not self.content.strip()

    def __str__(self):
        # Trailing whitespace and surrounding empty lines are never significant.
        lines = [line.rstrip() for line in self.content.split("\n")]
        while lines and not lines[0]:
            lines.pop(0)
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines)

    def __eq__(self, other):
        if isinstance(other, (CodeBlock, str)):
            return str(self) == str(other)
        return NotImplemented

    def __hash__(self):
        return hash(str(self))

    def __repr__(self):
        return f"CodeBlock({str(self)!r})"


class CommentTag:
    """One XML doc comment tag, e.g. <summary>...</summary> or <seealso cref="..." />."""
    def __init__(self, tag: str, content: str = "", attribute_name: Optional[str] = None,
                 attribute_value: Optional[str] = None):
        self.tag = tag
        self.content = content
        self.attribute_name = attribute_name
        self.attribute_value = attribute_value

    def __str__(self):
        attribute = f' {self.attribute_name}="{self.attribute_value}"' if self.attribute_name else ""
        content = (self.content or "").strip()
        if not content:
            return f"/// <{self.tag}{attribute} />"
        lines = content.split("\n")
        if len(lines) == 1:
            return f"/// <{self.tag}{attribute}>{content}</{self.tag}>"
        body = "\n".join(f"/// {line}".rstrip() for line in lines)
        return f"/// <{self.tag}{attribute}>\n{body}\n/// </{self.tag}>"


class _DeclarationBuilder:
    def __init__(self):
        self.comments: List[CommentTag] = []
        self.attributes: List[str] = []

    def add_comment(self, tag: str, content: str):
        self.comments.append(CommentTag(tag, content))
        return self

    def add_comment_tag(self, comment: CommentTag):
        self.comments.append(comment)
        return self

    def add_attribute(self, attribute: str):
        self.attributes.append(attribute)
        return self

    def add_obsolete_attribute(self, deprecated: Optional[str]):
        attribute = obsolete_attribute(deprecated)
        return self.add_attribute(attribute) if attribute else self

    def _preamble(self) -> List[str]:
        lines = [str(c) for c in self.comments]
        lines.extend(f"[{a}]" for a in self.attributes)
        return lines


class ContainerBuilder(_DeclarationBuilder):
    def __init__(self, container_type: str, name: str):
        super().__init__()
        self.container_type = container_type
        self.name = name
        self.blocks: List[CodeBlock] = []

    def add_block(self, block: Union[CodeBlock, str]):
        block = block if isinstance(block, CodeBlock) else CodeBlock(block)
        if not block.is_empty():
            self.blocks.append(block)
        return self

    def build(self) -> CodeBlock:
        body = CodeBlock()
        for block in self.blocks:
            body.add_block(block)
        code = CodeBlock()
        for line in self._preamble():
            code.writeln(line)
        code.writeln(f"{self.container_type} {self.name}")
        code.writeln("{")
        if not body.is_empty():
            code.writeln(str(body.indent()))
        code.writeln("}")
        return code


class FunctionBuilder(_DeclarationBuilder):
    def __init__(self, access: str, return_type: str, name: str):
        super().__init__()
        self.access = access
        self.return_type = return_type
        self.name = name
        self.parameters: List[Tuple[str, str, Optional[str]]] = []
        self.body = CodeBlock()

    def add_parameter(self, param_type: str, param_name: str, default_value: Optional[str] = None,
                      doc: Optional[str] = None):
        self.parameters.append((param_type, param_name, default_value))
        if doc:
            self.comments.append(CommentTag("param", doc, "name", param_name.lstrip("@")))
        return self

    def set_body(self, body: Union[CodeBlock, str]):
        self.body = body if isinstance(body, CodeBlock) else CodeBlock(body)
        return self

    def build(self) -> CodeBlock:
        params = []
        for param_type, param_name, default_value in self.parameters:
            param = f"{param_type} {param_name}"
            if default_value is not None:
                param += f" = {default_value}"
            params.append(param)
        signature = " ".join(part for part in (self.access, self.return_type, self.name) if part)
        code = CodeBlock()
        for line in self._preamble():
            code.writeln(line)
        code.writeln(f"{signature}({', '.join(params)})")
        code.writeln("{")
        if not self.body.is_empty():
            code.writeln(str(self.body.indent()))
        code.writeln("}")
        return code
