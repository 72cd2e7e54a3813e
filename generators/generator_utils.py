"""
Shared utilities for the C# generator.
Handles type mapping and identifier/name conversion.
"""
import re
from typing import Optional

from model import ModelTypeRef, TypeKind

CS_RESERVED_KEYWORDS = {
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char", "checked",
    "class", "const", "continue", "decimal", "default", "delegate", "do", "double", "else",
    "enum", "event", "explicit", "extern", "false", "finally", "fixed", "float", "for",
    "foreach", "goto", "if", "implicit", "in", "int", "interface", "internal", "is", "lock",
    "long", "namespace", "new", "null", "object", "operator", "out", "override", "params",
    "private", "protected", "public", "readonly", "ref", "return", "sbyte", "sealed", "short",
    "sizeof", "stackalloc", "static", "string", "struct", "switch", "this", "throw", "true",
    "try", "typeof", "uint", "ulong", "unchecked", "unsafe", "ushort", "using", "virtual",
    "void", "volatile", "while",
}

# --- Type Mapping ---
# primitive -> (C# type, Encode/Decode method suffix)
SLICE_TO_CS_PRIMITIVE = {
    'bool': ('bool', 'Bool'),
    'int8': ('sbyte', 'Int8'),
    'uint8': ('byte', 'UInt8'),
    'int16': ('short', 'Int16'),
    'uint16': ('ushort', 'UInt16'),
    'int32': ('int', 'Int32'),
    'uint32': ('uint', 'UInt32'),
    'varint32': ('int', 'VarInt32'),
    'varuint32': ('uint', 'VarUInt32'),
    'int64': ('long', 'Int64'),
    'uint64': ('ulong', 'UInt64'),
    'varint62': ('long', 'VarInt62'),
    'varuint62': ('ulong', 'VarUInt62'),
    'float32': ('float', 'Float32'),
    'float64': ('double', 'Float64'),
    'string': ('string', 'String'),
}


# --- Name Resolution ---
def escape_identifier(name: str) -> str:
    return f"@{name}" if name in CS_RESERVED_KEYWORDS else name


def _words(name: str):
    # Splits snake_case, kebab-case and camelCase names into words.
    parts = re.split(r"[_\-\s]+", name)
    words = []
    for part in parts:
        words.extend(re.findall(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+|[A-Z]", part))
    return [w for w in words if w]


def pascal_case(name: str) -> str:
    words = _words(name)
    if not words:
        return name
    return "".join(w[0].upper() + w[1:] for w in words)


def camel_case(name: str) -> str:
    pascal = pascal_case(name)
    return pascal[0].lower() + pascal[1:] if pascal else pascal


def field_name(name: str) -> str:
    return escape_identifier(pascal_case(name))


def parameter_name(name: str) -> str:
    return escape_identifier(camel_case(name))


def cs_namespace(module_name: Optional[str]) -> str:
    if not module_name:
        return ""
    return ".".join(escape_identifier(part) for part in module_name.strip(":").split("::"))


def cs_type_name(scoped_name: str, namespace: Optional[str] = None) -> str:
    """
    Map a Slice scoped name ('Demo::Point', '::Demo::Point' or 'Point') to a C# type name.
    Names already in `namespace` stay short; other qualified names are fully qualified.
    """
    parts = scoped_name.strip(":").split("::")
    if len(parts) == 1:
        return escape_identifier(parts[0])
    type_namespace = cs_namespace("::".join(parts[:-1]))
    if namespace and type_namespace == namespace:
        return escape_identifier(parts[-1])
    return f"global::{type_namespace}.{escape_identifier(parts[-1])}"


def local_type_name(scoped_name: str) -> str:
    """Unqualified name, used to build Encode<Name>/Decode<Name> extension method names."""
    return scoped_name.strip(":").split("::")[-1]


def cs_type(type_ref: ModelTypeRef, namespace: Optional[str] = None) -> str:
    """Map a type reference to its C# type string, including the nullable marker."""
    kind = type_ref.kind
    if kind == TypeKind.PRIMITIVE:
        base = SLICE_TO_CS_PRIMITIVE[type_ref.name][0]
    elif kind == TypeKind.SEQUENCE:
        base = f"IList<{cs_type(type_ref.element, namespace)}>"
    elif kind == TypeKind.DICTIONARY:
        base = f"IDictionary<{cs_type(type_ref.key, namespace)}, {cs_type(type_ref.value, namespace)}>"
    else:
        base = cs_type_name(type_ref.name, namespace)
    return base + "?" if type_ref.optional else base


def primitive_suffix(type_ref: ModelTypeRef) -> str:
    return SLICE_TO_CS_PRIMITIVE[type_ref.name][1]


_CS_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\0": "\\0",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def cs_string_literal(text: str) -> str:
    """Quoted C# regular string literal; the result never spans more than one line."""
    chars = []
    for char in text:
        if char in _CS_STRING_ESCAPES:
            chars.append(_CS_STRING_ESCAPES[char])
        elif ord(char) < 0x20 or 0x7f <= ord(char) < 0xa0 or char in "\u2028\u2029":
            chars.append(f"\\u{ord(char):04x}")
        else:
            chars.append(char)
    return '"' + "".join(chars) + '"'
