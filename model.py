"""
model.py
Concrete, generator-ready representation of validated Slice structs. The front-end resolves every
reference and computes the supported encodings before anything here is built.
"""
from enum import Enum
from typing import List, Optional, Any, Iterable


class Encoding(Enum):
    # Declaration order is the canonical order: oldest encoding first.
    SLICE1 = "Slice1"
    SLICE2 = "Slice2"


_ENCODING_ORDER = {encoding: index for index, encoding in enumerate(Encoding)}


class SupportedEncodings:
    """
    The encodings a struct supports, always stored oldest to newest without duplicates.
    An empty set is rejected: every struct supports at least one encoding.
    """
    def __init__(self, encodings: Iterable[Encoding]):
        unique = set(Encoding(e) for e in encodings)
        if not unique:
            raise ValueError("A struct must support at least one encoding")
        self._encodings = tuple(sorted(unique, key=_ENCODING_ORDER.__getitem__))

    def __iter__(self):
        return iter(self._encodings)

    def __len__(self):
        return len(self._encodings)

    def __getitem__(self, index):
        return self._encodings[index]

    def __contains__(self, encoding):
        return encoding in self._encodings

    def __eq__(self, other):
        return isinstance(other, SupportedEncodings) and self._encodings == other._encodings

    def __hash__(self):
        return hash(self._encodings)

    def __repr__(self):
        return f"SupportedEncodings({[e.value for e in self._encodings]!r})"


PRIMITIVE_TYPE_NAMES = (
    "bool", "int8", "uint8", "int16", "uint16", "int32", "uint32", "varint32", "varuint32",
    "int64", "uint64", "varint62", "varuint62", "float32", "float64", "string",
)


class TypeKind(Enum):
    PRIMITIVE = "primitive"
    ENUM = "enum"
    STRUCT = "struct"
    SEQUENCE = "sequence"
    DICTIONARY = "dictionary"
    CLASS = "class"
    PROXY = "proxy"
    CUSTOM = "custom"


class ModelTypeRef:
    """
    Reference to the type of a field, sequence element or dictionary key/value.
    `name` is the primitive keyword (e.g. 'int32') or the scoped Slice name of a user type.
    """
    def __init__(
        self,
        kind: TypeKind,
        name: Optional[str] = None,
        optional: bool = False,
        element: Optional['ModelTypeRef'] = None,
        key: Optional['ModelTypeRef'] = None,
        value: Optional['ModelTypeRef'] = None,
    ):
        self.kind = kind
        self.name = name
        self.optional = optional
        self.element = element
        self.key = key
        self.value = value

    @property
    def is_value_type(self) -> bool:
        """True when the C# mapping is a struct type, so its nullable form is Nullable<T>."""
        if self.kind == TypeKind.PRIMITIVE:
            return self.name != "string"
        return self.kind in (TypeKind.ENUM, TypeKind.STRUCT, TypeKind.PROXY)

    def as_required(self) -> 'ModelTypeRef':
        if not self.optional:
            return self
        return ModelTypeRef(self.kind, self.name, False, self.element, self.key, self.value)

    def _key(self):
        return (self.kind, self.name, self.optional, self.element, self.key, self.value)

    def __eq__(self, other):
        return isinstance(other, ModelTypeRef) and self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return f"ModelTypeRef(kind={self.kind.value!r}, name={self.name!r}, optional={self.optional!r})"


class ModelField:
    def __init__(
        self,
        name: str,
        type_ref: ModelTypeRef,
        tag: Optional[int] = None,
        default: Optional[Any] = None,
        doc: Optional[str] = None,
        deprecated: Optional[str] = None,
        file: Optional[str] = None,
        line: Optional[int] = None,
    ):
        if tag is not None and not type_ref.optional:
            raise ValueError(f"Tagged field '{name}' must have an optional type")
        self.name = name
        self.type_ref = type_ref
        self.tag = tag
        self.default = default
        self.doc = doc
        self.deprecated = deprecated
        self.file = file
        self.line = line

    @property
    def is_optional(self) -> bool:
        return self.type_ref.optional

    @property
    def is_tagged(self) -> bool:
        return self.tag is not None

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def __repr__(self):
        return f"ModelField(name={self.name!r}, type_ref={self.type_ref!r}, tag={self.tag!r})"


class ModelStruct:
    """
    A Slice struct. `fields` is in wire order and cannot be reordered after construction;
    transforms build a new ModelStruct instead.
    """
    def __init__(
        self,
        name: str,
        fields: List[ModelField],
        supported_encodings: SupportedEncodings,
        is_compact: bool = False,
        module: Optional[str] = None,
        doc: Optional[str] = None,
        is_readonly: bool = False,
        deprecated: Optional[str] = None,
        file: Optional[str] = None,
        line: Optional[int] = None,
    ):
        if not isinstance(supported_encodings, SupportedEncodings):
            supported_encodings = SupportedEncodings(supported_encodings)
        if is_compact and any(f.is_tagged for f in fields):
            raise ValueError(f"Compact struct '{name}' cannot have tagged fields")
        self.name = name
        self.fields = tuple(fields)
        self.supported_encodings = supported_encodings
        self.is_compact = is_compact
        self.module = module
        self.doc = doc
        self.is_readonly = is_readonly
        self.deprecated = deprecated
        self.file = file
        self.line = line

    @property
    def scoped_name(self) -> str:
        return f"::{self.module}::{self.name}" if self.module else f"::{self.name}"

    def __repr__(self):
        return f"ModelStruct(name={self.name!r}, fields={len(self.fields)}, encodings={self.supported_encodings!r})"


class ModelModule:
    def __init__(self, name: str, structs: List[ModelStruct], doc: Optional[str] = None):
        self.name = name
        self.structs = structs
        self.doc = doc


class Model:
    def __init__(self, file: Optional[str], modules: List[ModelModule]):
        self.file = file
        self.modules = modules

    def iter_structs(self):
        for module in self.modules:
            for struct in module.structs:
                yield module, struct
