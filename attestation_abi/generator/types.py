"""Type definitions for record parsing, layout description and code generation."""

from dataclasses import dataclass
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin

# Derive marker that requests an ABIProvider implementation
ATTESTATION_DERIVE = "Attestation"

# Attribute carrying ABI-level overrides: #[attestation_abi(name = "...", version = "...")]
ABI_ATTRIBUTE = "attestation_abi"

# Attribute carrying field metadata: #[abi_field(description = "...")]
FIELD_ATTRIBUTE = "abi_field"


class RecordKind(StrEnum):
    """Shape of a parsed type definition."""

    STRUCT = auto()  # Named fields
    TUPLE_STRUCT = auto()  # Positional fields
    UNIT_STRUCT = auto()  # No field list
    ENUM = auto()
    ALIAS = auto()


class TypeExprKind(StrEnum):
    """Structural form of a type expression."""

    PATH = auto()  # core::integer::u64, Array<u8>
    SNAPSHOT = auto()  # @T
    PAREN = auto()  # (T)
    TUPLE = auto()  # (T, U)
    FIXED_ARRAY = auto()  # [T; N]


class TypeTag(StrEnum):
    """Semantic classification of a field type.

    Values are the Cairo spellings written into generated ABIField entries.
    """

    CONTRACT_ADDRESS = "ContractAddress"
    FELT252 = "felt252"
    UINT8 = "u8"
    UINT16 = "u16"
    UINT32 = "u32"
    UINT64 = "u64"
    UINT128 = "u128"
    UINT256 = "u256"
    BOOL = "bool"
    BYTE_ARRAY = "ByteArray"
    ARRAY = "Array"
    SPAN = "Span"
    UNKNOWN = "unknown"


class Severity(StrEnum):
    ERROR = auto()
    WARNING = auto()


@dataclass(frozen=True)
class TypeExpr(DataClassJsonMixin):
    """Parsed type expression.

    For PATH expressions ``path`` holds the segments and ``arguments`` the
    generic arguments. The other kinds only use ``arguments``; FIXED_ARRAY
    also sets ``length``.
    """

    kind: TypeExprKind
    path: tuple[str, ...] = ()
    arguments: tuple["TypeExpr", ...] = ()
    length: int | None = None

    @property
    def leaf(self) -> str | None:
        return self.path[-1] if self.path else None

    def __str__(self) -> str:
        if self.kind == TypeExprKind.SNAPSHOT:
            return f"@{self.arguments[0]}"
        if self.kind == TypeExprKind.PAREN:
            return f"({self.arguments[0]})"
        if self.kind == TypeExprKind.FIXED_ARRAY:
            return f"[{self.arguments[0]}; {self.length}]"
        if self.kind == TypeExprKind.TUPLE:
            inner = ", ".join(str(arg) for arg in self.arguments)
            return f"({inner},)" if len(self.arguments) == 1 else f"({inner})"
        text = "::".join(self.path)
        if self.arguments:
            text += "<" + ", ".join(str(arg) for arg in self.arguments) + ">"
        return text


@dataclass(frozen=True)
class AttributeArg(DataClassJsonMixin):
    """Represents an argument to an attribute.

    Positional arguments (``derive(Drop, Serde)``) have no name.
    """

    name: str | None
    value: str


@dataclass(frozen=True)
class Attribute(DataClassJsonMixin):
    """Represents an attribute attached to an item or a field."""

    name: str
    arguments: tuple[AttributeArg, ...] = ()

    def get(self, key: str) -> str | None:
        for arg in self.arguments:
            if arg.name == key:
                return arg.value
        return None

    @property
    def positional(self) -> list[str]:
        return [arg.value for arg in self.arguments if arg.name is None]


def _find_attribute(attributes: tuple[Attribute, ...], name: str) -> Attribute | None:
    for attr in attributes:
        if attr.name == name:
            return attr
    return None


@dataclass(frozen=True)
class GenericParam(DataClassJsonMixin):
    """One generic parameter of a definition.

    ``text`` is the parameter as declared (``T``, ``+Drop<T>``, ``const N: u32``).
    ``argument`` is the name it contributes to the type's own argument list,
    None for impl parameters.
    """

    text: str
    argument: str | None = None


@dataclass(frozen=True)
class FieldDefinition(DataClassJsonMixin):
    """One declared field: its name and the text of its type expression."""

    name: str
    type_expression: str
    attributes: tuple[Attribute, ...] = ()

    @property
    def description(self) -> str | None:
        attr = _find_attribute(self.attributes, FIELD_ATTRIBUTE)
        return attr.get("description") if attr else None


@dataclass(frozen=True)
class RecordDefinition(DataClassJsonMixin):
    """Host-independent view of a type definition handed to the engine.

    Fields are kept in declaration order. For tuple structs the field names
    are the positional indices.
    """

    name: str
    kind: RecordKind
    fields: tuple[FieldDefinition, ...] = ()
    attributes: tuple[Attribute, ...] = ()
    generic_params: tuple[GenericParam, ...] = ()

    @property
    def derives(self) -> list[str]:
        names: list[str] = []
        for attr in self.attributes:
            if attr.name == "derive":
                names.extend(attr.positional)
        return names

    def has_derive(self, name: str) -> bool:
        return name in self.derives

    @property
    def abi_name(self) -> str | None:
        attr = _find_attribute(self.attributes, ABI_ATTRIBUTE)
        return attr.get("name") if attr else None

    @property
    def abi_version(self) -> str | None:
        attr = _find_attribute(self.attributes, ABI_ATTRIBUTE)
        return attr.get("version") if attr else None

    @property
    def field_descriptions(self) -> dict[str, str]:
        return {f.name: f.description for f in self.fields if f.description is not None}


@dataclass(frozen=True)
class FieldType(DataClassJsonMixin):
    """Classified field type. ``raw_text`` is only set for UNKNOWN tags."""

    tag: TypeTag
    raw_text: str | None = None

    @property
    def cairo_name(self) -> str:
        if self.tag == TypeTag.UNKNOWN:
            return self.raw_text or TypeTag.UNKNOWN.value
        return self.tag.value

    @property
    def is_unknown(self) -> bool:
        return self.tag == TypeTag.UNKNOWN


@dataclass(frozen=True)
class FieldDescriptor(DataClassJsonMixin):
    """Layout entry for one field."""

    name: str
    type: FieldType
    byte_width: int
    description: str | None = None


@dataclass(frozen=True)
class RecordDescriptor(DataClassJsonMixin):
    """Layout description of one record.

    ``total_fixed_size`` is the sum of the field widths. Variable-length and
    unrecognized fields contribute 0.
    """

    name: str
    fields: tuple[FieldDescriptor, ...] = ()
    total_fixed_size: int = 0
    abi_name: str | None = None
    abi_version: str | None = None
    generic_params: tuple[GenericParam, ...] = ()

    @property
    def field_count(self) -> int:
        return len(self.fields)

    @property
    def display_name(self) -> str:
        return self.abi_name or self.name

    @property
    def self_type(self) -> str:
        """The record type as named in generated code, with its generic arguments."""
        arguments = [p.argument for p in self.generic_params if p.argument]
        return f"{self.name}<{', '.join(arguments)}>" if arguments else self.name


@dataclass(frozen=True)
class GeneratedImplementation(DataClassJsonMixin):
    """Generated ABIProvider source for one record."""

    target_record_name: str
    field_count: int
    source_text: str
    file_name: str


@dataclass(frozen=True)
class Diagnostic(DataClassJsonMixin):
    """Reason a definition produced no generated code."""

    message: str
    severity: Severity = Severity.ERROR
    record_name: str | None = None
