"""Classification of Cairo field types into semantic tags and byte widths."""

from lark.exceptions import LarkError

from .parser import parse_type
from .types import FieldType, TypeExprKind, TypeTag

# Fixed byte widths. Variable-length tags are 0.
TYPE_WIDTHS: dict[TypeTag, int] = {
    TypeTag.CONTRACT_ADDRESS: 32,
    TypeTag.FELT252: 32,
    TypeTag.UINT8: 1,
    TypeTag.UINT16: 2,
    TypeTag.UINT32: 4,
    TypeTag.UINT64: 8,
    TypeTag.UINT128: 16,
    TypeTag.UINT256: 32,
    TypeTag.BOOL: 1,
    TypeTag.BYTE_ARRAY: 0,
    TypeTag.ARRAY: 0,
    TypeTag.SPAN: 0,
    TypeTag.UNKNOWN: 0,
}

# Simple type names, matched only without generic arguments
SIMPLE_TAGS: dict[str, TypeTag] = {
    "ContractAddress": TypeTag.CONTRACT_ADDRESS,
    "felt252": TypeTag.FELT252,
    "u8": TypeTag.UINT8,
    "u16": TypeTag.UINT16,
    "u32": TypeTag.UINT32,
    "u64": TypeTag.UINT64,
    "u128": TypeTag.UINT128,
    "u256": TypeTag.UINT256,
    "bool": TypeTag.BOOL,
    "ByteArray": TypeTag.BYTE_ARRAY,
}

# Generic containers, matched on the leaf identifier whatever their arguments
CONTAINER_TAGS: dict[str, TypeTag] = {
    "Array": TypeTag.ARRAY,
    "Span": TypeTag.SPAN,
}


def _normalize(text: str) -> str:
    return " ".join(text.split())


class TypeClassifier:
    """Map type expressions to (FieldType, byte width).

    Exact matches on simple names win. Otherwise the expression is parsed and
    the last path segment decides: ``core::integer::u64`` is a u64 and
    ``Array<Array<u8>>`` is an Array. Anything else is UNKNOWN with width 0.
    Classification never raises.
    """

    def classify(self, type_expression: str) -> tuple[FieldType, int]:
        text = _normalize(type_expression)

        if text in SIMPLE_TAGS:
            return self._known(SIMPLE_TAGS[text])
        if text in CONTAINER_TAGS:
            return self._known(CONTAINER_TAGS[text])

        try:
            expr = parse_type(text)
        except LarkError:
            return self._unknown(text)

        if expr.kind != TypeExprKind.PATH:
            return self._unknown(str(expr))

        leaf = expr.leaf
        if leaf in CONTAINER_TAGS:
            return self._known(CONTAINER_TAGS[leaf])
        if leaf in SIMPLE_TAGS and not expr.arguments:
            return self._known(SIMPLE_TAGS[leaf])

        return self._unknown(str(expr))

    def _known(self, tag: TypeTag) -> tuple[FieldType, int]:
        return FieldType(tag), TYPE_WIDTHS[tag]

    def _unknown(self, raw_text: str) -> tuple[FieldType, int]:
        return FieldType(TypeTag.UNKNOWN, raw_text=raw_text), TYPE_WIDTHS[TypeTag.UNKNOWN]


def classify(type_expression: str) -> tuple[FieldType, int]:
    """Classify a single type expression."""
    return TypeClassifier().classify(type_expression)
