"""Cairo item parser using Lark."""

import json
import os
from dataclasses import dataclass
from typing import Any, TypeVar

from lark import Lark, Token, Tree
from lark.visitors import Transformer

from .types import (
    Attribute,
    AttributeArg,
    FieldDefinition,
    GenericParam,
    RecordDefinition,
    RecordKind,
    TypeExpr,
    TypeExprKind,
)

_g_parser: Lark | None = None


class ValidationError(RuntimeError):
    """Raised when item definition validation fails."""


@dataclass
class _Name:
    value: str


@dataclass
class _Value:
    value: str


@dataclass
class _Path:
    value: tuple[str, ...]


@dataclass
class _AttrArgs:
    value: tuple[AttributeArg, ...]


@dataclass
class _GenericArgs:
    value: tuple[TypeExpr, ...]


@dataclass
class _GenericParams:
    value: tuple[GenericParam, ...]


@dataclass
class _OtherItem:
    keyword: str


@dataclass
class _Visibility:
    value: str | None


@dataclass
class _UseDecl:
    value: str


@dataclass
class _Positional:
    type: TypeExpr
    attributes: tuple[Attribute, ...]


@dataclass
class _Variant:
    name: str
    type: TypeExpr | None
    attributes: tuple[Attribute, ...]


TFilter = TypeVar("TFilter", bound=object)


def _filter(args: list[Any], class_type: type[TFilter]) -> list[TFilter]:
    return [v for v in args if isinstance(v, class_type)]


def _find_one(args: list[Any], class_type: type[object]) -> Any:
    filtered = _filter(args, class_type)
    if len(filtered) == 0:
        return None
    if len(filtered) > 1:
        raise RuntimeError(f"Found more than one {class_type}")

    if hasattr(filtered[0], "value"):
        return filtered[0].value
    return filtered[0]


TMany = TypeVar("TMany")


def _find_many(args: list[Any], class_type: type[TMany]) -> list[TMany]:
    return _filter(args, class_type)


class TreeTransformer(Transformer):
    """Transform parse tree into record definitions."""

    def NAME(self, token: Token) -> _Name:
        return _Name(value=str(token))

    def ESCAPED_STRING(self, token: Token) -> _Value:
        return _Value(value=json.loads(str(token)))

    def INT(self, token: Token) -> _Value:
        return _Value(value=str(token))

    def USE_PATH(self, token: Token) -> _UseDecl:
        return _UseDecl(value=str(token).strip())

    def start(self, args: list[Any]) -> list[Any]:
        return args

    def type_root(self, args: list[Any]) -> TypeExpr:
        return args[0]

    def path(self, args: list[Any]) -> _Path:
        return _Path(value=tuple(name.value for name in _find_many(args, _Name)))

    def attr_named(self, args: list[Any]) -> AttributeArg:
        return AttributeArg(name=_find_one(args, _Name), value=_find_one(args, _Value))

    def attr_positional(self, args: list[Any]) -> AttributeArg:
        return AttributeArg(name=None, value="::".join(_find_one(args, _Path)))

    def attr_args(self, args: list[Any]) -> _AttrArgs:
        return _AttrArgs(value=tuple(_find_many(args, AttributeArg)))

    def attribute(self, args: list[Any]) -> Attribute:
        arguments = _find_one(args, _AttrArgs)
        return Attribute(name="::".join(_find_one(args, _Path)), arguments=arguments or ())

    def visibility(self, args: list[Any]) -> _Visibility:
        return _Visibility(value=_find_one(args, _Name))

    def path_type(self, args: list[Any]) -> TypeExpr:
        generics = _find_one(args, _GenericArgs)
        return TypeExpr(
            kind=TypeExprKind.PATH,
            path=_find_one(args, _Path),
            arguments=generics or (),
        )

    def generic_args(self, args: list[Any]) -> _GenericArgs:
        return _GenericArgs(value=tuple(_find_many(args, TypeExpr)))

    def snapshot_type(self, args: list[Any]) -> TypeExpr:
        return TypeExpr(kind=TypeExprKind.SNAPSHOT, arguments=(args[0],))

    def paren_type(self, args: list[Any]) -> TypeExpr:
        return TypeExpr(kind=TypeExprKind.PAREN, arguments=(args[0],))

    def fixed_array_type(self, args: list[Any]) -> TypeExpr:
        return TypeExpr(
            kind=TypeExprKind.FIXED_ARRAY,
            arguments=(_find_one(args, TypeExpr),),
            length=int(_find_one(args, _Value)),
        )

    def type_param(self, args: list[Any]) -> GenericParam:
        name = _find_one(args, _Name)
        return GenericParam(text=name, argument=name)

    def const_param(self, args: list[Any]) -> GenericParam:
        name = _find_one(args, _Name)
        return GenericParam(text=f"const {name}: {_find_one(args, TypeExpr)}", argument=name)

    def impl_param(self, args: list[Any]) -> GenericParam:
        return GenericParam(text=f"impl {_find_one(args, _Name)}: {_find_one(args, TypeExpr)}")

    def positive_impl_param(self, args: list[Any]) -> GenericParam:
        return GenericParam(text=f"+{_find_one(args, TypeExpr)}")

    def negative_impl_param(self, args: list[Any]) -> GenericParam:
        return GenericParam(text=f"-{_find_one(args, TypeExpr)}")

    def generic_params(self, args: list[Any]) -> _GenericParams:
        return _GenericParams(value=tuple(_find_many(args, GenericParam)))

    def tuple_type(self, args: list[Any]) -> TypeExpr:
        return TypeExpr(kind=TypeExprKind.TUPLE, arguments=tuple(_find_many(args, TypeExpr)))

    def member(self, args: list[Any]) -> FieldDefinition:
        return FieldDefinition(
            name=_find_one(args, _Name),
            type_expression=str(_find_one(args, TypeExpr)),
            attributes=tuple(_find_many(args, Attribute)),
        )

    def tuple_member(self, args: list[Any]) -> _Positional:
        return _Positional(
            type=_find_one(args, TypeExpr),
            attributes=tuple(_find_many(args, Attribute)),
        )

    def variant(self, args: list[Any]) -> _Variant:
        return _Variant(
            name=_find_one(args, _Name),
            type=_find_one(args, TypeExpr),
            attributes=tuple(_find_many(args, Attribute)),
        )

    def struct(self, args: list[Any]) -> RecordDefinition:
        return RecordDefinition(
            name=_find_one(args, _Name),
            kind=RecordKind.STRUCT,
            fields=tuple(_find_many(args, FieldDefinition)),
            attributes=tuple(_find_many(args, Attribute)),
            generic_params=_find_one(args, _GenericParams) or (),
        )

    def tuple_struct(self, args: list[Any]) -> RecordDefinition:
        positional = _find_many(args, _Positional)
        return RecordDefinition(
            name=_find_one(args, _Name),
            kind=RecordKind.TUPLE_STRUCT,
            fields=tuple(
                FieldDefinition(name=str(index), type_expression=str(p.type), attributes=p.attributes)
                for index, p in enumerate(positional)
            ),
            attributes=tuple(_find_many(args, Attribute)),
            generic_params=_find_one(args, _GenericParams) or (),
        )

    def unit_struct(self, args: list[Any]) -> RecordDefinition:
        return RecordDefinition(
            name=_find_one(args, _Name),
            kind=RecordKind.UNIT_STRUCT,
            attributes=tuple(_find_many(args, Attribute)),
            generic_params=_find_one(args, _GenericParams) or (),
        )

    def enum(self, args: list[Any]) -> RecordDefinition:
        # Unit variants carry the unit type, as in Cairo
        return RecordDefinition(
            name=_find_one(args, _Name),
            kind=RecordKind.ENUM,
            fields=tuple(
                FieldDefinition(
                    name=v.name,
                    type_expression=str(v.type) if v.type is not None else "()",
                    attributes=v.attributes,
                )
                for v in _find_many(args, _Variant)
            ),
            attributes=tuple(_find_many(args, Attribute)),
            generic_params=_find_one(args, _GenericParams) or (),
        )

    def type_alias(self, args: list[Any]) -> RecordDefinition:
        return RecordDefinition(
            name=_find_one(args, _Name),
            kind=RecordKind.ALIAS,
            attributes=tuple(_find_many(args, Attribute)),
            generic_params=_find_one(args, _GenericParams) or (),
        )

    def use_decl(self, args: list[Any]) -> _UseDecl:
        return _find_many(args, _UseDecl)[0]

    def other_item(self, args: list[Any]) -> _OtherItem:
        keyword = next(a for a in args if isinstance(a, Token) and a.type == "ITEM_KEYWORD")
        return _OtherItem(keyword=str(keyword))


def _get_parser() -> Lark:
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/attestation.lark", encoding="utf-8") as f:
            grammar = f.read()

        # Positions are needed by the syntax-tree plugin to extract source text
        _g_parser = Lark(grammar, start=["start", "type_root"], propagate_positions=True)

    return _g_parser


def validate(definitions: list[RecordDefinition]) -> None:
    """Validate parsed item definitions."""
    seen: set[str] = set()
    for definition in definitions:
        if definition.name in seen:
            raise ValidationError(f"{definition.name} defined more than once")
        seen.add(definition.name)

        if definition.kind != RecordKind.STRUCT:
            continue

        field_names: set[str] = set()
        for field in definition.fields:
            if field.name in field_names:
                raise ValidationError(f"{definition.name}.{field.name} declared more than once")
            field_names.add(field.name)


def parse_tree(text: str) -> Tree:
    """Parse Cairo source into an untransformed syntax tree of module items."""
    return _get_parser().parse(text, start="start")


def parse(text: str) -> list[RecordDefinition]:
    """Parse Cairo source into record definitions, in source order."""
    items = TreeTransformer().transform(parse_tree(text))
    definitions = _find_many(items, RecordDefinition)

    validate(definitions)

    return definitions


def parse_item(text: str) -> RecordDefinition:
    """Parse the source of exactly one type definition."""
    definitions = parse(text)
    if len(definitions) != 1:
        raise ValidationError(f"Expected exactly one item definition, found {len(definitions)}")
    return definitions[0]


def parse_type(text: str) -> TypeExpr:
    """Parse a single type expression."""
    tree = _get_parser().parse(text, start="type_root")
    return TreeTransformer().transform(tree)
