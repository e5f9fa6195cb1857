"""Syntax-tree adapter: a compiler plugin working on parsed module items.

For every struct carrying ``#[derive(Attestation)]`` the plugin produces an
auxiliary ``<Name>_abi_provider.cairo`` file. The original item is never
removed.
"""

import json
from dataclasses import dataclass, field

from lark import Token, Tree

from attestation_abi.generator.engine import AbiEngine
from attestation_abi.generator.parser import TreeTransformer, parse_tree
from attestation_abi.generator.types import (
    ATTESTATION_DERIVE,
    Attribute,
    AttributeArg,
    Diagnostic,
    FieldDefinition,
    GenericParam,
    RecordDefinition,
    RecordKind,
    Severity,
)

STRUCT_ITEMS: dict[str, RecordKind] = {
    "struct": RecordKind.STRUCT,
    "tuple_struct": RecordKind.TUPLE_STRUCT,
    "unit_struct": RecordKind.UNIT_STRUCT,
}

TYPE_NODES = frozenset(
    ["path_type", "snapshot_type", "paren_type", "tuple_type", "fixed_array_type"]
)


@dataclass(frozen=True)
class SourceText:
    """Text extraction over the source a syntax tree was parsed from."""

    text: str

    def node_text(self, node: Tree | Token) -> str:
        """Return the source text of a node without surrounding whitespace."""
        if isinstance(node, Token):
            return str(node).strip()
        return self.text[node.meta.start_pos : node.meta.end_pos].strip()


@dataclass(frozen=True)
class PluginGeneratedFile:
    name: str
    content: str


@dataclass(frozen=True)
class PluginDiagnostic:
    """Diagnostic attached to the item it was raised for."""

    message: str
    severity: Severity
    line: int
    column: int


@dataclass(frozen=True)
class PluginResult:
    code: PluginGeneratedFile | None = None
    diagnostics: list[PluginDiagnostic] = field(default_factory=list)
    remove_original_item: bool = False


def _subtrees(node: Tree, name: str) -> list[Tree]:
    return [c for c in node.children if isinstance(c, Tree) and c.data == name]


def _name_token(node: Tree) -> Token:
    for child in node.children:
        if isinstance(child, Token) and child.type == "NAME":
            return child
    raise ValueError(f"{node.data} node has no name")


class AttestationPlugin:
    """Compiler plugin generating ABIProvider implementations."""

    def __init__(self, engine: AbiEngine | None = None):
        self.engine = engine or AbiEngine()

    def declared_attributes(self) -> list[str]:
        return ["derive", "attestation_abi", "abi_field"]

    def generate_code(self, item: Tree, source: SourceText) -> PluginResult:
        """Process one module item."""
        kind = STRUCT_ITEMS.get(item.data)
        if kind is None:
            return PluginResult()

        attributes = self._attributes(item, source)
        if not any(
            attr.name == "derive" and ATTESTATION_DERIVE in attr.positional for attr in attributes
        ):
            return PluginResult()

        definition = RecordDefinition(
            name=source.node_text(_name_token(item)),
            kind=kind,
            fields=tuple(self._fields(item, source)),
            attributes=tuple(attributes),
            generic_params=tuple(self._generic_params(item)),
        )

        result = self.engine.generate(definition)
        if isinstance(result, Diagnostic):
            return PluginResult(
                diagnostics=[
                    PluginDiagnostic(
                        message=result.message,
                        severity=result.severity,
                        line=item.meta.line,
                        column=item.meta.column,
                    )
                ],
            )

        return PluginResult(
            code=PluginGeneratedFile(name=result.file_name, content=result.source_text),
        )

    def generate_module(self, text: str) -> list[PluginResult]:
        """Run the plugin over every item of a module, in source order."""
        source = SourceText(text)
        return [
            self.generate_code(item, source)
            for item in parse_tree(text).children
            if isinstance(item, Tree)
        ]

    def _attributes(self, node: Tree, source: SourceText) -> list[Attribute]:
        attributes: list[Attribute] = []
        for attr in _subtrees(node, "attribute"):
            name = source.node_text(_subtrees(attr, "path")[0])
            arguments: list[AttributeArg] = []
            for args in _subtrees(attr, "attr_args"):
                for arg in args.children:
                    if not isinstance(arg, Tree):
                        continue
                    if arg.data == "attr_positional":
                        arguments.append(AttributeArg(name=None, value=source.node_text(arg)))
                    else:
                        key, value = arg.children
                        text = source.node_text(value)
                        if value.type == "ESCAPED_STRING":
                            text = json.loads(text)
                        arguments.append(AttributeArg(name=source.node_text(key), value=text))
            attributes.append(Attribute(name=name, arguments=tuple(arguments)))
        return attributes

    def _generic_params(self, item: Tree) -> list[GenericParam]:
        # Parameters are rebuilt from the tree so both adapters render them alike
        params: list[GenericParam] = []
        for node in _subtrees(item, "generic_params"):
            params.extend(TreeTransformer().transform(node).value)
        return params

    def _fields(self, item: Tree, source: SourceText) -> list[FieldDefinition]:
        if item.data == "struct":
            return [
                FieldDefinition(
                    name=source.node_text(_name_token(member)),
                    type_expression=source.node_text(self._type_node(member)),
                    attributes=tuple(self._attributes(member, source)),
                )
                for member in _subtrees(item, "member")
            ]

        return [
            FieldDefinition(
                name=str(index),
                type_expression=source.node_text(self._type_node(member)),
                attributes=tuple(self._attributes(member, source)),
            )
            for index, member in enumerate(_subtrees(item, "tuple_member"))
        ]

    def _type_node(self, member: Tree) -> Tree:
        for child in member.children:
            if isinstance(child, Tree) and child.data in TYPE_NODES:
                return child
        raise ValueError(f"{member.data} node has no type")
