"""Tests for the syntax-tree plugin adapter."""

import os

from attestation_abi.adapters import AttestationPlugin, SourceText, derive_attestation
from attestation_abi.generator.parser import parse_tree
from attestation_abi.generator.types import Severity

FILE_DIR = os.path.dirname(os.path.realpath(__file__))

ATTESTATION = """\
#[derive(Drop, Serde, Clone, Attestation)]
pub struct MyAttestation {
    pub attester: ContractAddress,
    pub value: felt252,
    pub timestamp: u64,
}
"""


def _run(source):
    item = parse_tree(source).children[0]
    return AttestationPlugin().generate_code(item, SourceText(source))


def describe_generate_code():
    def generates_an_auxiliary_file(expect):
        result = _run(ATTESTATION)

        expect(result.code.name) == "MyAttestation_abi_provider.cairo"
        expect("impl MyAttestationABIProvider" in result.code.content) == True
        expect(result.diagnostics) == []
        expect(result.remove_original_item) == False

    def matches_the_derive_macro(expect):
        expect(_run(ATTESTATION).code.content) == derive_attestation(ATTESTATION)

    def matches_the_derive_macro_with_loose_spacing(expect):
        source = """\
#[attestation_abi(name = "Loose", version = "3")]
#[derive( Drop, Attestation )]
struct Loose {
    #[abi_field(description = "Item list")]
    items : Array< u8 >,
    other: Option< u8 >,
}
"""
        expect(_run(source).code.content) == derive_attestation(source)

    def matches_the_derive_macro_for_generic_structs(expect):
        source = """\
#[derive(Drop, Attestation)]
struct Bounded<T, const N: u32, +Copy<T>> {
    value: T,
    raw: [u8; 4],
}
"""
        content = _run(source).code.content

        expect(content) == derive_attestation(source)
        expect("of ABIProvider<Bounded<T, N>> {" in content) == True

    def ignores_structs_without_the_derive(expect):
        result = _run("#[derive(Drop, Serde)]\nstruct Helper { x: u32 }\n")

        expect(result.code) == None
        expect(result.diagnostics) == []

    def ignores_non_struct_items(expect):
        result = _run("#[derive(Drop, Attestation)]\nenum Status { A, B }\n")

        expect(result.code) == None
        expect(result.diagnostics) == []

    def reports_tuple_structs(expect):
        result = _run("#[derive(Drop, Attestation)]\nstruct Pair(u8, u8);\n")

        expect(result.code) == None
        expect(len(result.diagnostics)) == 1
        expect(result.diagnostics[0].message) == "Only structs with named fields are supported"
        expect(result.diagnostics[0].severity) == Severity.ERROR
        expect(result.diagnostics[0].line) == 1
        expect(result.diagnostics[0].column) == 1
        expect(result.remove_original_item) == False


def describe_generate_module():
    def processes_every_item(expect):
        source = "use starknet::ContractAddress;\n\n" + ATTESTATION + "struct Other { a: u8 }\n"
        results = AttestationPlugin().generate_module(source)

        expect(len(results)) == 3
        expect([r.code.name for r in results if r.code]) == ["MyAttestation_abi_provider.cairo"]

    def skips_functions_impls_and_modules(expect):
        with open(f"{FILE_DIR}/../generator/contract.cairo", encoding="utf-8") as f:
            results = AttestationPlugin().generate_module(f.read())

        expect(len(results)) == 8
        expect([r.code.name for r in results if r.code]) == [
            "Review_abi_provider.cairo",
            "Wrapper_abi_provider.cairo",
        ]
        expect([r.diagnostics for r in results if r.diagnostics]) == []


def describe_attestation_plugin():
    def declares_its_attributes(expect):
        expect(AttestationPlugin().declared_attributes()) == ["derive", "attestation_abi", "abi_field"]


def describe_source_text():
    def extracts_node_text(expect):
        source = "struct A {\n    value:   Span<u8>  ,\n}\n"
        item = parse_tree(source).children[0]
        member = [c for c in item.children if getattr(c, "data", None) == "member"][0]

        expect(SourceText(source).node_text(member)) == "value:   Span<u8>"
