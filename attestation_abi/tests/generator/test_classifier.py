"""Tests for type classification."""

import pytest

from attestation_abi.generator import TypeClassifier, classify
from attestation_abi.generator.types import TypeTag


def describe_simple_types():
    @pytest.mark.parametrize(
        ("expression", "tag", "width"),
        [
            ("ContractAddress", TypeTag.CONTRACT_ADDRESS, 32),
            ("felt252", TypeTag.FELT252, 32),
            ("u8", TypeTag.UINT8, 1),
            ("u16", TypeTag.UINT16, 2),
            ("u32", TypeTag.UINT32, 4),
            ("u64", TypeTag.UINT64, 8),
            ("u128", TypeTag.UINT128, 16),
            ("u256", TypeTag.UINT256, 32),
            ("bool", TypeTag.BOOL, 1),
            ("ByteArray", TypeTag.BYTE_ARRAY, 0),
        ],
    )
    def classifies_table_entries(expect, expression, tag, width):
        field_type, size = classify(expression)

        expect(field_type.tag) == tag
        expect(field_type.raw_text) == None
        expect(size) == width

    def ignores_surrounding_whitespace(expect):
        field_type, size = classify("  u64 \n")

        expect(field_type.tag) == TypeTag.UINT64
        expect(size) == 8

    def matches_the_last_path_segment(expect):
        field_type, size = classify("core::integer::u64")

        expect(field_type.tag) == TypeTag.UINT64
        expect(size) == 8

        field_type, size = classify("starknet::ContractAddress")

        expect(field_type.tag) == TypeTag.CONTRACT_ADDRESS
        expect(size) == 32

    def rejects_generic_arguments_on_simple_types(expect):
        field_type, size = classify("u8<felt252>")

        expect(field_type.tag) == TypeTag.UNKNOWN
        expect(field_type.raw_text) == "u8<felt252>"
        expect(size) == 0


def describe_containers():
    @pytest.mark.parametrize(
        ("expression", "tag"),
        [
            ("Array", TypeTag.ARRAY),
            ("Array<felt252>", TypeTag.ARRAY),
            ("Array<Array<u8>>", TypeTag.ARRAY),
            ("core::array::Array<u8>", TypeTag.ARRAY),
            ("Array < u8 >", TypeTag.ARRAY),
            ("Span", TypeTag.SPAN),
            ("Span<ContractAddress>", TypeTag.SPAN),
            ("core::array::Span<felt252>", TypeTag.SPAN),
        ],
    )
    def classifies_by_leaf_identifier(expect, expression, tag):
        field_type, size = classify(expression)

        expect(field_type.tag) == tag
        expect(size) == 0

    def does_not_match_prefixed_names(expect):
        field_type, size = classify("ArrayList<u8>")

        expect(field_type.tag) == TypeTag.UNKNOWN
        expect(size) == 0


def describe_unknown_types():
    @pytest.mark.parametrize(
        ("expression", "raw_text"),
        [
            ("MyStruct", "MyStruct"),
            ("Option<u8>", "Option<u8>"),
            ("Option< u8 >", "Option<u8>"),
            ("(u8, bool)", "(u8, bool)"),
            ("@Array<u8>", "@Array<u8>"),
            ("(u8)", "(u8)"),
            ("[u8; 4]", "[u8; 4]"),
            ("[ u8 ;4 ]", "[u8; 4]"),
            ("i64", "i64"),
        ],
    )
    def keeps_the_normalized_text(expect, expression, raw_text):
        field_type, size = classify(expression)

        expect(field_type.tag) == TypeTag.UNKNOWN
        expect(field_type.raw_text) == raw_text
        expect(field_type.cairo_name) == raw_text
        expect(size) == 0

    def never_raises_on_unparseable_input(expect):
        field_type, size = classify("<<<")

        expect(field_type.tag) == TypeTag.UNKNOWN
        expect(field_type.raw_text) == "<<<"
        expect(size) == 0

    def names_empty_input_unknown(expect):
        field_type, size = classify("")

        expect(field_type.tag) == TypeTag.UNKNOWN
        expect(field_type.cairo_name) == "unknown"
        expect(size) == 0


def describe_type_classifier():
    def is_reusable(expect):
        classifier = TypeClassifier()

        expect(classifier.classify("u8")) == classifier.classify("u8")
        expect(classifier.classify("Span<u8>")[0].tag) == TypeTag.SPAN
