"""Tests for the type-name lexer and parser."""

import pytest

from zorsh_codegen.exceptions import TypeNameError
from zorsh_codegen.parsing import (
    ArrayRef,
    GenericRef,
    NamedRef,
    TupleRef,
    TypeNameParser,
    looks_composite,
    parse_generic,
    parse_map_params,
    parse_tuple_types,
)
from zorsh_codegen.parsing.type_lexer import TypeNameLexer


class TestTypeNameLexer:
    """Tests for the type-name lexer."""

    def test_tokenize_nested_generic(self):
        """Closing '>>' is two separate tokens."""
        lexer = TypeNameLexer()
        lexer.build()

        tokens = lexer.tokenize("HashMap<String, Vec<u8>>")
        token_types = [t.type for t in tokens]

        assert token_types == [
            "IDENTIFIER",
            "LANGLE",
            "IDENTIFIER",
            "COMMA",
            "IDENTIFIER",
            "LANGLE",
            "IDENTIFIER",
            "RANGLE",
            "RANGLE",
        ]

    def test_tokenize_array(self):
        """Test tokenizing a fixed array name."""
        lexer = TypeNameLexer()
        lexer.build()

        tokens = lexer.tokenize("[u8; 32]")

        assert [t.type for t in tokens] == ["LBRACKET", "IDENTIFIER", "SEMI", "INTEGER", "RBRACKET"]
        assert tokens[3].value == 32

    def test_path_identifier(self):
        """Module paths stay a single identifier."""
        lexer = TypeNameLexer()
        lexer.build()

        tokens = lexer.tokenize("game::Item")

        assert len(tokens) == 1
        assert tokens[0].value == "game::Item"

    def test_illegal_character(self):
        """Test error on illegal character."""
        lexer = TypeNameLexer()
        lexer.build()

        with pytest.raises(TypeNameError):
            lexer.tokenize("Vec<&u8>")


class TestTypeNameParser:
    """Tests for the type-name parser."""

    def test_parse_plain_name(self):
        parser = TypeNameParser()

        assert parser.parse("Point") == NamedRef("Point")

    def test_parse_unit(self):
        """'()' is the unit marker, not an empty tuple."""
        parser = TypeNameParser()

        ref = parser.parse("()")

        assert isinstance(ref, NamedRef)
        assert ref.name == "()"

    def test_parse_generic(self):
        parser = TypeNameParser()

        ref = parser.parse("Option<String>")

        assert isinstance(ref, GenericRef)
        assert ref.base == "Option"
        assert ref.params == [NamedRef("String")]
        assert ref.text == "Option<String>"

    def test_parse_nested_generic(self):
        """Inner commas belong to the inner parameter list."""
        parser = TypeNameParser()

        ref = parser.parse("HashMap<String, HashMap<u8, u16>>")

        assert isinstance(ref, GenericRef)
        assert len(ref.params) == 2
        inner = ref.params[1]
        assert isinstance(inner, GenericRef)
        assert inner.text == "HashMap<u8, u16>"
        assert [p.text for p in inner.params] == ["u8", "u16"]

    def test_parse_tuple(self):
        parser = TypeNameParser()

        ref = parser.parse("(u64, Location, String)")

        assert isinstance(ref, TupleRef)
        assert [e.text for e in ref.elements] == ["u64", "Location", "String"]

    def test_parse_single_element_tuple(self):
        """A trailing comma marks a one-element tuple."""
        parser = TypeNameParser()

        ref = parser.parse("(u8,)")

        assert isinstance(ref, TupleRef)
        assert len(ref.elements) == 1

    def test_parenthesized_type_is_not_a_tuple(self):
        parser = TypeNameParser()

        assert parser.parse("(u8)") == NamedRef("u8")

    def test_parse_array(self):
        parser = TypeNameParser()

        ref = parser.parse("[Vec<u8>; 4]")

        assert isinstance(ref, ArrayRef)
        assert ref.length == 4
        assert ref.element.text == "Vec<u8>"

    def test_element_text_preserves_source_spelling(self):
        parser = TypeNameParser()

        ref = parser.parse("Vec<(u8,u16)>")

        assert ref.params[0].text == "(u8,u16)"

    def test_missing_closing_angle(self):
        parser = TypeNameParser()

        with pytest.raises(TypeNameError):
            parser.parse("Vec<u8")

    def test_missing_closing_paren(self):
        parser = TypeNameParser()

        with pytest.raises(TypeNameError):
            parser.parse("(u8, u16")

    def test_trailing_garbage(self):
        parser = TypeNameParser()

        with pytest.raises(TypeNameError):
            parser.parse("Vec<u8>>")

    def test_empty_name(self):
        parser = TypeNameParser()

        with pytest.raises(TypeNameError):
            parser.parse("  ")


class TestTypeNameHelpers:
    """Tests for the string-level helper functions."""

    def test_parse_generic_splits_base_and_params(self):
        assert parse_generic("Vec<Foo>") == ("Vec", "Foo")

    def test_parse_generic_keeps_nested_params(self):
        assert parse_generic("HashMap<String, Vec<u8>>") == ("HashMap", "String, Vec<u8>")

    def test_parse_generic_on_plain_name(self):
        assert parse_generic("Point") is None

    def test_parse_generic_unbalanced(self):
        with pytest.raises(TypeNameError):
            parse_generic("Vec<Foo")

    def test_parse_map_params(self):
        assert parse_map_params("String, u32") == ("String", "u32")

    def test_parse_map_params_depth_aware(self):
        """A comma nested in the value type does not split the parameters."""
        assert parse_map_params("String, HashMap<u8, (u16, u32)>") == (
            "String",
            "HashMap<u8, (u16, u32)>",
        )

    def test_parse_map_params_wrong_count(self):
        with pytest.raises(TypeNameError):
            parse_map_params("String")
        with pytest.raises(TypeNameError):
            parse_map_params("String, u8, u16")

    def test_parse_tuple_types(self):
        assert parse_tuple_types("(u16, f32)") == ["u16", "f32"]

    def test_parse_tuple_types_trims_whitespace(self):
        assert parse_tuple_types("(  u16 ,Vec<u8> )") == ["u16", "Vec<u8>"]

    def test_parse_tuple_types_rejects_unit(self):
        with pytest.raises(TypeNameError):
            parse_tuple_types("()")

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Vec<u8>", True),
            ("(u8, u16)", True),
            ("[u8; 32]", True),
            ("()", False),
            ("Point", False),
        ],
    )
    def test_looks_composite(self, name, expected):
        assert looks_composite(name) is expected
