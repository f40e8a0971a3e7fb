"""Tests for the code emitter and dialects."""

import pytest

from zorsh_codegen.emitter import (
    DIALECTS,
    PLAIN,
    TYPESCRIPT,
    Emitter,
    property_key,
    sanitize_name,
    schema_binding_name,
)


class TestNames:
    """Identifier derivation for bindings and aliases."""

    @pytest.mark.parametrize(
        "type_name, expected",
        [
            ("Point", "Point"),
            ("Wrapper<u32>", "Wrapper_u32"),
            ("Pair<u8, String>", "Pair_u8_String"),
            ("game::Item", "game_Item"),
            ("Holder<()>", "Holder_Unit"),
        ],
    )
    def test_sanitize_name(self, type_name, expected):
        assert sanitize_name(type_name) == expected

    def test_schema_binding_name(self):
        assert schema_binding_name("Point") == "PointSchema"

    def test_sanitize_rejects_symbol_only_names(self):
        with pytest.raises(ValueError):
            sanitize_name("<>")

    def test_property_key_quotes_non_identifiers(self):
        assert property_key("x") == "x"
        assert property_key("my field") == '"my field"'


class TestDialect:
    """Constructor rendering."""

    def test_plain_call(self):
        assert PLAIN.call("array", "u8()", "32") == "array(u8(), 32)"

    def test_typescript_call(self):
        assert TYPESCRIPT.call("u8") == "b.u8()"

    def test_record(self):
        assert PLAIN.record([("x", "u32()"), ("y", "u32()")]) == "struct({ x: u32(), y: u32() })"

    def test_empty_record(self):
        assert PLAIN.record([]) == "struct({})"

    def test_tuple(self):
        assert TYPESCRIPT.tuple(["b.u8()", "b.string()"]) == "b.tuple([b.u8(), b.string()])"

    def test_union(self):
        assert PLAIN.union([("A", "unit()")]) == "enum({ A: unit() })"

    def test_placeholder_keeps_name_visible(self):
        fragment = PLAIN.placeholder("Ghost")

        assert "Ghost" in fragment
        assert fragment.startswith("unit()")

    def test_placeholder_cannot_close_comment(self):
        assert "*/ */" not in PLAIN.placeholder("a*/b")

    def test_registry(self):
        assert set(DIALECTS) == {"plain", "typescript"}


class TestEmitter:
    """Whole-file rendering."""

    def test_plain_output(self):
        code = Emitter(PLAIN).emit([("Point", "struct({ x: u32(), y: u32() })")])
        lines = code.splitlines()

        assert lines[0] == PLAIN.preamble
        assert lines[0].startswith("import {")
        assert lines[2] == "PointSchema = struct({ x: u32(), y: u32() });"
        assert lines[3] == "type Point = infer(PointSchema);"

    def test_typescript_output(self):
        code = Emitter(TYPESCRIPT).emit([("Point", "b.struct({ x: b.u32() })")])

        assert code == (
            'import { b } from "zorsh";\n'
            "\n"
            "export const PointSchema = b.struct({ x: b.u32() });\n"
            "export type Point = b.infer<typeof PointSchema>;\n"
        )

    def test_preserves_given_order(self):
        code = Emitter().emit([("B", "struct({})"), ("A", "struct({})")])

        assert code.index("BSchema =") < code.index("ASchema =")

    def test_no_records(self):
        assert Emitter().emit([]) == PLAIN.preamble + "\n"

    def test_single_trailing_newline(self):
        code = Emitter().emit([("A", "struct({})")])

        assert code.endswith(";\n")
        assert not code.endswith("\n\n")
