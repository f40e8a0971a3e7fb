"""Parser for composite type names.

Turns strings like ``Option<String>``, ``(u8, Vec<u16>)`` or
``HashMap<String, (u32, f64)>`` into structured type references. Nesting is
handled by the grammar, so commas inside nested parameters never split an
outer parameter list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import ply.yacc as yacc

from zorsh_codegen.exceptions import TypeNameError
from zorsh_codegen.parsing.type_lexer import TypeNameLexer
from zorsh_codegen.types import UNIT_TYPE_NAME


@dataclass
class NamedRef:
    """Reference to a type by plain name (including the unit marker ``()``)."""

    name: str

    @property
    def text(self) -> str:
        return self.name


@dataclass
class GenericRef:
    """Reference to a generic instantiation, e.g. ``Vec<u8>``."""

    base: str
    params: list[TypeRef]
    text: str = ""


@dataclass
class TupleRef:
    """Reference to an anonymous tuple, e.g. ``(u8, String)``."""

    elements: list[TypeRef] = field(default_factory=list)
    text: str = ""


@dataclass
class ArrayRef:
    """Reference to a fixed-size array, e.g. ``[u8; 32]``."""

    element: TypeRef
    length: int
    text: str = ""


TypeRef = Union[NamedRef, GenericRef, TupleRef, ArrayRef]


class TypeNameParser:
    """Parser for the type-name grammar."""

    tokens = TypeNameLexer.tokens

    def __init__(self) -> None:
        self.lexer = TypeNameLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self._data = ""

    def _slice(self, start: int, end: int) -> str:
        return self._data[start:end]

    def p_type_ref_named(self, p: yacc.YaccProduction) -> None:
        """type_ref : IDENTIFIER"""
        p[0] = NamedRef(name=p[1])

    def p_type_ref_generic(self, p: yacc.YaccProduction) -> None:
        """type_ref : IDENTIFIER LANGLE type_list RANGLE"""
        p[0] = GenericRef(base=p[1], params=p[3], text=self._slice(p.lexpos(1), p.lexpos(4) + 1))

    def p_type_ref_unit(self, p: yacc.YaccProduction) -> None:
        """type_ref : LPAREN RPAREN"""
        p[0] = NamedRef(name=UNIT_TYPE_NAME)

    def p_type_ref_tuple(self, p: yacc.YaccProduction) -> None:
        """type_ref : LPAREN type_list RPAREN"""
        if len(p[2]) == 1:
            # (T) is just a parenthesized T
            p[0] = p[2][0]
        else:
            p[0] = TupleRef(elements=p[2], text=self._slice(p.lexpos(1), p.lexpos(3) + 1))

    def p_type_ref_tuple_trailing(self, p: yacc.YaccProduction) -> None:
        """type_ref : LPAREN type_list COMMA RPAREN"""
        p[0] = TupleRef(elements=p[2], text=self._slice(p.lexpos(1), p.lexpos(4) + 1))

    def p_type_ref_array(self, p: yacc.YaccProduction) -> None:
        """type_ref : LBRACKET type_ref SEMI INTEGER RBRACKET"""
        p[0] = ArrayRef(element=p[2], length=p[4], text=self._slice(p.lexpos(1), p.lexpos(5) + 1))

    def p_type_list_single(self, p: yacc.YaccProduction) -> None:
        """type_list : type_ref"""
        p[0] = [p[1]]

    def p_type_list_multiple(self, p: yacc.YaccProduction) -> None:
        """type_list : type_list COMMA type_ref"""
        p[0] = p[1] + [p[3]]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise TypeNameError(
                f"Syntax error at '{p.value}' (position {p.lexpos}) in type name '{self._data}'"
            )
        raise TypeNameError(f"Unexpected end of type name '{self._data}'")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="type_ref", **kwargs)

    def parse(self, name: str) -> TypeRef:
        """Parse a type name into a structured reference."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self._data = name
        if not name.strip():
            raise TypeNameError("Empty type name")
        return self.parser.parse(name, lexer=self.lexer.lexer)


_default_parser: TypeNameParser | None = None


def parse_type_name(name: str) -> TypeRef:
    """Parse a type name with a shared parser instance."""
    global _default_parser
    if _default_parser is None:
        _default_parser = TypeNameParser()
    return _default_parser.parse(name)


def looks_composite(name: str) -> bool:
    """Return whether a name encodes a generic, tuple or array shape."""
    stripped = name.strip()
    if stripped == UNIT_TYPE_NAME:
        return False
    return "<" in stripped or stripped.startswith("(") or stripped.startswith("[")


def parse_generic(name: str) -> tuple[str, str] | None:
    """Split ``Base<Params>`` into ``(base, param_string)``.

    Returns None when the name has no ``<``. Raises TypeNameError when the
    angle brackets are unbalanced or the name is otherwise malformed.
    """
    if "<" not in name:
        return None
    ref = parse_type_name(name)
    if not isinstance(ref, GenericRef):
        raise TypeNameError(f"Type name '{name}' is not a generic instantiation")
    start = name.index("<")
    end = name.rindex(">")
    return ref.base, name[start + 1:end].strip()


def parse_map_params(param_string: str) -> tuple[str, str]:
    """Split a map parameter list into ``(key, value)`` type names.

    Only top-level commas separate parameters, so ``String, Vec<(u8, u16)>``
    yields ``("String", "Vec<(u8, u16)>")``.
    """
    ref = parse_type_name(f"({param_string})")
    if not isinstance(ref, TupleRef) or len(ref.elements) != 2:
        raise TypeNameError(f"Expected exactly two map parameters in '{param_string}'")
    key, value = ref.elements
    return key.text, value.text


def parse_tuple_types(name: str) -> list[str]:
    """Split a parenthesized tuple type name into its element type names."""
    ref = parse_type_name(name)
    if not isinstance(ref, TupleRef):
        raise TypeNameError(f"Type name '{name}' is not a tuple")
    return [element.text for element in ref.elements]
