"""Parsing module for composite type names."""

from zorsh_codegen.parsing.type_parser import (
    ArrayRef,
    GenericRef,
    NamedRef,
    TupleRef,
    TypeNameParser,
    TypeRef,
    looks_composite,
    parse_generic,
    parse_map_params,
    parse_tuple_types,
    parse_type_name,
)

__all__ = [
    "ArrayRef",
    "GenericRef",
    "NamedRef",
    "TupleRef",
    "TypeNameParser",
    "TypeRef",
    "looks_composite",
    "parse_generic",
    "parse_map_params",
    "parse_tuple_types",
    "parse_type_name",
]
