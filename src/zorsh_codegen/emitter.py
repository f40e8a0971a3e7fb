"""Code emitter: renders resolved record schemas into zorsh source text."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Iterable

# Every constructor the generated code may call.
CONSTRUCTORS = [
    "array",
    "bool",
    "enum",
    "f32",
    "f64",
    "hashMap",
    "hashSet",
    "i128",
    "i16",
    "i32",
    "i64",
    "i8",
    "option",
    "string",
    "struct",
    "tuple",
    "u128",
    "u16",
    "u32",
    "u64",
    "u8",
    "unit",
    "vec",
]

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_]+")


def sanitize_name(type_name: str) -> str:
    """Turn a declared type name into an identifier.

    ``Wrapper<u32>`` becomes ``Wrapper_u32`` and ``()`` becomes ``Unit``.
    """
    name = type_name.replace("()", "Unit")
    name = _NON_IDENTIFIER_RE.sub("_", name).strip("_")
    if not name:
        raise ValueError(f"Cannot derive an identifier from type name '{type_name}'")
    if name[0].isdigit():
        name = "_" + name
    return name


def schema_binding_name(type_name: str) -> str:
    """Name of the exported schema binding for a record type."""
    return f"{sanitize_name(type_name)}Schema"


def property_key(name: str) -> str:
    """Render an object key, quoting it when it is not a plain identifier."""
    if _IDENTIFIER_RE.match(name):
        return name
    return json.dumps(name)


@dataclass(frozen=True)
class Dialect:
    """Surface syntax of the generated file.

    Attributes:
        name: Dialect identifier used by the command line.
        preamble: Import line written once at the top of the file.
        namespace: Prefix applied to every constructor call (e.g. ``b.``).
        binding_template: Format for the schema binding; receives
            ``schema`` and ``expr``.
        alias_template: Format for the inferred type alias; receives
            ``schema`` and ``alias``.
    """

    name: str
    preamble: str
    namespace: str
    binding_template: str
    alias_template: str

    def call(self, constructor: str, *args: str) -> str:
        """Render a constructor call."""
        return f"{self.namespace}{constructor}({', '.join(args)})"

    def record(self, fields: Iterable[tuple[str, str]]) -> str:
        """Render a keyed record from (field name, fragment) pairs."""
        body = ", ".join(f"{property_key(name)}: {expr}" for name, expr in fields)
        return self.call("struct", "{ " + body + " }" if body else "{}")

    def tuple(self, elements: Iterable[str]) -> str:
        return self.call("tuple", "[" + ", ".join(elements) + "]")

    def union(self, variants: Iterable[tuple[str, str]]) -> str:
        """Render a tagged union from (variant name, fragment) pairs."""
        body = ", ".join(f"{property_key(name)}: {expr}" for name, expr in variants)
        return self.call("enum", "{ " + body + " }" if body else "{}")

    def placeholder(self, type_name: str) -> str:
        """Fragment standing in for a type name that could not be resolved."""
        marker = type_name.replace("*/", "*\\/")
        return f"{self.call('unit')} /* unresolved: {marker} */"


PLAIN = Dialect(
    name="plain",
    preamble="import { " + ", ".join(CONSTRUCTORS + ["infer"]) + ' } from "zorsh";',
    namespace="",
    binding_template="{schema} = {expr};",
    alias_template="type {alias} = infer({schema});",
)

TYPESCRIPT = Dialect(
    name="typescript",
    preamble='import { b } from "zorsh";',
    namespace="b.",
    binding_template="export const {schema} = {expr};",
    alias_template="export type {alias} = b.infer<typeof {schema}>;",
)

DIALECTS: dict[str, Dialect] = {d.name: d for d in (PLAIN, TYPESCRIPT)}


class Emitter:
    """Writes ordered record schemas as a single source file."""

    def __init__(self, dialect: Dialect = PLAIN) -> None:
        self.dialect = dialect

    def emit_record(self, type_name: str, expr: str) -> str:
        """Render the two-line block for one record type."""
        schema = schema_binding_name(type_name)
        alias = sanitize_name(type_name)
        binding = self.dialect.binding_template.format(schema=schema, expr=expr)
        type_alias = self.dialect.alias_template.format(schema=schema, alias=alias)
        return f"{binding}\n{type_alias}"

    def emit(self, records: Iterable[tuple[str, str]]) -> str:
        """Render the preamble followed by one block per (type name, expression)."""
        blocks = [self.dialect.preamble]
        blocks.extend(self.emit_record(name, expr) for name, expr in records)
        return "\n\n".join(blocks) + "\n"
