"""Schema graph data model for the zorsh code generator.

Mirrors the Borsh schema container: a root declaration plus a closed set of
named definitions that refer to each other by type name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# Payload name used by enum variants that carry no data
UNIT_TYPE_NAME = "()"


@dataclass(frozen=True)
class PrimitiveDefinition:
    """A fixed-width scalar (size 0 is the unit type)."""

    size: int


@dataclass(frozen=True)
class SequenceDefinition:
    """A sequence of elements.

    length_width == 0 marks a fixed-size array of length_range[1] elements;
    any other width is a length-prefixed dynamic list.
    """

    length_width: int
    length_range: tuple[int, int]
    elements: str

    @property
    def is_fixed(self) -> bool:
        return self.length_width == 0

    @property
    def max_length(self) -> int:
        return self.length_range[1]


@dataclass(frozen=True)
class TupleDefinition:
    """An anonymous positional tuple."""

    elements: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class EnumVariant:
    """A single variant within an enum definition."""

    discriminant: int
    name: str
    payload: str = UNIT_TYPE_NAME


@dataclass(frozen=True)
class EnumDefinition:
    """A tagged union of ordered variants."""

    variants: list[EnumVariant] = field(default_factory=list)
    tag_width: int = 1


@dataclass(frozen=True)
class NamedFields:
    """Ordered (field name, type name) pairs."""

    fields: list[tuple[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class UnnamedFields:
    """Ordered type names of a tuple struct."""

    elements: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class EmptyFields:
    """A struct with no fields at all (unit struct)."""

    pass


Fields = Union[NamedFields, UnnamedFields, EmptyFields]


@dataclass(frozen=True)
class StructDefinition:
    """A struct with named, unnamed or no fields."""

    fields: Fields = field(default_factory=EmptyFields)

    @property
    def is_record(self) -> bool:
        """Return whether this struct has named fields (exported at top level)."""
        return isinstance(self.fields, NamedFields)


Definition = Union[
    PrimitiveDefinition,
    SequenceDefinition,
    TupleDefinition,
    EnumDefinition,
    StructDefinition,
]


class SchemaGraph:
    """Read-only registry of every named definition reachable from a root."""

    def __init__(self, declaration: str, definitions: dict[str, Definition] | None = None) -> None:
        """Initialize a schema graph.

        Args:
            declaration: Type name of the root of the schema.
            definitions: Mapping of type name to definition.
        """
        self.declaration = declaration
        self._definitions: dict[str, Definition] = dict(definitions or {})

    def get(self, name: str) -> Definition | None:
        """Get a definition by type name."""
        return self._definitions.get(name)

    def get_or_raise(self, name: str) -> Definition:
        """Get a definition by type name, raising if not found."""
        definition = self._definitions.get(name)
        if definition is None:
            raise KeyError(f"Type '{name}' not found")
        return definition

    def is_record(self, name: str) -> bool:
        """Return whether name is a struct with named fields."""
        definition = self._definitions.get(name)
        return isinstance(definition, StructDefinition) and definition.is_record

    def list_types(self) -> list[str]:
        """List all type names in canonical (sorted) order."""
        return sorted(self._definitions)

    def items(self) -> list[tuple[str, Definition]]:
        """Return (name, definition) pairs in canonical order."""
        return [(name, self._definitions[name]) for name in self.list_types()]

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaGraph):
            return NotImplemented
        return self.declaration == other.declaration and self._definitions == other._definitions

    def __repr__(self) -> str:
        return f"SchemaGraph(declaration={self.declaration!r}, definitions={len(self)})"
