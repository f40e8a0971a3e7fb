"""Borsh encoding of schema containers.

A container is the Borsh serialization of::

    declaration: string
    definitions: map<string, Definition>   (u32 count, entries sorted by name)

with Definition and Fields encoded as tagged unions (u8 tag).
"""

from __future__ import annotations

import struct

from zorsh_codegen.exceptions import SchemaDecodeError
from zorsh_codegen.types import (
    Definition,
    EmptyFields,
    EnumDefinition,
    EnumVariant,
    Fields,
    NamedFields,
    PrimitiveDefinition,
    SchemaGraph,
    SequenceDefinition,
    StructDefinition,
    TupleDefinition,
    UnnamedFields,
)

# Definition tags
TAG_PRIMITIVE = 0
TAG_SEQUENCE = 1
TAG_TUPLE = 2
TAG_ENUM = 3
TAG_STRUCT = 4

# Fields tags
TAG_NAMED_FIELDS = 0
TAG_UNNAMED_FIELDS = 1
TAG_EMPTY_FIELDS = 2


class BinaryReader:
    """Sequential little-endian reader over a byte buffer."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def _unpack(self, fmt: str, size: int) -> int:
        if self.remaining < size:
            raise SchemaDecodeError(
                f"Unexpected end of input at offset {self.offset} (need {size} bytes)"
            )
        (value,) = struct.unpack_from(fmt, self.data, self.offset)
        self.offset += size
        return value

    def read_u8(self) -> int:
        return self._unpack("<B", 1)

    def read_u32(self) -> int:
        return self._unpack("<I", 4)

    def read_u64(self) -> int:
        return self._unpack("<Q", 8)

    def read_i64(self) -> int:
        return self._unpack("<q", 8)

    def read_string(self) -> str:
        length = self.read_u32()
        if self.remaining < length:
            raise SchemaDecodeError(
                f"String of {length} bytes at offset {self.offset} exceeds input"
            )
        raw = self.data[self.offset:self.offset + length]
        self.offset += length
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SchemaDecodeError(f"Invalid UTF-8 in string: {e}") from e

    def read_string_vec(self) -> list[str]:
        return [self.read_string() for _ in range(self.read_u32())]


class BinaryWriter:
    """Little-endian writer producing Borsh bytes."""

    def __init__(self) -> None:
        self._parts: list[bytes] = []

    def write_u8(self, value: int) -> None:
        self._parts.append(struct.pack("<B", value))

    def write_u32(self, value: int) -> None:
        self._parts.append(struct.pack("<I", value))

    def write_u64(self, value: int) -> None:
        self._parts.append(struct.pack("<Q", value))

    def write_i64(self, value: int) -> None:
        self._parts.append(struct.pack("<q", value))

    def write_string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        self.write_u32(len(encoded))
        self._parts.append(encoded)

    def write_string_vec(self, values: list[str]) -> None:
        self.write_u32(len(values))
        for value in values:
            self.write_string(value)

    def getvalue(self) -> bytes:
        return b"".join(self._parts)


def _read_fields(reader: BinaryReader) -> Fields:
    tag = reader.read_u8()
    if tag == TAG_NAMED_FIELDS:
        count = reader.read_u32()
        return NamedFields(fields=[(reader.read_string(), reader.read_string()) for _ in range(count)])
    if tag == TAG_UNNAMED_FIELDS:
        return UnnamedFields(elements=reader.read_string_vec())
    if tag == TAG_EMPTY_FIELDS:
        return EmptyFields()
    raise SchemaDecodeError(f"Unknown fields tag {tag}")


def _read_definition(reader: BinaryReader) -> Definition:
    tag = reader.read_u8()
    if tag == TAG_PRIMITIVE:
        return PrimitiveDefinition(size=reader.read_u8())
    if tag == TAG_SEQUENCE:
        length_width = reader.read_u8()
        low = reader.read_u64()
        high = reader.read_u64()
        return SequenceDefinition(
            length_width=length_width,
            length_range=(low, high),
            elements=reader.read_string(),
        )
    if tag == TAG_TUPLE:
        return TupleDefinition(elements=reader.read_string_vec())
    if tag == TAG_ENUM:
        tag_width = reader.read_u8()
        variants = []
        for _ in range(reader.read_u32()):
            discriminant = reader.read_i64()
            name = reader.read_string()
            payload = reader.read_string()
            variants.append(EnumVariant(discriminant=discriminant, name=name, payload=payload))
        return EnumDefinition(variants=variants, tag_width=tag_width)
    if tag == TAG_STRUCT:
        return StructDefinition(fields=_read_fields(reader))
    raise SchemaDecodeError(f"Unknown definition tag {tag}")


def decode_container(data: bytes) -> SchemaGraph:
    """Decode a Borsh schema container into a schema graph."""
    reader = BinaryReader(data)
    declaration = reader.read_string()
    definitions: dict[str, Definition] = {}
    for _ in range(reader.read_u32()):
        name = reader.read_string()
        if name in definitions:
            raise SchemaDecodeError(f"Duplicate definition for '{name}'")
        definitions[name] = _read_definition(reader)
    if reader.remaining:
        raise SchemaDecodeError(f"{reader.remaining} trailing bytes after schema container")
    return SchemaGraph(declaration, definitions)


def _write_fields(writer: BinaryWriter, fields: Fields) -> None:
    if isinstance(fields, NamedFields):
        writer.write_u8(TAG_NAMED_FIELDS)
        writer.write_u32(len(fields.fields))
        for name, type_name in fields.fields:
            writer.write_string(name)
            writer.write_string(type_name)
    elif isinstance(fields, UnnamedFields):
        writer.write_u8(TAG_UNNAMED_FIELDS)
        writer.write_string_vec(fields.elements)
    else:
        writer.write_u8(TAG_EMPTY_FIELDS)


def _write_definition(writer: BinaryWriter, definition: Definition) -> None:
    if isinstance(definition, PrimitiveDefinition):
        writer.write_u8(TAG_PRIMITIVE)
        writer.write_u8(definition.size)
    elif isinstance(definition, SequenceDefinition):
        writer.write_u8(TAG_SEQUENCE)
        writer.write_u8(definition.length_width)
        writer.write_u64(definition.length_range[0])
        writer.write_u64(definition.length_range[1])
        writer.write_string(definition.elements)
    elif isinstance(definition, TupleDefinition):
        writer.write_u8(TAG_TUPLE)
        writer.write_string_vec(definition.elements)
    elif isinstance(definition, EnumDefinition):
        writer.write_u8(TAG_ENUM)
        writer.write_u8(definition.tag_width)
        writer.write_u32(len(definition.variants))
        for variant in definition.variants:
            writer.write_i64(variant.discriminant)
            writer.write_string(variant.name)
            writer.write_string(variant.payload)
    elif isinstance(definition, StructDefinition):
        writer.write_u8(TAG_STRUCT)
        _write_fields(writer, definition.fields)
    else:
        raise TypeError(f"Cannot encode definition {definition!r}")


def encode_container(graph: SchemaGraph) -> bytes:
    """Encode a schema graph as a Borsh schema container."""
    writer = BinaryWriter()
    writer.write_string(graph.declaration)
    items = graph.items()
    writer.write_u32(len(items))
    for name, definition in items:
        writer.write_string(name)
        _write_definition(writer, definition)
    return writer.getvalue()
