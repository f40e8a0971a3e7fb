"""Loading schema graphs from disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from zorsh_codegen.borsh import decode_container
from zorsh_codegen.exceptions import SchemaDecodeError
from zorsh_codegen.logging_utils import get_logger
from zorsh_codegen.types import (
    UNIT_TYPE_NAME,
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

logger = get_logger(__name__)

# Default length range of a dynamic (u32 length-prefixed) sequence
DEFAULT_LENGTH_RANGE = (0, 0xFFFFFFFF)


def load_schema_graph(path: Path | str) -> SchemaGraph:
    """Load a schema graph from a ``.json`` description or a Borsh container.

    Raises:
        FileNotFoundError: If the file does not exist.
        SchemaDecodeError: If the contents cannot be decoded.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    if path.suffix.lower() == ".json":
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise SchemaDecodeError(f"Invalid JSON in {path}: {e}") from e
        graph = graph_from_json(data)
    else:
        graph = decode_container(path.read_bytes())

    logger.info("Loaded %d definitions from %s (root: %s)", len(graph), path, graph.declaration)
    return graph


def graph_from_json(data: Any) -> SchemaGraph:
    """Build a schema graph from its JSON description.

    Expected shape::

        {"declaration": "Root",
         "definitions": {"Root": {"kind": "struct", "fields": [["x", "u32"]]},
                         "u32": {"kind": "primitive", "size": 4}}}
    """
    if not isinstance(data, dict) or "definitions" not in data:
        raise SchemaDecodeError("Schema JSON must be an object with a 'definitions' key")
    specs = data["definitions"]
    if not isinstance(specs, dict):
        raise SchemaDecodeError("'definitions' must be an object")

    definitions: dict[str, Definition] = {}
    for name, spec in specs.items():
        try:
            definitions[name] = _definition_from_spec(spec)
        except (KeyError, TypeError, ValueError) as e:
            raise SchemaDecodeError(f"Invalid definition for '{name}': {e}") from e
    return SchemaGraph(data.get("declaration", ""), definitions)


def _definition_from_spec(spec: dict[str, Any]) -> Definition:
    kind = spec["kind"]

    if kind == "primitive":
        return PrimitiveDefinition(size=int(spec["size"]))
    elif kind == "sequence":
        low, high = spec.get("length_range", DEFAULT_LENGTH_RANGE)
        return SequenceDefinition(
            length_width=int(spec.get("length_width", 4)),
            length_range=(int(low), int(high)),
            elements=spec["elements"],
        )
    elif kind == "tuple":
        return TupleDefinition(elements=list(spec["elements"]))
    elif kind == "enum":
        variants = []
        for index, vspec in enumerate(spec["variants"]):
            variants.append(EnumVariant(
                discriminant=int(vspec.get("discriminant", index)),
                name=vspec["name"],
                payload=vspec.get("payload", UNIT_TYPE_NAME),
            ))
        return EnumDefinition(variants=variants, tag_width=int(spec.get("tag_width", 1)))
    elif kind == "struct":
        return StructDefinition(fields=_fields_from_spec(spec))

    raise ValueError(f"unknown kind '{kind}'")


def _fields_from_spec(spec: dict[str, Any]) -> Fields:
    if "fields" in spec:
        fields = spec["fields"]
        if isinstance(fields, dict):
            return NamedFields(fields=list(fields.items()))
        return NamedFields(fields=[(name, type_name) for name, type_name in fields])
    if "elements" in spec:
        return UnnamedFields(elements=list(spec["elements"]))
    return EmptyFields()
