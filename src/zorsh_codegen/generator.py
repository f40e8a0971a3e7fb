"""Generation pipeline: schema graph -> resolved records -> ordered source text."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from zorsh_codegen.config import GeneratorConfig
from zorsh_codegen.emitter import Emitter, schema_binding_name
from zorsh_codegen.exceptions import NameCollisionError
from zorsh_codegen.loader import load_schema_graph
from zorsh_codegen.logging_utils import get_logger
from zorsh_codegen.ordering import order_declarations
from zorsh_codegen.resolver import Resolver
from zorsh_codegen.types import SchemaGraph

logger = get_logger(__name__)


class ZorshGenerator:
    """Generates zorsh schema source from a schema graph."""

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig()
        self.resolver: Resolver | None = None

    def generate(self, graph: SchemaGraph) -> str:
        """Generate the complete source text for a schema graph.

        Every definition is resolved in sorted name order so each record in
        the graph is exported exactly once, whether or not anything refers
        to it.
        """
        dialect = self.config.target
        resolver = Resolver(graph, dialect)
        self.resolver = resolver

        for name in graph.list_types():
            resolver.resolve_definition(name)
        if graph.declaration and graph.declaration not in graph:
            # The root may be a composite name with no entry of its own.
            resolver.resolve(graph.declaration)

        _check_binding_names(resolver.records)
        ordered = order_declarations(resolver.records, resolver.dependencies)
        code = Emitter(dialect).emit(
            (name, resolver.resolve_definition(name)) for name in ordered
        )

        logger.info(
            "Generated %d record schemas from %d definitions", len(ordered), len(graph)
        )
        if resolver.unresolved:
            logger.warning(
                "%d unresolved type(s): %s",
                len(resolver.unresolved),
                ", ".join(resolver.unresolved),
            )
        return code


def _check_binding_names(records: list[str]) -> None:
    """Raise NameCollisionError if two records would share a schema binding."""
    by_binding: dict[str, list[str]] = {}
    for name in records:
        by_binding.setdefault(schema_binding_name(name), []).append(name)
    for binding, names in sorted(by_binding.items()):
        if len(names) > 1:
            raise NameCollisionError(binding, names)


def write_output(output_path: Path, code: str) -> None:
    """Write code to output_path atomically (temporary file + rename)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", dir=output_path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(code)
        os.replace(tmp_name, output_path)
    except BaseException:
        os.unlink(tmp_name)
        raise


def generate_file(
    input_path: Path | str,
    output_path: Path | str,
    config: GeneratorConfig | None = None,
) -> str:
    """Load a schema, generate code in memory, then write it to output_path.

    Nothing is written if loading or generation fails.

    Returns:
        The generated code.
    """
    graph = load_schema_graph(input_path)
    code = ZorshGenerator(config).generate(graph)
    write_output(Path(output_path), code)
    logger.info("Wrote %s", output_path)
    return code
