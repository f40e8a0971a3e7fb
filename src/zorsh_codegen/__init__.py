"""zorsh-codegen - generate zorsh schema source from Borsh schema containers."""

from zorsh_codegen.borsh import decode_container, encode_container
from zorsh_codegen.config import GeneratorConfig
from zorsh_codegen.emitter import DIALECTS, PLAIN, TYPESCRIPT, Dialect, Emitter
from zorsh_codegen.exceptions import (
    CodegenError,
    CyclicDefinitionError,
    NameCollisionError,
    SchemaDecodeError,
    TypeNameError,
    UnsupportedPrimitiveError,
)
from zorsh_codegen.generator import ZorshGenerator, generate_file
from zorsh_codegen.loader import load_schema_graph
from zorsh_codegen.ordering import order_declarations
from zorsh_codegen.parsing import TypeNameParser
from zorsh_codegen.resolver import CacheState, Resolver
from zorsh_codegen.types import (
    Definition,
    EmptyFields,
    EnumDefinition,
    EnumVariant,
    NamedFields,
    PrimitiveDefinition,
    SchemaGraph,
    SequenceDefinition,
    StructDefinition,
    TupleDefinition,
    UnnamedFields,
)

__all__ = [
    # Main API
    "ZorshGenerator",
    "GeneratorConfig",
    "generate_file",
    "load_schema_graph",
    # Components
    "Resolver",
    "CacheState",
    "TypeNameParser",
    "Emitter",
    "Dialect",
    "DIALECTS",
    "PLAIN",
    "TYPESCRIPT",
    "order_declarations",
    "decode_container",
    "encode_container",
    # Schema graph
    "SchemaGraph",
    "Definition",
    "PrimitiveDefinition",
    "SequenceDefinition",
    "TupleDefinition",
    "EnumDefinition",
    "EnumVariant",
    "StructDefinition",
    "NamedFields",
    "UnnamedFields",
    "EmptyFields",
    # Errors
    "CodegenError",
    "CyclicDefinitionError",
    "NameCollisionError",
    "SchemaDecodeError",
    "TypeNameError",
    "UnsupportedPrimitiveError",
]

__version__ = "0.1.0"
