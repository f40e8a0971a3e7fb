"""Resolver: maps type names to zorsh schema-construction fragments.

Every type name is resolved at most once per run. The cache doubles as the
cycle guard: a record (struct with named fields) that is reached again while
its own body is being resolved resolves to its schema binding name. Any other
definition reached again is expanded once more if a record lies on the cycle
back to it, and is a genuine cycle (which fails) otherwise.

While resolving, the resolver records which records each record refers to by
name. Those producer -> consumer edges drive the declaration order.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum

from zorsh_codegen.emitter import PLAIN, Dialect, schema_binding_name
from zorsh_codegen.exceptions import (
    CyclicDefinitionError,
    TypeNameError,
    UnsupportedPrimitiveError,
)
from zorsh_codegen.logging_utils import get_logger
from zorsh_codegen.parsing import (
    ArrayRef,
    GenericRef,
    TupleRef,
    looks_composite,
    parse_type_name,
)
from zorsh_codegen.types import (
    UNIT_TYPE_NAME,
    Definition,
    EnumDefinition,
    NamedFields,
    PrimitiveDefinition,
    SchemaGraph,
    SequenceDefinition,
    StructDefinition,
    TupleDefinition,
    UnnamedFields,
)

logger = get_logger(__name__)

# Scalars whose constructor is selected by declared name: name -> byte width
BUILTIN_SCALARS: dict[str, int] = {
    "bool": 1,
    "u8": 1,
    "u16": 2,
    "u32": 4,
    "u64": 8,
    "u128": 16,
    "i8": 1,
    "i16": 2,
    "i32": 4,
    "i64": 8,
    "i128": 16,
    "f32": 4,
    "f64": 8,
}

# Unsigned constructor used for any other primitive of the given width
UNSIGNED_BY_WIDTH: dict[int, str] = {
    1: "u8",
    2: "u16",
    4: "u32",
    8: "u64",
    16: "u128",
}

STRING_NAMES = frozenset({"String", "string", "str"})

# Generic base -> (constructor, parameter count)
GENERIC_CONSTRUCTORS: dict[str, tuple[str, int]] = {
    "Vec": ("vec", 1),
    "VecDeque": ("vec", 1),
    "LinkedList": ("vec", 1),
    "Option": ("option", 1),
    "HashSet": ("hashSet", 1),
    "BTreeSet": ("hashSet", 1),
    "HashMap": ("hashMap", 2),
    "BTreeMap": ("hashMap", 2),
}


class CacheState(Enum):
    """Resolution state of a type name."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass
class CacheEntry:
    """Cached resolution of a single type name.

    ``references`` holds the record names the fragment refers to by binding
    name, so every later consumer of the fragment inherits those dependencies.
    """

    state: CacheState
    fragment: str | None = None
    references: frozenset[str] = frozenset()


class Resolver:
    """Resolves type names of a schema graph into code fragments."""

    def __init__(self, graph: SchemaGraph, dialect: Dialect = PLAIN) -> None:
        """Initialize a resolver.

        Args:
            graph: The schema graph to resolve against (never modified).
            dialect: Target surface used to render constructor calls.
        """
        self.graph = graph
        self.dialect = dialect
        self._cache: dict[str, CacheEntry] = {}
        self._path: list[str] = []
        self._consumers: list[str] = []
        self._unresolved: dict[str, None] = {}
        self.dependencies: dict[str, set[str]] = defaultdict(set)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def state(self, type_name: str) -> CacheState:
        """Return the cache state of a type name."""
        entry = self._cache.get(type_name)
        return entry.state if entry is not None else CacheState.NOT_STARTED

    def resolve(self, type_name: str) -> str:
        """Return the fragment used where type_name is referenced.

        Records resolve to their schema binding name; everything else is
        inlined.
        """
        fragment, _ = self._use(type_name)
        return fragment

    def resolve_definition(self, type_name: str) -> str:
        """Return the full construction expression for type_name.

        For a record this is the body bound to its schema name; for any other
        type it equals resolve().
        """
        if type_name == UNIT_TYPE_NAME:
            return self.dialect.call("unit")
        entry = self._ensure(type_name)
        assert entry.fragment is not None
        return entry.fragment

    @property
    def records(self) -> list[str]:
        """Names of all fully resolved records, sorted."""
        return sorted(
            name
            for name, entry in self._cache.items()
            if entry.state is CacheState.DONE and self.graph.is_record(name)
        )

    @property
    def unresolved(self) -> list[str]:
        """Type names that fell back to a placeholder, in first-seen order."""
        return list(self._unresolved)

    # ------------------------------------------------------------------
    # Cache and dependency bookkeeping
    # ------------------------------------------------------------------

    def _use(self, type_name: str) -> tuple[str, frozenset[str]]:
        """Resolve a reference site and link its dependencies to the current record."""
        if type_name.strip() == UNIT_TYPE_NAME:
            return self.dialect.call("unit"), frozenset()

        entry = self._ensure(type_name)
        if self.graph.is_record(type_name):
            fragment = schema_binding_name(type_name)
            references = frozenset({type_name})
        else:
            assert entry.fragment is not None
            fragment = entry.fragment
            references = entry.references
        self._link(references)
        return fragment, references

    def _link(self, references: frozenset[str]) -> None:
        """Record producer -> consumer edges for the enclosing record."""
        if not self._consumers:
            return
        consumer = self._consumers[-1]
        for producer in references:
            # References to records still in progress are already satisfied
            # by their binding name and must not constrain the order.
            if producer == consumer or self.state(producer) is not CacheState.DONE:
                continue
            self.dependencies[producer].add(consumer)

    def _ensure(self, type_name: str) -> CacheEntry:
        """Resolve the definition of type_name once, guarding against cycles.

        A non-record reached again while in progress is expanded once more
        (uncached) when the cycle back to it passes through a record, since
        that record already resolves to its binding name. Otherwise the
        cycle can never close and CyclicDefinitionError is raised.
        """
        entry = self._cache.get(type_name)
        if entry is not None:
            if entry.state is CacheState.DONE:
                return entry
            if self.graph.is_record(type_name):
                return entry
            if not self._cycle_has_record(type_name):
                raise CyclicDefinitionError(self._cycle_path(type_name))
            fragment, references = self._expand(type_name, is_record=False)
            return CacheEntry(CacheState.DONE, fragment, references)

        is_record = self.graph.is_record(type_name)
        entry = CacheEntry(state=CacheState.IN_PROGRESS)
        self._cache[type_name] = entry

        fragment, references = self._expand(type_name, is_record)

        entry.fragment = fragment
        entry.references = references
        entry.state = CacheState.DONE
        logger.debug("Resolved %s -> %s", type_name, fragment)
        return entry

    def _expand(self, type_name: str, is_record: bool) -> tuple[str, frozenset[str]]:
        self._path.append(type_name)
        if is_record:
            self._consumers.append(type_name)

        result = self._build(type_name)

        if is_record:
            self._consumers.pop()
        self._path.pop()
        return result

    def _cycle_start(self, type_name: str) -> int:
        """Index of the most recent occurrence of type_name on the path."""
        return len(self._path) - 1 - self._path[::-1].index(type_name)

    def _cycle_has_record(self, type_name: str) -> bool:
        if type_name not in self._path:
            return False
        start = self._cycle_start(type_name)
        return any(self.graph.is_record(name) for name in self._path[start + 1:])

    def _cycle_path(self, type_name: str) -> list[str]:
        if type_name in self._path:
            return self._path[self._cycle_start(type_name):] + [type_name]
        return [type_name, type_name]

    # ------------------------------------------------------------------
    # Resolution rules
    # ------------------------------------------------------------------

    def _build(self, type_name: str) -> tuple[str, frozenset[str]]:
        name = type_name.strip()
        if name in STRING_NAMES:
            return self.dialect.call("string"), frozenset()

        definition = self.graph.get(type_name)
        if looks_composite(name) and not self.graph.is_record(type_name):
            ref = parse_type_name(name)
            if isinstance(ref, GenericRef) and ref.base in GENERIC_CONSTRUCTORS:
                return self._build_generic(ref)
            if isinstance(ref, TupleRef):
                return self._build_tuple([element.text for element in ref.elements])
            if isinstance(ref, ArrayRef):
                element, references = self._use(ref.element.text)
                return self.dialect.call("array", element, str(ref.length)), references

        if definition is None:
            if name in BUILTIN_SCALARS:
                return self.dialect.call(name), frozenset()
            return self._placeholder(type_name), frozenset()
        return self._build_definition(type_name, definition)

    def _build_definition(
        self, type_name: str, definition: Definition
    ) -> tuple[str, frozenset[str]]:
        if isinstance(definition, PrimitiveDefinition):
            return self._build_primitive(type_name.strip(), definition.size), frozenset()
        if isinstance(definition, SequenceDefinition):
            element, references = self._use(definition.elements)
            if definition.is_fixed:
                return self.dialect.call("array", element, str(definition.max_length)), references
            return self.dialect.call("vec", element), references
        if isinstance(definition, TupleDefinition):
            return self._build_tuple(definition.elements)
        if isinstance(definition, EnumDefinition):
            return self._build_enum(definition)
        if isinstance(definition, StructDefinition):
            return self._build_struct(definition)
        raise TypeError(f"Unknown definition kind for '{type_name}': {definition!r}")

    def _build_primitive(self, name: str, size: int) -> str:
        """Pick the constructor for a primitive by declared name, then by width."""
        if size == 0:
            return self.dialect.call("unit")
        if name in BUILTIN_SCALARS:
            if BUILTIN_SCALARS[name] != size:
                raise UnsupportedPrimitiveError(name, size)
            return self.dialect.call(name)
        constructor = UNSIGNED_BY_WIDTH.get(size)
        if constructor is None:
            raise UnsupportedPrimitiveError(name, size)
        return self.dialect.call(constructor)

    def _build_generic(self, ref: GenericRef) -> tuple[str, frozenset[str]]:
        constructor, arity = GENERIC_CONSTRUCTORS[ref.base]
        if len(ref.params) != arity:
            raise TypeNameError(
                f"'{ref.base}' expects {arity} type parameter(s), got {len(ref.params)} in '{ref.text}'"
            )
        args: list[str] = []
        references: frozenset[str] = frozenset()
        for param in ref.params:
            fragment, param_refs = self._use(param.text)
            args.append(fragment)
            references |= param_refs
        return self.dialect.call(constructor, *args), references

    def _build_tuple(self, elements: list[str]) -> tuple[str, frozenset[str]]:
        fragments: list[str] = []
        references: frozenset[str] = frozenset()
        for element in elements:
            fragment, element_refs = self._use(element)
            fragments.append(fragment)
            references |= element_refs
        return self.dialect.tuple(fragments), references

    def _build_struct(self, definition: StructDefinition) -> tuple[str, frozenset[str]]:
        fields = definition.fields
        if isinstance(fields, NamedFields):
            resolved: list[tuple[str, str]] = []
            references: frozenset[str] = frozenset()
            for field_name, field_type in fields.fields:
                fragment, field_refs = self._use(field_type)
                resolved.append((field_name, fragment))
                references |= field_refs
            return self.dialect.record(resolved), references
        if isinstance(fields, UnnamedFields):
            return self._build_tuple(fields.elements)
        return self.dialect.call("unit"), frozenset()

    def _build_enum(self, definition: EnumDefinition) -> tuple[str, frozenset[str]]:
        variants: list[tuple[str, str]] = []
        references: frozenset[str] = frozenset()
        for variant in definition.variants:
            fragment, variant_refs = self._build_payload(variant.payload)
            variants.append((variant.name, fragment))
            references |= variant_refs
        return self.dialect.union(variants), references

    def _build_payload(self, payload: str) -> tuple[str, frozenset[str]]:
        """Resolve an enum variant payload.

        Struct payloads are always expanded in place, even when the struct is
        a record exported under its own name elsewhere.
        """
        if payload.strip() == UNIT_TYPE_NAME:
            return self.dialect.call("unit"), frozenset()
        if not isinstance(self.graph.get(payload), StructDefinition):
            return self._use(payload)

        entry = self._ensure(payload)
        if entry.state is not CacheState.DONE:
            raise CyclicDefinitionError(self._cycle_path(payload))
        assert entry.fragment is not None
        self._link(entry.references)
        return entry.fragment, entry.references

    def _placeholder(self, type_name: str) -> str:
        if type_name not in self._unresolved:
            logger.warning("Unresolved type '%s'; emitting placeholder", type_name)
            self._unresolved[type_name] = None
        return self.dialect.placeholder(type_name)


