"""Shared fixtures for zorsh_codegen tests."""

from __future__ import annotations

import logging

import pytest

from zorsh_codegen.logging_utils import LOGGER_NAME
from zorsh_codegen.types import (
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

U32_MAX = 0xFFFFFFFF


def primitives(*names: str) -> dict:
    """Primitive definitions for the given Rust scalar names."""
    sizes = {
        "bool": 1, "u8": 1, "u16": 2, "u32": 4, "u64": 8, "u128": 16,
        "i8": 1, "i16": 2, "i32": 4, "i64": 8, "i128": 16, "f32": 4, "f64": 8,
    }
    return {name: PrimitiveDefinition(sizes[name]) for name in names}


def record(*fields: tuple[str, str]) -> StructDefinition:
    return StructDefinition(NamedFields(list(fields)))


def vec_of(element: str) -> SequenceDefinition:
    return SequenceDefinition(4, (0, U32_MAX), element)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo any logging configuration a test (e.g. the CLI) applied."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = logger.handlers[:]
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def segment_graph() -> SchemaGraph:
    """Point and Segment, where Segment refers to Point twice."""
    return SchemaGraph("Segment", {
        **primitives("u32"),
        "Point": record(("x", "u32"), ("y", "u32")),
        "Segment": record(("a", "Point"), ("b", "Point")),
    })


@pytest.fixture
def game_graph() -> SchemaGraph:
    """A game-state schema exercising every definition kind."""
    return SchemaGraph("Player", {
        **primitives("u8", "u16", "u32", "u64", "f32", "bool"),
        "String": vec_of("u8"),
        "Stats": record(("health", "u32"), ("mana", "u32")),
        "StatBuff": record(("stat", "String"), ("amount", "u16")),
        "Effect": EnumDefinition([
            EnumVariant(0, "Damage", "EffectDamage"),
            EnumVariant(1, "Buff", "EffectBuff"),
            EnumVariant(2, "None", "()"),
        ]),
        "EffectDamage": StructDefinition(UnnamedFields(["u32"])),
        "EffectBuff": StructDefinition(UnnamedFields(["StatBuff"])),
        "Vec<Effect>": vec_of("Effect"),
        "Item": record(
            ("id", "String"),
            ("weight", "f32"),
            ("effects", "Vec<Effect>"),
        ),
        "Vec<Item>": vec_of("Item"),
        "Option<u64>": EnumDefinition([
            EnumVariant(0, "None", "()"),
            EnumVariant(1, "Some", "u64"),
        ]),
        "(u64, String)": TupleDefinition(["u64", "String"]),
        "[u8; 4]": SequenceDefinition(0, (4, 4), "u8"),
        "Marker": StructDefinition(EmptyFields()),
        "Player": record(
            ("name", "String"),
            ("level", "u8"),
            ("online", "bool"),
            ("stats", "Stats"),
            ("inventory", "Vec<Item>"),
            ("last_login", "Option<u64>"),
            ("last_death", "(u64, String)"),
            ("tag", "[u8; 4]"),
            ("marker", "Marker"),
            ("equipped", "HashMap<String, Item>"),
        ),
    })
