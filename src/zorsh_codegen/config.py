"""Generator configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from zorsh_codegen.emitter import DIALECTS, Dialect
from zorsh_codegen.logging_utils import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV

DIALECT_ENV = "ZORSH_CODEGEN_DIALECT"
DEFAULT_DIALECT = "plain"


@dataclass
class GeneratorConfig:
    """Options controlling a generation run."""

    dialect: str = DEFAULT_DIALECT
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if self.dialect not in DIALECTS:
            raise ValueError(
                f"Unknown dialect '{self.dialect}' (expected one of: {', '.join(sorted(DIALECTS))})"
            )

    @classmethod
    def from_env(cls, **overrides: str | None) -> GeneratorConfig:
        """Build a config from environment variables.

        Keyword overrides that are not None take precedence over the
        environment (used by the command line).
        """
        values = {
            "dialect": os.environ.get(DIALECT_ENV, DEFAULT_DIALECT),
            "log_level": os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
        }
        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return cls(**values)

    @property
    def target(self) -> Dialect:
        return DIALECTS[self.dialect]
