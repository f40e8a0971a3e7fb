"""Exceptions raised by the zorsh code generator."""


class CodegenError(Exception):
    """Base exception for code generation errors."""
    pass


class SchemaDecodeError(CodegenError):
    """Raised when input bytes cannot be decoded into a schema graph."""
    pass


class TypeNameError(CodegenError):
    """Raised for malformed composite type names (e.g. missing '>' or ')')."""
    pass


class UnsupportedPrimitiveError(CodegenError):
    """Raised for a primitive whose byte width has no constructor."""

    def __init__(self, name: str, size: int) -> None:
        super().__init__(f"Unsupported primitive '{name}' with size {size} bytes")
        self.name = name
        self.size = size


class CyclicDefinitionError(CodegenError):
    """Raised when a non-record definition refers back to itself."""

    def __init__(self, path: list[str]) -> None:
        super().__init__("Cyclic definition: " + " -> ".join(path))
        self.path = path


class NameCollisionError(CodegenError):
    """Raised when distinct record names sanitize to the same binding name."""

    def __init__(self, binding: str, type_names: list[str]) -> None:
        super().__init__(
            f"Records {', '.join(repr(n) for n in type_names)} all map to binding '{binding}'"
        )
        self.binding = binding
        self.type_names = type_names
