"""Results of the name-collection and schema-discovery passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class NamedDecl:
    """A declaration known by its fully spelled name."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class FindNamedDeclsResult:
    """Lookup tables from spelled names to declarations and to types."""

    named_decls: dict[str, NamedDecl] = field(default_factory=dict)
    types: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{name};\n" for name in sorted(self.named_decls)]
        lines.extend(f"{name};\n" for name in sorted(self.types))
        return "".join(lines)

    @classmethod
    def parse(cls, data: str) -> FindNamedDeclsResult:
        """Return an empty result; the tables are rebuilt from source, not text."""
        return cls()


@dataclass
class SchemasResult:
    """Marker recorded for each schema type found."""

    def __str__(self) -> str:
        return "."

    @classmethod
    def parse(cls, data: str) -> SchemasResult:
        """Return a marker; the serialized text carries no information."""
        return cls()