"""Public inheritance between C++ records, and the subtypes it implies."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

_SEPARATOR = ",, "


class Access(Enum):
    """The access specifier written on a base class, if any."""

    NONE = "none"
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


@dataclass(frozen=True)
class Record:
    """A C++ class or struct with its direct bases.

    Each base is a pair of its access specifier and the base record, or
    ``None`` where the base type is not a record.
    """

    name: str
    is_struct: bool = False
    bases: tuple[tuple[Access, Optional[Record]], ...] = ()
    is_definition: bool = True

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PublicInheritanceResult:
    """The direct public bases of one record; never empty."""

    public_bases: tuple[Record, ...]

    def __post_init__(self) -> None:
        bases = tuple(self.public_bases)
        if not bases:
            raise ValueError("a public inheritance result needs at least one base")
        if any(base is None for base in bases):
            raise ValueError("public bases may not contain None")
        object.__setattr__(self, "public_bases", bases)

    def __str__(self) -> str:
        return "[" + _SEPARATOR.join(base.name for base in self.public_bases) + "]"

    @classmethod
    def parse(
        cls, data: str, lookup: Callable[[str], object]
    ) -> PublicInheritanceResult:
        """Read a result, resolving each base name through ``lookup``.

        Raise ValueError if the text is malformed, a name does not resolve to a
        record, or no bases are listed.
        """
        if not (data.startswith("[") and data.endswith("]") and len(data) >= 2):
            raise ValueError(f"not a bracketed base list: {data!r}")
        bases = []
        for component in data[1:-1].split(_SEPARATOR):
            if not component:
                continue
            found = lookup(component)
            if found is None:
                raise ValueError(f"unknown tag while reading bases: {component!r}")
            if not isinstance(found, Record):
                raise ValueError(f"tag is not a record: {component!r}")
            bases.append(found)
        if not bases:
            raise ValueError("no bases found while reading")
        return cls(tuple(bases))


def _public_bases(record: Record) -> list[Record]:
    bases = []
    for access, base in record.bases:
        if access is Access.PUBLIC or (access is Access.NONE and record.is_struct):
            if base is not None:
                bases.append(base)
    return bases


@dataclass
class PublicInheritanceAnalysis:
    """Collects public bases of records and answers subtype queries."""

    data: dict[Record, PublicInheritanceResult] = field(default_factory=dict)
    _finished: bool = field(default=False, init=False, repr=False)
    _subtypes: dict[Record, frozenset[Record]] = field(
        default_factory=dict, init=False, repr=False
    )

    def visit_record(self, record: Record) -> Optional[PublicInheritanceResult]:
        """Record the public bases of a defining record, returning the result."""
        if not record.is_definition:
            return None
        bases = _public_bases(record)
        if not bases:
            return None
        result = PublicInheritanceResult(tuple(bases))
        self.data[record] = result
        return result

    def visit_all(self, records: Iterable[Record]) -> None:
        """Visit every record in turn."""
        for record in records:
            self.visit_record(record)

    def finish(self) -> None:
        """Mark collection complete, allowing subtype queries."""
        self._finished = True

    def public_subtypes(self, base: Record) -> frozenset[Record]:
        """Return ``base`` and every record publicly derived from it, at any depth."""
        if not self._finished:
            raise RuntimeError("public_subtypes called before the analysis finished")
        cached = self._subtypes.get(base)
        if cached is not None:
            return cached
        result = {base}
        for record, inheritance in self.data.items():
            if base in inheritance.public_bases:
                result |= self.public_subtypes(record)
        frozen = frozenset(result)
        self._subtypes[base] = frozen
        return frozen