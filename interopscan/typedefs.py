"""Typedefs naming C++ tags, collected so generated code can spell those tags."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Optional

from .inheritance import Access
from .named_decls import NamedDecl

_SEPARATOR = ",, "

# Kinds of lexical context in which a collected typedef may not live.
DISALLOWED_CONTEXT_KINDS = frozenset(
    {
        "hlslBuffer",
        "label",
        "objcCompatibleAlias",
        "objcContainer",
        "objcMethod",
        "objcProperty",
        "template",
        "classTemplate",
        "functionTemplate",
        "typeAliasTemplate",
        "classTemplateSpecialization",
        "classTemplatePartialSpecialization",
        "unresolvedUsingIfExists",
        "usingPack",
        "usingShadow",
        "value",
        "function",
        "method",
        "variable",
        "field",
        "enumConstant",
    }
)


@dataclass(frozen=True)
class TypedefDecl:
    """A typedef or alias declaration and the facts the analysis needs about it.

    ``underlying`` is the tag declaration its canonical type names, or None
    when that type is not a tag. ``context`` is the enclosing declaration, or
    None when the lexical context is not a named declaration.
    """

    name: str
    underlying: Optional[NamedDecl]
    context: Optional[NamedDecl]
    context_kind: str = "namespace"
    access: Access = Access.NONE
    is_from_usd: bool = True
    in_public_header: bool = True
    underlying_contains_usd_types: bool = True
    underlying_in_public_header: bool = True

    def in_allowable_context(self) -> bool:
        """True if the lexical context is a named declaration of an allowed kind."""
        if self.context is None:
            return False
        return self.context_kind not in DISALLOWED_CONTEXT_KINDS


class TypedefResult:
    """The set of (enclosing declaration, typedef spelling) pairs for one tag."""

    def __init__(self, pairs: Iterable[tuple[object, str]] = ()) -> None:
        self._spellings: set[tuple[object, str]] = set()
        for decl, spelling in pairs:
            self.insert(decl, spelling)

    @property
    def spellings(self) -> frozenset[tuple[object, str]]:
        """All recorded pairs."""
        return frozenset(self._spellings)

    def insert(self, decl: object, spelling: str) -> None:
        """Record that ``spelling`` names the tag inside ``decl``."""
        self._spellings.add((decl, spelling))

    def is_subset(self, other: TypedefResult) -> bool:
        """True if every enclosing declaration here also appears in ``other``."""
        other_decls = {decl for decl, _ in other._spellings}
        return all(decl in other_decls for decl, _ in self._spellings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypedefResult):
            return NotImplemented
        return self._spellings == other._spellings

    def __len__(self) -> int:
        return len(self._spellings)

    def __repr__(self) -> str:
        return f"TypedefResult({sorted(self._spellings, key=_sort_key)!r})"

    def __str__(self) -> str:
        parts = [
            f"{decl}{_SEPARATOR}{spelling}"
            for decl, spelling in sorted(self._spellings, key=_sort_key)
        ]
        return "[" + _SEPARATOR.join(parts) + "]"

    @classmethod
    def parse(cls, data: str, lookup: Callable[[str], object]) -> TypedefResult:
        """Read a result, resolving each enclosing declaration through ``lookup``.

        Raise ValueError if the text is malformed or a name does not resolve.
        """
        if not (data.startswith("[") and data.endswith("]") and len(data) >= 2):
            raise ValueError(f"not a bracketed typedef list: {data!r}")
        inner = data[1:-1]
        components = inner.split(_SEPARATOR) if inner else []
        if len(components) % 2 == 1:
            raise ValueError(f"typedef list has an odd number of parts: {data!r}")
        result = cls()
        for name, spelling in zip(components[::2], components[1::2]):
            decl = lookup(name)
            if decl is None:
                raise ValueError(f"unknown declaration while reading typedefs: {name!r}")
            result.insert(decl, spelling)
        return result


def _sort_key(pair: tuple[object, str]) -> tuple[str, str]:
    return str(pair[0]), pair[1]


@dataclass
class TypedefAnalysis:
    """Collects public typedef spellings of tags, keyed by the tag declaration."""

    data: dict[NamedDecl, TypedefResult] = field(default_factory=dict)

    def visit_typedef(self, typedef: TypedefDecl) -> Optional[TypedefResult]:
        """Record ``typedef`` if it qualifies; return the tag's result, or None."""
        if not typedef.is_from_usd or not typedef.in_public_header:
            return None
        if typedef.access in (Access.PRIVATE, Access.PROTECTED):
            return None
        if not typedef.name:
            return None
        tag = typedef.underlying
        if tag is None:
            return None
        if not typedef.underlying_contains_usd_types:
            return None
        if not typedef.underlying_in_public_header:
            return None
        if not typedef.in_allowable_context():
            return None
        result = self.data.setdefault(tag, TypedefResult())
        result.insert(typedef.context, typedef.name)
        return result

    def visit_all(self, typedefs: Iterable[TypedefDecl]) -> None:
        """Visit every typedef in turn."""
        for typedef in typedefs:
            self.visit_typedef(typedef)

    def compares_equal(self, expected: TypedefResult, actual: TypedefResult) -> bool:
        """Expected results match when their declarations all occur in ``actual``."""
        return expected.is_subset(actual)