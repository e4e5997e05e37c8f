"""Dependencies that decide sendability, and the outcome of the Sendable analysis."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .type_model import TypeRef

_SEPARATOR = ",, "
_INHERITANCE_PREFIX = "$inheritance "
_CONDITIONAL_PREFIX = "$specialConditional "
_SPECIAL_AVAILABLE = "$specialAvailable"
_SPECIAL_REFERENCE = "$specialImportedAsReference"

TypeFinder = Callable[[str], Optional[TypeRef]]


class DependencyKind(Enum):
    """Why a type's sendability depends on something."""

    INHERITANCE = "inheritance"
    FIELD = "field"
    SPECIAL_AVAILABLE = "specialAvailable"
    SPECIAL_IMPORTED_AS_REFERENCE = "specialImportedAsReference"
    SPECIAL_CONDITIONAL = "specialConditional"


_TYPED_KINDS = frozenset(
    {
        DependencyKind.INHERITANCE,
        DependencyKind.FIELD,
        DependencyKind.SPECIAL_CONDITIONAL,
    }
)


@dataclass(frozen=True)
class Dependency:
    """One dependency; its type, if any, is kept in canonical form."""

    kind: DependencyKind
    field_name: str = ""
    type_: Optional[TypeRef] = None

    def __post_init__(self) -> None:
        if self.type_ is not None:
            object.__setattr__(self, "type_", self.type_.canonical())
        elif self.kind in _TYPED_KINDS:
            raise ValueError(f"a {self.kind.value} dependency needs a type")

    def __str__(self) -> str:
        if self.kind is DependencyKind.INHERITANCE:
            return f"{_INHERITANCE_PREFIX}{self.type_}"
        if self.kind is DependencyKind.FIELD:
            return f"{self.type_} {self.field_name}"
        if self.kind is DependencyKind.SPECIAL_AVAILABLE:
            return _SPECIAL_AVAILABLE
        if self.kind is DependencyKind.SPECIAL_IMPORTED_AS_REFERENCE:
            return _SPECIAL_REFERENCE
        return f"{_CONDITIONAL_PREFIX}{self.type_}"

    @classmethod
    def parse(cls, data: str, find_type: TypeFinder) -> Dependency:
        """Read a dependency, resolving type spellings through ``find_type``.

        Raise ValueError if the text is malformed or a type does not resolve.
        """
        if data.startswith(_INHERITANCE_PREFIX):
            found = _resolve(data[len(_INHERITANCE_PREFIX):], find_type)
            return cls(DependencyKind.INHERITANCE, "", found)
        if data == _SPECIAL_AVAILABLE:
            return cls(DependencyKind.SPECIAL_AVAILABLE)
        if data == _SPECIAL_REFERENCE:
            return cls(DependencyKind.SPECIAL_IMPORTED_AS_REFERENCE)
        if data.startswith(_CONDITIONAL_PREFIX):
            found = _resolve(data[len(_CONDITIONAL_PREFIX):], find_type)
            return cls(DependencyKind.SPECIAL_CONDITIONAL, "", found)
        type_text, space, field_name = data.rpartition(" ")
        if not space:
            raise ValueError(f"not a valid dependency: {data!r}")
        return cls(DependencyKind.FIELD, field_name, _resolve(type_text, find_type))


def _resolve(spelling: str, find_type: TypeFinder) -> TypeRef:
    found = find_type(spelling)
    if found is None:
        raise ValueError(f"unknown type while reading dependency: {spelling!r}")
    return found


@dataclass
class DependenciesResult:
    """The ordered dependencies of one type."""

    dependencies: list[Dependency] = field(default_factory=list)

    def add_inheritance_dependency(self, type_: TypeRef) -> None:
        """Record that the type inherits from ``type_``."""
        self.dependencies.append(Dependency(DependencyKind.INHERITANCE, "", type_))

    def add_field_dependency(self, name: str, type_: TypeRef) -> None:
        """Record that the type holds a field ``name`` of type ``type_``."""
        self.dependencies.append(Dependency(DependencyKind.FIELD, name, type_))

    def __str__(self) -> str:
        return "[" + _SEPARATOR.join(str(dep) for dep in self.dependencies) + "]"

    @classmethod
    def parse(cls, data: str, find_type: TypeFinder) -> DependenciesResult:
        """Read a bracketed dependency list; raise ValueError if invalid."""
        if not (data.startswith("[") and data.endswith("]") and len(data) >= 2):
            raise ValueError(f"not a bracketed dependency list: {data!r}")
        result = cls()
        for component in data[1:-1].split(_SEPARATOR):
            if component:
                result.dependencies.append(Dependency.parse(component, find_type))
        return result


class SendableKind(str, Enum):
    """Whether a type is Sendable."""

    UNKNOWN = "unknown"
    UNAVAILABLE = "unavailable"
    AVAILABLE = "available"

    def __str__(self) -> str:
        return self.value


@dataclass
class SendableResult:
    """A sendability kind, with the dependencies that block it when unavailable."""

    kind: SendableKind = SendableKind.UNKNOWN
    unavailable_dependencies: DependenciesResult = field(
        default_factory=DependenciesResult
    )

    def is_available(self) -> bool:
        """True when the type is Sendable."""
        return self.kind is SendableKind.AVAILABLE

    def __str__(self) -> str:
        if self.kind is SendableKind.UNAVAILABLE:
            return f"{self.kind.value} {self.unavailable_dependencies}"
        return self.kind.value

    @classmethod
    def parse(cls, data: str, find_type: TypeFinder) -> SendableResult:
        """Read a result from its serialized form; raise ValueError if invalid."""
        for kind in SendableKind:
            if str(cls(kind)) == data:
                return cls(kind)
        prefix = f"{SendableKind.UNAVAILABLE.value} "
        if data.startswith(prefix):
            deps = DependenciesResult.parse(data[len(prefix):], find_type)
            return cls(SendableKind.UNAVAILABLE, deps)
        raise ValueError(f"not a valid sendable result: {data!r}")