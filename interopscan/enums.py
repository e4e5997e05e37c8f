"""Cases discovered for a C++ enumeration."""

from __future__ import annotations

from dataclasses import dataclass, field

_SEPARATOR = ",, "
_SCOPED = "scoped"
_UNSCOPED = "unscoped"


class EnumCaseConflictError(ValueError):
    """Raised when a case is redeclared with a different value."""

    def __init__(self, name: str, old: int, new: int) -> None:
        super().__init__(
            f"case {name!r} redeclared with a different value: {old} -> {new}"
        )
        self.name = name
        self.old = old
        self.new = new


@dataclass
class EnumResult:
    """Whether an enum is scoped, and its cases in declaration order."""

    is_scoped: bool
    cases: dict[str, int] = field(default_factory=dict)

    def add_case(self, name: str, value: int) -> None:
        """Add a case; a repeat with the same value is ignored."""
        existing = self.cases.get(name)
        if existing is not None:
            if existing != value:
                raise EnumCaseConflictError(name, existing, value)
            return
        self.cases[name] = value

    def __str__(self) -> str:
        head = _SCOPED if self.is_scoped else _UNSCOPED
        body = _SEPARATOR.join(
            f"{name}{_SEPARATOR}{value}" for name, value in self.cases.items()
        )
        return f"[{head}{_SEPARATOR}{body}]"

    @classmethod
    def parse(cls, data: str) -> EnumResult:
        """Read a result from its serialized form; raise ValueError if invalid."""
        if not (data.startswith("[") and data.endswith("]") and len(data) >= 2):
            raise ValueError(f"not a bracketed enum description: {data!r}")
        components = data[1:-1].split(_SEPARATOR)
        if len(components) % 2 == 0:
            raise ValueError(f"enum description has an even number of parts: {data!r}")
        head, *rest = components
        if head not in (_SCOPED, _UNSCOPED):
            raise ValueError(f"enum description lacks scoping: {data!r}")
        result = cls(head == _SCOPED)
        for name, value in zip(rest[::2], rest[1::2]):
            result.add_case(name, int(value))
        return result