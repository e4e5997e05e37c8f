"""Members of the value type names table, collected for generated accessors."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

_SEPARATOR = ",, "
VALUE_TYPE_NAME_SPELLING = "SdfValueTypeName"


@dataclass
class ValueTypeNamesMembersResult:
    """The names of the table's value type name members, in declaration order."""

    names: list[str] = field(default_factory=list)

    def append(self, name: str) -> None:
        """Add a member name."""
        self.names.append(name)

    def __str__(self) -> str:
        return "[" + _SEPARATOR.join(self.names) + "]"

    @classmethod
    def parse(cls, data: str) -> ValueTypeNamesMembersResult:
        """Read a bracketed name list; raise ValueError if it is not bracketed."""
        if not (data.startswith("[") and data.endswith("]") and len(data) >= 2):
            raise ValueError(f"not a bracketed name list: {data!r}")
        inner = data[1:-1]
        return cls(inner.split(_SEPARATOR) if inner else [])


def collect_value_type_names(
    fields: Iterable[tuple[str, str]],
) -> ValueTypeNamesMembersResult:
    """Collect the fields, given as (name, type spelling), that are value type names."""
    result = ValueTypeNamesMembersResult()
    for name, spelling in fields:
        if spelling == VALUE_TYPE_NAME_SPELLING:
            result.append(name)
    return result