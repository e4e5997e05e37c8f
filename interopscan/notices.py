"""Result of the pass that finds notice subclasses."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NoticeSubclassesResult:
    """Marker recorded for each notice subclass found."""

    def __str__(self) -> str:
        return "."

    @classmethod
    def parse(cls, data: str) -> NoticeSubclassesResult:
        """Return a marker; the serialized text carries no information."""
        return cls()