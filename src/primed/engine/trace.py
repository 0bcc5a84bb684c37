"""Construction trace — type names on the current recursive call path.

INVARIANT: A trace is never mutated. Each descent gets its own extended
copy, so sibling branches never see each other's entries.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Trace:
    names: tuple[str, ...] = ()

    def extend(self, name: str) -> Trace:
        return Trace(self.names + (name,))

    @property
    def depth(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __str__(self) -> str:
        return " -> ".join(self.names) or "<root>"
