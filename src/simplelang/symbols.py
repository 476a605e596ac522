"""
SimpleLang Variable Table
=========================

Maps each declared variable name to a memory offset. Offsets are handed
out densely in declaration order, starting at 0, and the table holds at
most VARIABLE_CAPACITY entries (one per letter of the alphabet on the
target machine's variable page).

The table is populated by the parser as declarations are read and
consulted by the code generator to resolve identifiers. It lives for a
single compilation.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from simplelang.errors import (
    DuplicateDeclarationError,
    SourceLocation,
    TableOverflowError,
)

logger = logging.getLogger(__name__)

VARIABLE_CAPACITY = 26


@dataclass(frozen=True)
class VariableEntry:
    """
    A registered variable.

    Attributes:
        name: Variable name
        offset: Memory slot index (0-based)
        location: Where the declaration appeared, if known
    """
    name: str
    offset: int
    location: Optional[SourceLocation] = None


class VariableTable:
    """
    Insertion-ordered, capacity-bounded variable table.

    By default a name may be declared once. With allow_redeclaration a
    second declaration claims a fresh offset and shadows the first for
    every later lookup.

    Example:
        table = VariableTable()
        table.register("x")     # -> 0
        table.register("y")     # -> 1
        table.lookup("y")       # -> 1
        table.lookup("z")       # -> None
    """

    def __init__(self, capacity: int = VARIABLE_CAPACITY, allow_redeclaration: bool = False):
        self.capacity = capacity
        self.allow_redeclaration = allow_redeclaration
        self._entries: list[VariableEntry] = []
        self._latest: dict[str, VariableEntry] = {}

    def register(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> int:
        """
        Append a variable at the next free offset.

        Args:
            name: Variable name
            location: Declaration location (for diagnostics)
            source_line: Declaration source text (for diagnostics)

        Returns:
            The offset assigned to the variable

        Raises:
            DuplicateDeclarationError: If name is already declared and
                redeclaration is not allowed
            TableOverflowError: If the table is full
        """
        previous = self._latest.get(name)
        if previous is not None and not self.allow_redeclaration:
            raise DuplicateDeclarationError(
                name,
                location=location,
                original_location=previous.location,
                source_line=source_line,
            )

        if self.is_full:
            raise TableOverflowError(
                name,
                self.capacity,
                location=location,
                source_line=source_line,
            )

        entry = VariableEntry(name=name, offset=len(self._entries), location=location)
        self._entries.append(entry)
        self._latest[name] = entry

        if previous is not None:
            logger.debug(f"'{name}' redeclared at offset {entry.offset}, shadowing offset {previous.offset}")
        else:
            logger.debug(f"registered '{name}' at offset {entry.offset}")

        return entry.offset

    def lookup(self, name: str) -> Optional[int]:
        """Return the offset of the most recent registration of name, or None."""
        entry = self._latest.get(name)
        return entry.offset if entry is not None else None

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.capacity

    def entries(self) -> list[tuple[str, int]]:
        """Return (name, offset) pairs in offset order."""
        return [(entry.name, entry.offset) for entry in self._entries]

    def similar_names(self, name: str) -> list[str]:
        """
        Find declared names that look like a typo of name.

        Uses a simple edit distance heuristic and returns at most three
        suggestions, in declaration order.
        """
        name_lower = name.lower()
        similar = []

        for candidate in self._latest:
            candidate_lower = candidate.lower()
            if (
                candidate_lower == name_lower or
                abs(len(candidate) - len(name)) <= 1 and
                _edit_distance(name_lower, candidate_lower) <= 2
            ):
                similar.append(candidate)

        return similar[:3]

    def __contains__(self, name: str) -> bool:
        return name in self._latest

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return (entry.name for entry in self._entries)

    def __repr__(self) -> str:
        return f"VariableTable({len(self)}/{self.capacity})"


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min((
                    distances[j],
                    distances[j + 1],
                    new_distances[-1]
                )))
        distances = new_distances

    return distances[-1]
