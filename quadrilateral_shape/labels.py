"""
Labels Module
=============

Fixed identifiers for the four-vertex figure.

Design:
- Closed `str` enums (serializable as-is, compared by identity)
- Cyclic order A -> B -> C -> D -> A is the only adjacency
- Pairs are unordered values: VertexPair(A, B) == VertexPair(B, A)

Labels identify vertices and sides; they never own them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class VertexLabel(str, Enum):
    """Identifier of one of the four vertices."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @property
    def ordinal(self) -> int:
        return VERTEX_ORDER.index(self)

    @property
    def next(self) -> "VertexLabel":
        return VERTEX_ORDER[(self.ordinal + 1) % 4]

    @property
    def previous(self) -> "VertexLabel":
        return VERTEX_ORDER[(self.ordinal - 1) % 4]

    @property
    def opposite(self) -> "VertexLabel":
        return VERTEX_ORDER[(self.ordinal + 2) % 4]

    @property
    def sides(self) -> Tuple["SideLabel", "SideLabel"]:
        """The two sides meeting at this vertex (incoming, outgoing)."""
        return (SideLabel.between(self.previous, self), SideLabel.between(self, self.next))

    @classmethod
    def parse(cls, value: str) -> "VertexLabel":
        """
        Parse a label from user or wire input.

        Raises:
            ValueError: If value is not one of A, B, C, D
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(
                f"Invalid vertex label: {value!r}. Must be one of "
                f"{[label.value for label in cls]}"
            )


class SideLabel(str, Enum):
    """Identifier of one of the four sides, named by its endpoints."""

    AB = "AB"
    BC = "BC"
    CD = "CD"
    DA = "DA"

    @property
    def ordinal(self) -> int:
        return SIDE_ORDER.index(self)

    @property
    def vertices(self) -> Tuple[VertexLabel, VertexLabel]:
        first = VERTEX_ORDER[self.ordinal]
        return (first, first.next)

    @property
    def opposite(self) -> "SideLabel":
        return SIDE_ORDER[(self.ordinal + 2) % 4]

    @property
    def adjacent(self) -> Tuple["SideLabel", "SideLabel"]:
        return (SIDE_ORDER[(self.ordinal - 1) % 4], SIDE_ORDER[(self.ordinal + 1) % 4])

    @classmethod
    def between(cls, first: VertexLabel, second: VertexLabel) -> "SideLabel":
        """
        Side joining two adjacent vertices (order-independent).

        Raises:
            ValueError: If the vertices are not adjacent
        """
        if second == first.next:
            return SIDE_ORDER[first.ordinal]
        if first == second.next:
            return SIDE_ORDER[second.ordinal]
        raise ValueError(f"Vertices {first.value} and {second.value} are not adjacent")


class NamedQuadrilateral(str, Enum):
    """Shape categories, most specific first."""

    SQUARE = "square"
    RECTANGLE = "rectangle"
    RHOMBUS = "rhombus"
    PARALLELOGRAM = "parallelogram"
    KITE = "kite"
    ISOSCELES_TRAPEZOID = "isosceles_trapezoid"
    TRAPEZOID = "trapezoid"
    CONCAVE = "concave"
    GENERIC = "generic"


VERTEX_ORDER: Tuple[VertexLabel, ...] = (
    VertexLabel.A, VertexLabel.B, VertexLabel.C, VertexLabel.D
)
SIDE_ORDER: Tuple[SideLabel, ...] = (
    SideLabel.AB, SideLabel.BC, SideLabel.CD, SideLabel.DA
)


@dataclass(frozen=True, eq=False)
class VertexPair:
    """
    Unordered pair of vertex labels.

    Example:
        >>> VertexPair(VertexLabel.A, VertexLabel.C) == VertexPair(VertexLabel.C, VertexLabel.A)
        True
        >>> VertexPair(VertexLabel.A, VertexLabel.C).is_opposite
        True
    """

    first: VertexLabel
    second: VertexLabel

    def __post_init__(self):
        """Validate pair."""
        if self.first == self.second:
            raise ValueError(f"VertexPair requires two distinct vertices, got {self.first.value} twice")

    @property
    def is_adjacent(self) -> bool:
        return self.second in (self.first.next, self.first.previous)

    @property
    def is_opposite(self) -> bool:
        return self.second == self.first.opposite

    def __eq__(self, other) -> bool:
        if not isinstance(other, VertexPair):
            return NotImplemented
        return {self.first, self.second} == {other.first, other.second}

    def __hash__(self) -> int:
        return hash(frozenset((self.first, self.second)))


@dataclass(frozen=True, eq=False)
class SidePair:
    """Unordered pair of side labels."""

    first: SideLabel
    second: SideLabel

    def __post_init__(self):
        """Validate pair."""
        if self.first == self.second:
            raise ValueError(f"SidePair requires two distinct sides, got {self.first.value} twice")

    @property
    def is_adjacent(self) -> bool:
        return self.second in self.first.adjacent

    @property
    def is_opposite(self) -> bool:
        return self.second == self.first.opposite

    def __eq__(self, other) -> bool:
        if not isinstance(other, SidePair):
            return NotImplemented
        return {self.first, self.second} == {other.first, other.second}

    def __hash__(self) -> int:
        return hash(frozenset((self.first, self.second)))


ADJACENT_VERTEX_PAIRS: Tuple[VertexPair, ...] = tuple(
    VertexPair(label, label.next) for label in VERTEX_ORDER
)
OPPOSITE_VERTEX_PAIRS: Tuple[VertexPair, ...] = (
    VertexPair(VertexLabel.A, VertexLabel.C),
    VertexPair(VertexLabel.B, VertexLabel.D),
)
OPPOSITE_SIDE_PAIRS: Tuple[SidePair, ...] = (
    SidePair(SideLabel.AB, SideLabel.CD),
    SidePair(SideLabel.BC, SideLabel.DA),
)
