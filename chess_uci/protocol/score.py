"""
Score Normalization

Engines report evaluations either in centipawns or as a distance to mate.
To sort and compare both kinds with one ordering, every score is mapped to
a single integer ``ordered_value``:

    mated in 1  <  mated in 2  <  ... any centipawn value ...  <  mate in 2  <  mate in 1

Convention:
    - Values are from the point of view of the side to move
    - ``mate N`` with N > 0: side to move delivers mate in N
    - ``mate N`` with N < 0: side to move is mated in N
    - MAX_ORDER / MIN_ORDER are the native machine-word extremes

References:
    - UCI info score: https://www.chessprogramming.org/UCI#info
"""

import sys
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Optional, Tuple


MAX_ORDER = sys.maxsize
MIN_ORDER = -sys.maxsize - 1


class ScoreKind(Enum):
    """Kind of evaluation, valued by its UCI wire token."""
    CENTIPAWN = "cp"
    MATE = "mate"


def normalize(kind: ScoreKind, raw_value: int) -> Tuple[int, str]:
    """
    Convert a raw engine score into an ordered value and a display string.

    Args:
        kind: Centipawn or mate
        raw_value: Value as sent by the engine

    Returns:
        (ordered_value, display)

    Example:
        >>> normalize(ScoreKind.CENTIPAWN, -150)
        (-150, '-1.5')
        >>> normalize(ScoreKind.MATE, -3)[1]
        '#-3'
    """
    if kind is ScoreKind.MATE:
        if raw_value >= 0:
            ordered = MAX_ORDER - raw_value
        else:
            ordered = MIN_ORDER - raw_value
        return ordered, f"#{raw_value}"

    return raw_value, _pawns(raw_value)


def _pawns(centipawns: int) -> str:
    """Exact decimal pawns with trailing zeros dropped: 100 -> "1", -35 -> "-0.35"."""
    sign = "-" if centipawns < 0 else ""
    whole, rest = divmod(abs(centipawns), 100)
    if rest == 0:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{rest:02d}".rstrip("0")


@total_ordering
@dataclass(frozen=True)
class Score:
    """
    Normalized engine evaluation.

    Attributes:
        kind: CENTIPAWN or MATE
        raw_value: Value as sent by the engine
        ordered_value: Total-order key comparable across kinds
        display: "#N" for mate scores, pawns as a decimal string otherwise

    Scores compare by ordered_value only.
    """
    kind: ScoreKind
    raw_value: int
    ordered_value: int
    display: str

    @classmethod
    def centipawns(cls, value: int) -> "Score":
        ordered, display = normalize(ScoreKind.CENTIPAWN, value)
        return cls(ScoreKind.CENTIPAWN, value, ordered, display)

    @classmethod
    def mate(cls, moves: int) -> "Score":
        ordered, display = normalize(ScoreKind.MATE, moves)
        return cls(ScoreKind.MATE, moves, ordered, display)

    @classmethod
    def lower_bound(cls) -> "Score":
        """Saturated bound: at or below the lowest representable value."""
        return cls.centipawns(MIN_ORDER)

    @classmethod
    def upper_bound(cls) -> "Score":
        """Saturated bound: at or above the highest representable value."""
        return cls.centipawns(MAX_ORDER)

    @classmethod
    def from_wire(cls, kind: str, value: int) -> Optional["Score"]:
        """
        Build a score from the two tokens following ``score`` on an info line.

        Args:
            kind: "cp", "mate", "lowerbound" or "upperbound"
            value: Integer following the kind (ignored for bounds)

        Returns:
            Score, or None for an unknown kind
        """
        if kind == "lowerbound":
            return cls.lower_bound()
        if kind == "upperbound":
            return cls.upper_bound()
        if kind == ScoreKind.CENTIPAWN.value:
            return cls.centipawns(value)
        if kind == ScoreKind.MATE.value:
            return cls.mate(value)
        return None

    @property
    def is_mate(self) -> bool:
        return self.kind is ScoreKind.MATE

    @property
    def mate_in(self) -> Optional[int]:
        """Signed mate distance, None for centipawn scores."""
        return self.raw_value if self.is_mate else None

    def __lt__(self, other):
        if not isinstance(other, Score):
            return NotImplemented
        return self.ordered_value < other.ordered_value

    def __eq__(self, other):
        if not isinstance(other, Score):
            return NotImplemented
        return self.ordered_value == other.ordered_value

    def __hash__(self):
        return hash(self.ordered_value)

    def __str__(self) -> str:
        return self.display
