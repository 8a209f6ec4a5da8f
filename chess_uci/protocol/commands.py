"""
Outbound UCI commands.

Builds the text of the commands the driver sends. Nothing here talks to a
process; the driver owns sending and reply bookkeeping.

Search limits come in two shapes, resolved once at the call boundary:

    ByDepth(12)                            -> go depth 12
    SearchParameters(wtime=60000, ...)     -> go wtime 60000 ...
    SearchParameters()                     -> go infinite
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

import chess


MoveLike = Union[str, chess.Move]


@dataclass(frozen=True)
class ByDepth:
    """Search to a fixed depth in plies."""
    depth: int

    def __post_init__(self):
        if self.depth <= 0:
            raise ValueError(f"depth must be positive, got {self.depth}")


@dataclass
class SearchParameters:
    """
    Parameters of a ``go`` command.

    Times are in milliseconds. Unset (None) or negative numbers are not
    sent; an empty parameter set becomes ``go infinite``.
    """
    searchmoves: List[MoveLike] = field(default_factory=list)
    ponder: bool = False
    wtime: Optional[int] = None
    btime: Optional[int] = None
    winc: Optional[int] = None
    binc: Optional[int] = None
    movestogo: Optional[int] = None
    depth: Optional[int] = None
    nodes: Optional[int] = None
    mate: Optional[int] = None
    movetime: Optional[int] = None


SearchLimits = Union[ByDepth, SearchParameters]

# Emission order of numeric go parameters
_NUMERIC_PARAMS = (
    "wtime",
    "btime",
    "winc",
    "binc",
    "movestogo",
    "depth",
    "nodes",
    "mate",
    "movetime",
)


def resolve_limits(value: Union[None, int, SearchLimits]) -> SearchLimits:
    """
    Resolve the caller's search limit argument into its tagged form.

    Args:
        value: None (infinite), a positive int (depth shorthand),
            ByDepth or SearchParameters

    Returns:
        ByDepth or SearchParameters

    Raises:
        TypeError: For any other kind of value
        ValueError: For a non-positive depth shorthand
    """
    if value is None:
        return SearchParameters()
    if isinstance(value, (ByDepth, SearchParameters)):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return ByDepth(value)
    raise TypeError(
        f"search limits must be None, int, ByDepth or SearchParameters, got {type(value).__name__}"
    )


def move_token(move: MoveLike) -> str:
    return move.uci() if isinstance(move, chess.Move) else str(move)


def go_command(limits: SearchLimits) -> str:
    """
    Build a ``go`` command line.

    Example:
        >>> go_command(ByDepth(5))
        'go depth 5'
        >>> go_command(SearchParameters(searchmoves=["e2e4"], movetime=1000))
        'go searchmoves e2e4 movetime 1000'
    """
    if isinstance(limits, ByDepth):
        return f"go depth {limits.depth}"

    parts = ["go"]
    if limits.searchmoves:
        parts.append("searchmoves")
        parts.extend(move_token(m) for m in limits.searchmoves)
    if limits.ponder:
        parts.append("ponder")
    for name in _NUMERIC_PARAMS:
        value = getattr(limits, name)
        if value is not None and value >= 0:
            parts.append(f"{name} {value}")

    if len(parts) == 1:
        parts.append("infinite")
    return " ".join(parts)


def position_command(fen: Optional[str] = None, moves: Optional[Iterable[MoveLike]] = None) -> str:
    """
    Build a ``position`` command line.

    Args:
        fen: Position in FEN (None or empty = startpos)
        moves: Moves to play from that position

    Example:
        >>> position_command(moves=["e2e4", "e7e5"])
        'position startpos moves e2e4 e7e5'
    """
    command = f"position fen {fen}" if fen else "position startpos"
    tokens = [move_token(m) for m in (moves or [])]
    if tokens:
        command += " moves " + " ".join(tokens)
    return command


def setoption_command(name: str, value: object = None) -> str:
    """Build a ``setoption`` line. Booleans are sent as true/false."""
    if value is None:
        return f"setoption name {name}"
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"setoption name {name} value {value}"
