"""
UCI Output Parser

Turns one line of engine output into a typed record. Engine output is a
loosely specified wire format: fields come in any order, engines add their
own extensions, and some lines are simply garbage. Every extractor here is
therefore total: it either finds its field or reports it absent, and one
bad field never spoils the rest of the line.

Recognized lines:
    id name Stockfish 16            -> EngineId
    option name Hash type spin ...  -> OptionSpec
    uciok / readyok / quit          -> Reply
    info depth 12 score cp 35 ...   -> SearchInfo
    bestmove e2e4 ponder e7e5       -> SearchResult

Anything else parses to None.

References:
    - UCI Protocol: https://www.chessprogramming.org/UCI
"""

import re
from dataclasses import dataclass, fields as dataclass_fields
from enum import Enum
from typing import Dict, List, Optional, Union

import chess

from chess_uci.protocol.score import Score


class Reply(Enum):
    """
    Terminal replies the driver can wait for.

    QUIT has no protocol line of its own in practice: it is normally
    cleared by the process exiting.
    """
    UCIOK = "uciok"
    READYOK = "readyok"
    BESTMOVE = "bestmove"
    QUIT = "quit"

    def __str__(self) -> str:
        return self.value


@dataclass
class SearchInfo:
    """
    Fields of a single ``info`` line.

    Every field is optional; only those present on the line are set.
    ``time_ms`` is the wire field ``time`` and ``string`` is the free-text
    ``info string`` tail.
    """
    depth: Optional[int] = None
    seldepth: Optional[int] = None
    time_ms: Optional[int] = None
    nodes: Optional[int] = None
    multipv: Optional[int] = None
    currmove: Optional[str] = None
    currmovenumber: Optional[int] = None
    hashfull: Optional[int] = None
    nps: Optional[int] = None
    tbhits: Optional[int] = None
    sbhits: Optional[int] = None
    cpuload: Optional[int] = None
    pv: Optional[List[str]] = None
    score: Optional[Score] = None
    string: Optional[str] = None

    def fields(self) -> Dict[str, object]:
        """Return only the fields present on the line."""
        return {
            f.name: getattr(self, f.name)
            for f in dataclass_fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class SearchResult:
    """
    Outcome of one search.

    Attributes:
        bestmove: Move chosen by the engine (None until bestmove arrives)
        ponder: Expected reply the engine would like to ponder on
    """
    bestmove: Optional[str] = None
    ponder: Optional[str] = None

    @property
    def move(self) -> Optional[chess.Move]:
        """bestmove as a python-chess Move (None if absent or not a move)."""
        return _to_move(self.bestmove)

    @property
    def ponder_move(self) -> Optional[chess.Move]:
        return _to_move(self.ponder)


@dataclass(frozen=True)
class EngineId:
    key: str
    value: str


OPTION_TYPES = ("check", "spin", "combo", "button", "string")


@dataclass
class OptionSpec:
    """
    One engine-declared option.

    Attributes:
        name: Option name (may contain spaces, e.g. "Skill Level")
        type: check, spin, combo, button or string
        default: Default value as text (None if not declared)
        vars: Allowed values for combo options (None if no var given)
        min: Lower bound for spin options
        max: Upper bound for spin options
    """
    name: str
    type: str
    default: Optional[str] = None
    vars: Optional[List[str]] = None
    min: Optional[int] = None
    max: Optional[int] = None

    @property
    def is_button(self) -> bool:
        return self.type == "button"


ParsedLine = Union[SearchInfo, SearchResult, EngineId, OptionSpec, Reply]


def _to_move(token: Optional[str]) -> Optional[chess.Move]:
    if not token:
        return None
    try:
        move = chess.Move.from_uci(token)
    except ValueError:
        return None
    return move if move else None


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------

# wire name -> SearchInfo attribute
_INT_FIELDS = {
    "depth": "depth",
    "seldepth": "seldepth",
    "time": "time_ms",
    "nodes": "nodes",
    "multipv": "multipv",
    "currmovenumber": "currmovenumber",
    "hashfull": "hashfull",
    "nps": "nps",
    "tbhits": "tbhits",
    "sbhits": "sbhits",
    "cpuload": "cpuload",
}

_INT_PATTERNS = {
    name: re.compile(rf"(?:^|\s){name}\s(\d+)(?=\s|$)")
    for name in _INT_FIELDS
}

_SCORE_RE = re.compile(r"(?:^|\s)score\s(cp|mate|lowerbound|upperbound)(?:\s([-+]?\d+))?(?=\s|$)")
_CURRMOVE_RE = re.compile(r"(?:^|\s)currmove\s(\S+)")
# pv and string swallow the rest of the line, whichever comes first
_TAIL_RE = re.compile(r"\s(pv|string)(?=\s|$)")


def _extract_int(head: str, name: str) -> Optional[int]:
    match = _INT_PATTERNS[name].search(head)
    return int(match.group(1)) if match else None


def _extract_score(head: str) -> Optional[Score]:
    match = _SCORE_RE.search(head)
    if match is None:
        return None
    kind, value = match.groups()
    if value is None:
        if kind in ("cp", "mate"):
            return None
        value = "0"
    return Score.from_wire(kind, int(value))


def _extract_currmove(head: str) -> Optional[str]:
    match = _CURRMOVE_RE.search(head)
    return match.group(1) if match else None


def parse_info(line: str) -> SearchInfo:
    """
    Parse an ``info`` line.

    Args:
        line: Full line including the leading "info" token

    Returns:
        SearchInfo with the fields that could be extracted

    Example:
        >>> info = parse_info("info depth 12 multipv 2 score cp -35 pv e2e4 e7e5")
        >>> info.depth, info.multipv, info.score.display, info.pv
        (12, 2, '-0.35', ['e2e4', 'e7e5'])
    """
    info = SearchInfo()

    head, keyword, tail = line, None, ""
    match = _TAIL_RE.search(line)
    if match:
        head = line[:match.start()]
        keyword = match.group(1)
        tail = line[match.end() + 1:]

    for name, attr in _INT_FIELDS.items():
        setattr(info, attr, _extract_int(head, name))

    info.score = _extract_score(head)
    info.currmove = _extract_currmove(head)

    if keyword == "pv":
        moves = tail.split()
        if moves:
            info.pv = moves
    elif keyword == "string" and tail:
        info.string = tail

    return info


# ---------------------------------------------------------------------------
# bestmove / id / option
# ---------------------------------------------------------------------------

_BESTMOVE_RE = re.compile(r"^bestmove\s+(\S+)(?:\s+ponder\s+(\S+))?")
_ID_RE = re.compile(r"^id\s+(\S+)\s+(.+)$")
_OPTION_RE = re.compile(r"^option\s+name\s+(.+)\s+type\s+(\S+)(.*)$")
_OPTION_KEYWORDS = ("default", "min", "max", "var")


def parse_bestmove(line: str) -> Optional[SearchResult]:
    match = _BESTMOVE_RE.match(line)
    if match is None:
        return None
    return SearchResult(bestmove=match.group(1), ponder=match.group(2))


def parse_id(line: str) -> Optional[EngineId]:
    match = _ID_RE.match(line)
    if match is None:
        return None
    return EngineId(key=match.group(1), value=match.group(2))


def _parse_bound(value: Optional[str]) -> Optional[int]:
    if value is None or not re.fullmatch(r"[-+]?\d+", value):
        return None
    return int(value)


def parse_option(line: str) -> Optional[OptionSpec]:
    """
    Parse an ``option`` line.

    The name is everything between ``name`` and the last ``type`` keyword.
    After the type, ``default``, ``min``, ``max`` and ``var`` each take the
    words up to the next of these keywords. ``var`` may repeat.

    Args:
        line: Full line including the leading "option" token

    Returns:
        OptionSpec, or None if the line has no name/type

    Example:
        >>> spec = parse_option("option name Style type combo default Normal var Solid var Normal")
        >>> spec.name, spec.default, spec.vars
        ('Style', 'Normal', ['Solid', 'Normal'])
    """
    match = _OPTION_RE.match(line)
    if match is None:
        return None

    name, option_type, rest = match.groups()
    values: Dict[str, str] = {}
    variants: List[str] = []

    current = None
    words: List[str] = []
    for token in rest.split() + [None]:
        if token is None or token in _OPTION_KEYWORDS:
            if current == "var":
                if words:
                    variants.append(" ".join(words))
            elif current is not None and current not in values and words:
                values[current] = " ".join(words)
            current, words = token, []
        else:
            words.append(token)

    return OptionSpec(
        name=name,
        type=option_type,
        default=values.get("default"),
        vars=variants or None,
        min=_parse_bound(values.get("min")),
        max=_parse_bound(values.get("max")),
    )


def parse_line(line: str) -> Optional[ParsedLine]:
    """
    Classify one line of engine output and extract its record.

    Args:
        line: One line, terminator stripped

    Returns:
        SearchInfo, SearchResult, EngineId, OptionSpec, Reply, or None for
        lines the driver does not use
    """
    token = line.split(None, 1)[0] if line.strip() else ""

    if token == "info":
        return parse_info(line)
    if token == "bestmove":
        return parse_bestmove(line)
    if token == "id":
        return parse_id(line)
    if token == "option":
        return parse_option(line)
    if token == Reply.UCIOK.value:
        return Reply.UCIOK
    if token == Reply.READYOK.value:
        return Reply.READYOK
    if token == Reply.QUIT.value:
        return Reply.QUIT
    return None
