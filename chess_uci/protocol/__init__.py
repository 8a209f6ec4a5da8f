"""
UCI Wire Protocol

Pure text handling, no process I/O:
    - parser: engine output lines -> typed records
    - score: centipawn/mate normalization
    - commands: outbound command lines

Inbound lines consumed:
    id <key> <value>
    option name <name> type <type> [default ..] [min ..] [max ..] [var ..]*
    uciok / readyok
    info ...
    bestmove <move> [ponder <move>]
"""

from chess_uci.protocol.commands import (
    ByDepth,
    SearchParameters,
    go_command,
    position_command,
    resolve_limits,
    setoption_command,
)
from chess_uci.protocol.parser import (
    EngineId,
    OptionSpec,
    Reply,
    SearchInfo,
    SearchResult,
    parse_line,
)
from chess_uci.protocol.score import Score, ScoreKind, normalize

__all__ = [
    'ByDepth',
    'SearchParameters',
    'go_command',
    'position_command',
    'resolve_limits',
    'setoption_command',
    'EngineId',
    'OptionSpec',
    'Reply',
    'SearchInfo',
    'SearchResult',
    'parse_line',
    'Score',
    'ScoreKind',
    'normalize',
]
