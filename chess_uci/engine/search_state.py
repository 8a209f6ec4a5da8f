"""
Search state aggregation.

UCI reports a search as a flat stream of ``info`` lines. No single line
carries the full picture: with MultiPV several variations are interleaved,
and engines mix full variation lines with statistics-only progress lines.
SearchState folds that stream into one list of principal variations that
can be read at any time, mid-search or after bestmove.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from chess_uci.protocol.parser import SearchInfo, SearchResult
from chess_uci.protocol.score import Score


@dataclass
class Pv:
    """
    Latest known state of one principal variation.

    Attributes:
        score: Evaluation of the line
        depth: Depth the line was reported at
        moves: Moves of the line (UCI tokens)
        time_ms: Search time when last updated
        nodes: Nodes searched when last updated
    """
    score: Optional[Score] = None
    depth: Optional[int] = None
    moves: List[str] = field(default_factory=list)
    time_ms: Optional[int] = None
    nodes: Optional[int] = None


class SearchState:
    """Principal variations and result of the current search."""

    def __init__(self):
        self.pvs: List[Pv] = []
        self.result = SearchResult()

    @property
    def best(self) -> Optional[Pv]:
        return self.pvs[0] if self.pvs else None

    def on_go_start(self):
        self.pvs = []
        self.result = SearchResult()

    def on_info(self, info: SearchInfo):
        """
        Fold one info record into the variation it belongs to.

        Score and moves are only applied together so a fresh score is never
        paired with a stale line. Depth, time and nodes are applied whenever
        present.
        """
        index = max(0, (info.multipv or 1) - 1)
        while len(self.pvs) < index + 1:
            self.pvs.append(Pv())

        pv = self.pvs[index]
        if info.score is not None and info.pv is not None:
            pv.score = info.score
            pv.moves = list(info.pv)

        if info.depth is not None:
            pv.depth = info.depth
        if info.time_ms is not None:
            pv.time_ms = info.time_ms
        if info.nodes is not None:
            pv.nodes = info.nodes

    def on_bestmove(self, result: SearchResult):
        self.result = result
