"""
Unit Tests for Search State Aggregation

Tests for folding info records into per-MultiPV principal variations.
"""

import pytest

from chess_uci.engine.search_state import Pv, SearchState
from chess_uci.protocol.parser import SearchResult, parse_info
from chess_uci.protocol.score import Score


@pytest.fixture
def state():
    state = SearchState()
    state.on_go_start()
    return state


class TestOnInfo:
    """Tests for SearchState.on_info()."""

    def test_second_variation(self, state):
        """multipv 2 lands at index 1; index 0 stays at defaults."""
        state.on_info(parse_info(
            "info depth 12 seldepth 18 multipv 2 score cp -35 nodes 500000 nps 900000 pv e2e4 e7e5"
        ))

        assert len(state.pvs) == 2
        pv = state.pvs[1]
        assert pv.depth == 12
        assert pv.score.ordered_value == -35
        assert pv.moves == ["e2e4", "e7e5"]
        assert pv.nodes == 500000
        assert state.pvs[0] == Pv()

    def test_no_multipv_means_first(self, state):
        state.on_info(parse_info("info depth 1 score cp 20 pv e2e4"))

        assert len(state.pvs) == 1
        assert state.best.score.display == "0.2"

    def test_multipv_zero_is_clamped(self, state):
        state.on_info(parse_info("info multipv 0 depth 3"))

        assert len(state.pvs) == 1
        assert state.pvs[0].depth == 3

    def test_score_without_pv_is_not_applied(self, state):
        """Score and moves are only updated together."""
        state.on_info(parse_info("info depth 5 score cp 40 pv d2d4"))
        state.on_info(parse_info("info depth 6 score cp 99 nodes 1000"))

        pv = state.best
        assert pv.score == Score.centipawns(40)
        assert pv.moves == ["d2d4"]
        assert pv.depth == 6
        assert pv.nodes == 1000

    def test_pv_without_score_is_not_applied(self, state):
        state.on_info(parse_info("info depth 5 score cp 40 pv d2d4"))
        state.on_info(parse_info("info depth 7 time 120 pv g1f3 g8f6"))

        pv = state.best
        assert pv.moves == ["d2d4"]
        assert pv.depth == 7
        assert pv.time_ms == 120

    def test_statistics_update_independently(self, state):
        state.on_info(parse_info("info depth 8 time 50 nodes 10 score cp 12 pv e2e4"))
        state.on_info(parse_info("info nodes 5000"))
        state.on_info(parse_info("info time 900"))

        pv = state.best
        assert pv.depth == 8
        assert pv.nodes == 5000
        assert pv.time_ms == 900

    def test_later_lines_overwrite(self, state):
        state.on_info(parse_info("info depth 1 score cp 10 pv e2e4"))
        state.on_info(parse_info("info depth 2 score mate 3 pv d1h5 g8f6 h5f7"))

        assert state.best.score.display == "#3"
        assert state.best.moves == ["d1h5", "g8f6", "h5f7"]

    def test_interleaved_variations(self, state):
        for line in [
            "info depth 10 multipv 1 score cp 30 pv e2e4",
            "info depth 10 multipv 2 score cp 20 pv d2d4",
            "info depth 10 multipv 3 score cp 10 pv c2c4",
            "info depth 11 multipv 1 score cp 35 pv e2e4 e7e5",
            "info depth 11 multipv 2 score cp 15 pv d2d4 d7d5",
        ]:
            state.on_info(parse_info(line))

        assert [pv.moves[0] for pv in state.pvs] == ["e2e4", "d2d4", "c2c4"]
        assert [pv.depth for pv in state.pvs] == [11, 11, 10]

    def test_out_of_order_gap_grows_list(self, state):
        """A gap in multipv indices is filled with default entries."""
        state.on_info(parse_info("info depth 4 multipv 5 score cp 1 pv a2a3"))

        assert len(state.pvs) == 5
        assert all(pv == Pv() for pv in state.pvs[:4])
        assert state.pvs[4].moves == ["a2a3"]

    def test_length_is_highest_multipv_seen(self, state):
        for multipv in [1, 3, 2, 3, 1]:
            state.on_info(parse_info(f"info depth 2 multipv {multipv} score cp 0 pv e2e4"))
        state.on_bestmove(SearchResult("e2e4"))

        assert len(state.pvs) == 3


class TestLifecycle:
    """Tests for go start and bestmove handling."""

    def test_go_start_resets(self, state):
        state.on_info(parse_info("info depth 3 score cp 1 pv e2e4"))
        state.on_bestmove(SearchResult("e2e4", "e7e5"))

        state.on_go_start()

        assert state.pvs == []
        assert state.best is None
        assert state.result == SearchResult()

    def test_bestmove_keeps_pvs(self, state):
        state.on_info(parse_info("info depth 9 score cp 44 pv g1f3"))

        state.on_bestmove(SearchResult("g1f3"))

        assert state.result.bestmove == "g1f3"
        assert state.best.depth == 9
        assert state.best.moves == ["g1f3"]
