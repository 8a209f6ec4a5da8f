"""
Unit Tests for Reply Bookkeeping

Tests for:
    - Which commands register a reply
    - Stacking of several outstanding replies
    - Waiting: immediate, woken by another thread, timeout
"""

import threading
import time

import pytest

from chess_uci.engine.replies import COMMAND_REPLIES, ReplyWaiter
from chess_uci.errors import EngineTimeout
from chess_uci.protocol.parser import Reply


@pytest.fixture
def waiter():
    return ReplyWaiter()


class TestExpectations:
    """Tests for expect/clear/settled."""

    def test_command_table(self):
        assert dict(COMMAND_REPLIES) == {
            "uci": Reply.UCIOK,
            "isready": Reply.READYOK,
            "go": Reply.BESTMOVE,
            "stop": Reply.BESTMOVE,
            "quit": Reply.QUIT,
        }

    def test_command_table_is_read_only(self):
        with pytest.raises(TypeError):
            COMMAND_REPLIES["position"] = Reply.READYOK

    @pytest.mark.parametrize("command,tag", [
        ("uci", Reply.UCIOK),
        ("isready", Reply.READYOK),
        ("go depth 10", Reply.BESTMOVE),
        ("go infinite", Reply.BESTMOVE),
        ("stop", Reply.BESTMOVE),
        ("quit", Reply.QUIT),
    ])
    def test_commands_with_reply(self, waiter, command, tag):
        assert waiter.expect_for(command) is tag
        assert waiter.pending == {tag}
        assert not waiter.settled()

    @pytest.mark.parametrize("command", [
        "position startpos moves e2e4",
        "setoption name Hash value 64",
        "ucinewgame",
        "ponderhit",
    ])
    def test_fire_and_forget_commands(self, waiter, command):
        assert waiter.expect_for(command) is None
        assert waiter.settled()

    def test_stacked_expectations(self, waiter):
        """Every outstanding tag must clear before the waiter settles."""
        waiter.expect(Reply.READYOK)
        waiter.expect(Reply.BESTMOVE)

        waiter.clear(Reply.READYOK)
        assert not waiter.settled()

        waiter.clear(Reply.BESTMOVE)
        assert waiter.settled()

    def test_clear_unknown_tag_is_harmless(self, waiter):
        waiter.clear(Reply.UCIOK)

        assert waiter.settled()


class TestWait:
    """Tests for wait()."""

    def test_returns_immediately_when_settled(self, waiter):
        waiter.wait(0.1)

    def test_woken_by_clear_from_other_thread(self, waiter):
        waiter.expect(Reply.READYOK)
        timer = threading.Timer(0.05, waiter.clear, args=(Reply.READYOK,))
        timer.start()

        waiter.wait(2)

        assert waiter.settled()
        timer.join()

    def test_zero_timeout_waits_indefinitely(self, waiter):
        """0 means no budget: the wait outlasts what a short timeout would allow."""
        waiter.expect(Reply.BESTMOVE)
        timer = threading.Timer(0.3, waiter.clear, args=(Reply.BESTMOVE,))
        timer.start()

        start = time.monotonic()
        waiter.wait(0)

        assert time.monotonic() - start >= 0.25
        timer.join()

    def test_timeout_leaves_pending_set(self, waiter):
        """A timed-out wait raises and does not clear anything."""
        waiter.expect(Reply.READYOK)

        start = time.monotonic()
        with pytest.raises(EngineTimeout) as excinfo:
            waiter.wait(1)
        elapsed = time.monotonic() - start

        assert 0.9 <= elapsed < 3.0
        assert excinfo.value.pending == {Reply.READYOK}
        assert Reply.READYOK in waiter.pending

    def test_timeout_is_a_timeout_error(self, waiter):
        waiter.expect(Reply.UCIOK)

        with pytest.raises(TimeoutError):
            waiter.wait(0.05)
