"""
Reply bookkeeping.

Some UCI commands have a terminal reply the caller has to wait for:

    uci     -> uciok
    isready -> readyok
    go      -> bestmove
    stop    -> bestmove
    quit    -> process exit

A reply tag becomes pending the moment its command is sent and is cleared
when the matching line arrives (or, for quit, when the process exits).
Waiting callers block until nothing is pending.
"""

import logging
import threading
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Set

from chess_uci.errors import EngineTimeout
from chess_uci.protocol.parser import Reply

logger = logging.getLogger(__name__)


COMMAND_REPLIES: Mapping[str, Reply] = MappingProxyType({
    "uci": Reply.UCIOK,
    "isready": Reply.READYOK,
    "go": Reply.BESTMOVE,
    "stop": Reply.BESTMOVE,
    "quit": Reply.QUIT,
})


class ReplyWaiter:
    """
    Tracks outstanding replies and lets callers wait for them to clear.

    Lines are delivered on the process reader thread while callers wait on
    their own thread, so the pending set is guarded by a Condition and
    waiters wake as soon as it empties.
    """

    def __init__(self):
        self._pending: Set[Reply] = set()
        self._cond = threading.Condition()

    @property
    def pending(self) -> FrozenSet[Reply]:
        with self._cond:
            return frozenset(self._pending)

    def expect(self, tag: Reply):
        with self._cond:
            self._pending.add(tag)

    def expect_for(self, command: str) -> Optional[Reply]:
        """
        Register the reply a command line will produce, if it has one.

        Args:
            command: Full command line, e.g. "go depth 10"

        Returns:
            The registered tag, or None for fire-and-forget commands
        """
        name = command.split(None, 1)[0] if command.strip() else ""
        tag = COMMAND_REPLIES.get(name)
        if tag is not None:
            self.expect(tag)
        return tag

    def clear(self, tag: Reply):
        with self._cond:
            self._pending.discard(tag)
            if not self._pending:
                self._cond.notify_all()

    def settled(self) -> bool:
        with self._cond:
            return not self._pending

    def wait(self, timeout: Optional[float] = None):
        """
        Block until no reply is pending.

        Args:
            timeout: Seconds to wait; 0 or None waits indefinitely

        Raises:
            EngineTimeout: If replies are still pending after timeout.
                The pending set is left as it is.
        """
        with self._cond:
            if not timeout:
                self._cond.wait_for(lambda: not self._pending)
                return
            if not self._cond.wait_for(lambda: not self._pending, timeout=timeout):
                pending = frozenset(self._pending)
                logger.warning(f"Timed out after {timeout}s waiting for {sorted(map(str, pending))}")
                raise EngineTimeout(pending, timeout)
