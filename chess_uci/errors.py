"""
Exceptions raised by the UCI driver.

Engine output is never a source of exceptions: malformed lines and fields
are dropped while parsing. Only process-level failures and synchronization
failures reach the caller.
"""

from typing import FrozenSet, Iterable


class UCIError(Exception):
    """Base class for all driver errors."""


class EngineStartupError(UCIError):
    """The engine process could not be launched or exited immediately."""


class EngineTimeout(UCIError, TimeoutError):
    """
    An awaited engine reply did not arrive within its time budget.

    The pending replies are left in place. Callers decide whether to retry
    ``isready``, send ``stop`` or kill the engine.

    Attributes:
        pending: Reply tags still outstanding when the wait gave up
        timeout: Seconds waited before giving up
    """

    def __init__(self, pending: Iterable, timeout: float):
        self.pending: FrozenSet = frozenset(pending)
        self.timeout = timeout
        names = ", ".join(sorted(str(tag) for tag in self.pending)) or "nothing"
        super().__init__(f"Timed out after {timeout}s waiting for: {names}")
