"""
In-memory engine process for driver tests.

Implements the process contract used by Engine (send, on_line, on_exit,
is_running, kill). Lines are delivered synchronously on the calling thread,
either scripted as replies to a command or pushed with emit().
"""

from typing import Callable, Dict, List, Optional


class FakeProcess:
    """
    Scripted UCI engine.

    Attributes:
        sent: Every command line the driver sent, in order
        replies: Command name -> lines emitted right after that command
        exit_on_quit: Report process exit when 'quit' is received
    """

    def __init__(self, replies: Optional[Dict[str, List[str]]] = None,
                 running: bool = True, exit_on_quit: bool = True, error=None):
        self.sent: List[str] = []
        self.replies: Dict[str, List[str]] = dict(replies or {})
        self.exit_on_quit = exit_on_quit
        self.error = error
        self.killed = False
        self.exit_code: Optional[int] = None
        self._running = running
        self._line_callbacks: List[Callable[[str], None]] = []
        self._exit_callbacks: List[Callable[[Optional[int]], None]] = []

    @property
    def is_running(self) -> bool:
        return self._running

    def send(self, text: str):
        if not self._running:
            raise BrokenPipeError("fake engine is not running")
        self.sent.append(text)
        name = text.split()[0]
        for line in self.replies.get(name, []):
            self.emit(line)
        if name == "quit" and self.exit_on_quit:
            self.exit(0)

    def on_line(self, callback):
        self._line_callbacks.append(callback)

    def on_exit(self, callback):
        self._exit_callbacks.append(callback)

    def emit(self, *lines: str):
        for line in lines:
            for callback in self._line_callbacks:
                callback(line)

    def exit(self, code: int = 0):
        self._running = False
        self.exit_code = code
        for callback in self._exit_callbacks:
            callback(code)

    def kill(self):
        self.killed = True
        if self._running:
            self.exit(-9)


HANDSHAKE = [
    "id name Fakefish 1.0",
    "id author The Test Suite",
    "option name Hash type spin default 16 min 1 max 1024",
    "option name Ponder type check default false",
    "option name Clear Hash type button",
    "uciok",
]


def scripted_engine(**extra) -> FakeProcess:
    """FakeProcess answering uci and isready like a well-behaved engine."""
    replies = {"uci": HANDSHAKE, "isready": ["readyok"]}
    replies.update(extra)
    return FakeProcess(replies=replies)
