"""
UCI Engine Driver

Client side of the Universal Chess Interface: drives an engine process,
blocks callers until the engine acknowledges their commands, and keeps a
live view of the search in progress.

Session Flow:
    engine = Engine.start("stockfish")       # uci ... uciok
    engine.setoption({"MultiPV": 3})
    engine.isready()                         # isready ... readyok
    engine.position(moves=["e2e4"])
    result = engine.go(12, on_info=print)    # go depth 12 ... bestmove
    engine.pvs[0].score.display
    engine.quit()                            # quit ... process exit

States:
    IDLE -> HANDSHAKING -> READY -> SEARCHING -> READY -> ... -> QUITTING -> TERMINATED

Threading:
    - Engine output is handled on the process reader thread
    - info/result callbacks run on that thread and must not call the
      blocking methods (uci, isready, go with wait=True, quit);
      stop() is fine
    - Callers block on the reply waiter until their reply clears

References:
    - UCI Protocol: https://www.chessprogramming.org/UCI
"""

import logging
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

import chess

from chess_uci.config import EngineConfig
from chess_uci.engine.process import EngineProcess
from chess_uci.engine.replies import ReplyWaiter
from chess_uci.engine.search_state import Pv, SearchState
from chess_uci.errors import EngineStartupError, EngineTimeout
from chess_uci.protocol.commands import (
    MoveLike,
    SearchLimits,
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

logger = logging.getLogger(__name__)

InfoCallback = Callable[[SearchInfo], None]
ResultCallback = Callable[[SearchResult], None]


class EngineState(Enum):
    IDLE = "idle"
    HANDSHAKING = "handshaking"
    READY = "ready"
    SEARCHING = "searching"
    QUITTING = "quitting"
    TERMINATED = "terminated"


class SearchHandle:
    """
    A search started with ``go(wait=False)``.

    Lets the caller keep working (or stop the search) and collect the
    result later with ``wait()``.
    """

    def __init__(self, engine: "Engine"):
        self._engine = engine

    @property
    def done(self) -> bool:
        return Reply.BESTMOVE not in self._engine.pending

    def stop(self) -> "SearchHandle":
        self._engine.stop()
        return self

    def wait(self, timeout: float = 0) -> SearchResult:
        """
        Block until bestmove arrives.

        Args:
            timeout: Seconds to wait (0 = wait indefinitely)

        Returns:
            The search result

        Raises:
            EngineTimeout: If bestmove has not arrived in time
        """
        self._engine._replies.wait(timeout)
        return self._engine.result


class Engine:
    """
    Driver for one UCI engine process.

    Attributes:
        config: Session configuration
        id: Engine identity from ``id`` lines (name, author)
        options: Engine options by name, in declaration order
        state: Current protocol state

    Methods:
        start: Spawn an engine and complete the uci handshake
        uci / isready: Blocking synchronization commands
        ucinewgame / setoption / position / stop / ponderhit: Fire-and-forget
        go: Start a search, blocking or returning a SearchHandle
        quit / kill: Shut the engine down
    """

    def __init__(
        self,
        command=None,
        config: Optional[EngineConfig] = None,
        process=None,
    ):
        """
        Launch (or adopt) an engine process.

        Args:
            command: Engine executable path or argv (overrides config.command)
            config: Session configuration (default: EngineConfig())
            process: Already started process object exposing send, on_line,
                on_exit, is_running and kill (default: spawn EngineProcess)

        Raises:
            EngineStartupError: If the process is not running after launch
        """
        if config is None:
            config = EngineConfig(command=command)
        elif command is not None:
            config = config.with_command(command)
        self.config = config

        if process is None:
            if not config.argv:
                raise ValueError("an engine command is required when no process is given")
            process = EngineProcess(config.argv, cwd=config.cwd)

        if not process.is_running:
            error = getattr(process, "error", None)
            if error is not None:
                raise EngineStartupError(f"Engine failed to start: {error}") from error
            raise EngineStartupError("Engine failed to start")

        self.process = process
        self.id: Dict[str, str] = {}
        self.options: Dict[str, OptionSpec] = {}
        self.state = EngineState.IDLE

        self._replies = ReplyWaiter()
        self._search = SearchState()
        self._on_info: Optional[InfoCallback] = None
        self._on_result: Optional[ResultCallback] = None

        self.process.on_line(self._on_line)
        self.process.on_exit(self._on_exit)

    @classmethod
    def start(cls, command=None, config: Optional[EngineConfig] = None, process=None) -> "Engine":
        """Create an engine and complete the uci handshake."""
        engine = cls(command, config=config, process=process)
        try:
            engine.uci()
        except EngineTimeout:
            engine.kill()
            raise
        return engine

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.process.is_running

    @property
    def pvs(self) -> List[Pv]:
        return self._search.pvs

    @property
    def result(self) -> SearchResult:
        return self._search.result

    @property
    def pending(self) -> FrozenSet[Reply]:
        return self._replies.pending

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def uci(self):
        """Send 'uci' and wait for uciok, collecting id and option lines."""
        self.state = EngineState.HANDSHAKING
        self.send("uci")
        self._replies.wait(self.config.reply_timeout)
        self.state = EngineState.READY
        logger.info(f"Handshake complete: {self.id.get('name', '<unnamed>')} ({len(self.options)} options)")

    def isready(self, timeout: Optional[float] = None):
        """Send 'isready' and wait for readyok."""
        self.send("isready")
        self._replies.wait(self.config.reply_timeout if timeout is None else timeout)

    def ucinewgame(self) -> "Engine":
        self.send("ucinewgame")
        return self

    def setoption(self, options: Mapping[str, object]) -> "Engine":
        """
        Send one setoption line per entry.

        Args:
            options: Option name -> value (None for button options)
        """
        for name, value in options.items():
            if name not in self.options and self.options:
                logger.debug(f"Option {name!r} was not declared by the engine")
            self.send(setoption_command(name, value))
        return self

    def position(
        self,
        fen: Union[str, chess.Board, None] = None,
        moves: Optional[Iterable[MoveLike]] = None,
    ) -> "Engine":
        """
        Send 'position'.

        Args:
            fen: FEN string, a python-chess Board, or None for startpos.
                A Board is sent as its root position plus its move stack,
                followed by ``moves``.
            moves: Moves to play from the position (UCI strings or Moves)
        """
        move_list: List[MoveLike] = []
        if isinstance(fen, chess.Board):
            board = fen
            root = board.root().fen()
            fen = None if root == chess.STARTING_FEN else root
            move_list.extend(board.move_stack)
        move_list.extend(moves or [])

        self.send(position_command(fen, move_list))
        return self

    def go(
        self,
        limits: Union[None, int, SearchLimits] = None,
        on_info: Optional[InfoCallback] = None,
        on_result: Optional[ResultCallback] = None,
        wait: bool = True,
        timeout: float = 0,
    ) -> Union[SearchResult, SearchHandle]:
        """
        Start a search.

        Args:
            limits: None for infinite, an int depth, ByDepth or SearchParameters
            on_info: Called with every parsed info line
            on_result: Called once with the result when bestmove arrives
            wait: Block until bestmove (True) or return a SearchHandle
            timeout: Seconds to wait when blocking (0 = wait indefinitely)

        Returns:
            SearchResult if wait, else SearchHandle

        Raises:
            EngineTimeout: If blocking and bestmove did not arrive in time.
                The engine is presumably still searching.
        """
        command = go_command(resolve_limits(limits))

        self._search.on_go_start()
        self._on_info = on_info
        self._on_result = on_result
        self.state = EngineState.SEARCHING
        logger.info(f"Search started: {command}")
        self.send(command)

        handle = SearchHandle(self)
        if not wait:
            return handle
        return handle.wait(timeout)

    def stop(self) -> "Engine":
        """Ask the engine to finish the search and send bestmove."""
        self.send("stop")
        return self

    def ponderhit(self) -> "Engine":
        self.send("ponderhit")
        return self

    def quit(self, timeout: Optional[float] = None):
        """
        Send 'quit' and wait for the engine to exit.

        If the engine is still alive after the timeout it is killed and the
        EngineTimeout is re-raised. Quitting an engine that has already
        exited only marks it terminated.
        """
        if not self.process.is_running:
            self.state = EngineState.TERMINATED
            return

        self.state = EngineState.QUITTING
        self.send("quit")
        try:
            self._replies.wait(self.config.quit_timeout if timeout is None else timeout)
        except EngineTimeout:
            logger.warning("Engine did not exit after quit, killing it")
            self.kill()
            raise
        self.state = EngineState.TERMINATED
        logger.info("Engine quit")

    def kill(self):
        self.process.kill()

    def send(self, command: str):
        """
        Send a raw command line, registering the reply it expects.

        The expectation is registered before the line is written so a fast
        reply can never be missed.
        """
        tag = self._replies.expect_for(command)
        if self.config.log_send:
            logger.debug(f">>> {command}")
        try:
            self.process.send(command)
        except OSError:
            if tag is not None:
                self._replies.clear(tag)
            raise

    # ------------------------------------------------------------------
    # Engine output
    # ------------------------------------------------------------------

    def _on_line(self, line: str):
        if self.config.log_recv:
            logger.debug(f"<<< {line}")

        parsed = parse_line(line)
        if parsed is None:
            return

        if isinstance(parsed, SearchInfo):
            self._search.on_info(parsed)
            if self._on_info is not None:
                self._on_info(parsed)
        elif isinstance(parsed, SearchResult):
            self._search.on_bestmove(parsed)
            if self.state is EngineState.SEARCHING:
                self.state = EngineState.READY
            logger.info(f"Search finished: bestmove {parsed.bestmove}")
            try:
                if self._on_result is not None:
                    self._on_result(parsed)
            finally:
                self._replies.clear(Reply.BESTMOVE)
        elif isinstance(parsed, Reply):
            self._replies.clear(parsed)
        elif isinstance(parsed, EngineId):
            self.id[parsed.key] = parsed.value
        elif isinstance(parsed, OptionSpec):
            self.options[parsed.name] = parsed

    def _on_exit(self, code: Optional[int]):
        logger.info(f"Engine exited (code={code})")
        self.state = EngineState.TERMINATED
        self._replies.clear(Reply.QUIT)

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "Engine":
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.is_running:
            self.quit()
