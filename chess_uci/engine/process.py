"""
Engine process wrapper.

Spawns the engine executable with piped stdin/stdout and turns its output
into a stream of line callbacks, followed by one exit callback once the
engine closes its output. A single reader thread delivers both, so lines
arrive one at a time, in the order the engine wrote them, and the exit
notification always comes after the last line.
"""

import logging
import subprocess
import threading
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

LineCallback = Callable[[str], None]
ExitCallback = Callable[[Optional[int]], None]


class EngineProcess:
    """
    Child process running a UCI engine.

    Spawn errors are not raised: they are stored on ``error`` and the
    process simply reports ``is_running == False``, leaving the decision
    to the driver.

    Attributes:
        argv: Command line used to spawn the engine
        error: OSError raised by the spawn, if any
    """

    def __init__(self, command: Union[str, Sequence[str]], cwd: Optional[Path] = None):
        self.argv: List[str] = [command] if isinstance(command, str) else list(command)
        self.error: Optional[OSError] = None

        self._proc: Optional[subprocess.Popen] = None
        self._line_callbacks: List[LineCallback] = []
        self._exit_callbacks: List[ExitCallback] = []
        self._reader: Optional[threading.Thread] = None
        self._write_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._exited = False

        try:
            self._proc = subprocess.Popen(
                self.argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
                cwd=cwd,
            )
            logger.info(f"Spawned engine process {self.argv[0]} (pid={self._proc.pid})")
        except OSError as e:
            self.error = e
            logger.error(f"Failed to spawn engine {self.argv[0]}: {e}")

    @property
    def is_running(self) -> bool:
        return self._proc is not None and self._proc.poll() is None

    @property
    def returncode(self) -> Optional[int]:
        return self._proc.returncode if self._proc is not None else None

    def send(self, text: str):
        """Write one command line to the engine's stdin."""
        if self._proc is None or self._proc.stdin is None:
            raise BrokenPipeError("engine process is not running")
        with self._write_lock:
            self._proc.stdin.write(text + "\n")
            self._proc.stdin.flush()

    def on_line(self, callback: LineCallback):
        """Register a callback receiving each non-empty output line."""
        self._line_callbacks.append(callback)
        self._start_reader()

    def on_exit(self, callback: ExitCallback):
        """Register a callback receiving the exit code once the engine exits."""
        with self._state_lock:
            exited = self._exited
            if not exited:
                self._exit_callbacks.append(callback)
        if exited:
            callback(self.returncode)
        else:
            self._start_reader()

    def kill(self):
        if self._proc is None or self._proc.poll() is not None:
            return
        logger.warning(f"Killing engine process (pid={self._proc.pid})")
        self._proc.kill()
        self._proc.wait()

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        if self._proc is None:
            return None
        return self._proc.wait(timeout=timeout)

    def _start_reader(self):
        with self._state_lock:
            if self._reader is not None or self._proc is None:
                return
            self._reader = threading.Thread(
                target=self._read_loop,
                name=f"uci-reader-{self._proc.pid}",
                daemon=True,
            )
        self._reader.start()

    def _read_loop(self):
        try:
            for raw in self._proc.stdout:
                line = raw.strip()
                if not line:
                    continue
                for callback in list(self._line_callbacks):
                    try:
                        callback(line)
                    except Exception as e:
                        logger.error(f"Line callback failed on {line!r}: {e}", exc_info=True)
        except ValueError:
            # stdout closed underneath us by kill()
            pass
        finally:
            code = self._proc.wait()
            logger.info(f"Engine process exited with code {code}")
            with self._state_lock:
                self._exited = True
                callbacks = list(self._exit_callbacks)
            for callback in callbacks:
                callback(code)
