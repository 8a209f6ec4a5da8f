"""
Driver configuration.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union


@dataclass
class EngineConfig:
    """Configuration for one engine session.

    Groups the process command line, reply budgets and wire logging
    switches so a session can be reproduced from a single object.
    """

    # Process
    command: Union[str, Sequence[str], None] = None
    """Engine executable path, or an argv sequence (path first)"""

    cwd: Optional[Path] = None
    """Working directory for the engine process (None = inherit)"""

    # Reply budgets
    reply_timeout: float = 5.0
    """Seconds to wait for uciok/readyok (0 = wait forever)"""

    quit_timeout: float = 5.0
    """Seconds to wait for the engine to exit after quit before killing it"""

    # Logging
    log_send: bool = True
    """Log outgoing commands at DEBUG level"""

    log_recv: bool = True
    """Log incoming engine lines at DEBUG level"""

    argv: List[str] = field(init=False, default_factory=list)
    """Normalized argv built from command"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.command is not None:
            if isinstance(self.command, (str, Path)):
                self.argv = [str(self.command)]
            else:
                self.argv = [str(part) for part in self.command]
            if not self.argv or not self.argv[0]:
                raise ValueError(f"command must name an executable, got {self.command!r}")

        if self.cwd is not None:
            self.cwd = Path(self.cwd)

        if self.reply_timeout < 0:
            raise ValueError(f"reply_timeout must be >= 0, got {self.reply_timeout}")

        if self.quit_timeout < 0:
            raise ValueError(f"quit_timeout must be >= 0, got {self.quit_timeout}")

    def with_command(self, command: Union[str, Sequence[str]]) -> "EngineConfig":
        """Return a copy of this config that launches ``command``."""
        return EngineConfig(
            command=command,
            cwd=self.cwd,
            reply_timeout=self.reply_timeout,
            quit_timeout=self.quit_timeout,
            log_send=self.log_send,
            log_recv=self.log_recv,
        )

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"EngineConfig(\n"
            f"  Command: {' '.join(self.argv) or '<unset>'}\n"
            f"  Timeouts: reply={self.reply_timeout}s, quit={self.quit_timeout}s\n"
            f"  Wire logging: send={self.log_send}, recv={self.log_recv}\n"
            f")"
        )
