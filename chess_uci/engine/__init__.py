"""
Engine Session

Everything that deals with a live engine process:
    - process: subprocess wrapper delivering output lines
    - replies: which acknowledgements are still outstanding
    - search_state: principal variations of the current search
    - driver: the Engine facade callers talk to
"""

from chess_uci.engine.driver import Engine, EngineState, SearchHandle
from chess_uci.engine.process import EngineProcess
from chess_uci.engine.replies import COMMAND_REPLIES, ReplyWaiter
from chess_uci.engine.search_state import Pv, SearchState

__all__ = [
    'Engine',
    'EngineState',
    'SearchHandle',
    'EngineProcess',
    'COMMAND_REPLIES',
    'ReplyWaiter',
    'Pv',
    'SearchState',
]
