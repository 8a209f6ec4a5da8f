"""
chess-uci

A client driver for chess engines speaking the Universal Chess Interface
(UCI) over stdin/stdout.

## Architecture

1. **protocol**: Text side of UCI
   - Line parser for id/option/info/bestmove/uciok/readyok
   - Score normalization (centipawns and mate distances on one scale)
   - Outbound command construction

2. **engine**: Live engine session
   - Engine process wrapper with an ordered line stream
   - Reply waiter: blocks callers until uciok/readyok/bestmove/exit
   - Search state: per-MultiPV principal variations
   - Engine: the driver facade

3. **utils**: Logging setup for scripts

## Quick Start

```python
from chess_uci import Engine, SearchParameters

engine = Engine.start("stockfish")
print(engine.id, list(engine.options))

engine.setoption({"Threads": 4, "MultiPV": 3}).ucinewgame()
engine.isready()

engine.position(moves=["e2e4", "e7e5"])
result = engine.go(SearchParameters(movetime=1000))

for rank, pv in enumerate(engine.pvs, start=1):
    print(f"{rank}: {pv.score}/{pv.depth} {' '.join(pv.moves[:5])}")
print("bestmove", result.bestmove)

engine.quit()
```

The driver does not validate chess legality: moves and positions are
passed to the engine as given.

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from chess_uci.config import EngineConfig
from chess_uci.engine import Engine, EngineProcess, EngineState, Pv, SearchHandle
from chess_uci.errors import EngineStartupError, EngineTimeout, UCIError
from chess_uci.protocol import (
    ByDepth,
    OptionSpec,
    Reply,
    Score,
    ScoreKind,
    SearchInfo,
    SearchParameters,
    SearchResult,
)

__all__ = [
    'EngineConfig',
    'Engine',
    'EngineProcess',
    'EngineState',
    'Pv',
    'SearchHandle',
    'EngineStartupError',
    'EngineTimeout',
    'UCIError',
    'ByDepth',
    'OptionSpec',
    'Reply',
    'Score',
    'ScoreKind',
    'SearchInfo',
    'SearchParameters',
    'SearchResult',
]
