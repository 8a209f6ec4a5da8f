#!/usr/bin/env python3
"""
Position Analysis Runner

Starts a UCI engine, analyses one position and prints every principal
variation with its score, depth and search statistics.

Usage:
    python tools/analyse_position.py stockfish [--fen FEN] [--moves e2e4,e7e5]
        [--depth 18 | --movetime 2000] [--multipv 3] [--option Threads=4] [--verbose]
"""

import sys
import argparse
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_uci import Engine, EngineConfig, SearchParameters
from chess_uci.utils import setup_logger


def format_nodes(nodes) -> str:
    """Format a node count"""
    if nodes is None:
        return "-"
    if nodes < 1000:
        return str(nodes)
    if nodes < 1_000_000:
        return f"{nodes / 1000:.1f}k"
    return f"{nodes / 1_000_000:.1f}M"


def parse_options(pairs: list[str]) -> dict[str, str]:
    options = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ValueError(f"option must be NAME=VALUE, got {pair!r}")
        options[name] = value
    return options


def analyse(engine_path: str, fen, moves: list[str], params: SearchParameters,
            multipv: int, options: dict[str, str], verbose: bool = False):
    """
    Analyse one position and print the results.

    Args:
        engine_path: Engine executable
        fen: Position in FEN (None for the start position)
        moves: Moves played from that position
        params: Search limits
        multipv: Number of variations to report
        options: Extra engine options
        verbose: If True, print every info line as it arrives
    """
    config = EngineConfig(command=engine_path, quit_timeout=2.0)

    with Engine.start(config=config) as engine:
        print("=" * 80)
        print(f"Engine: {engine.id.get('name', '?')} by {engine.id.get('author', '?')}")
        print(f"Options declared: {len(engine.options)}")
        print("=" * 80)

        if multipv > 1:
            options = {**options, "MultiPV": multipv}
        engine.setoption(options).ucinewgame()
        engine.isready()
        engine.position(fen, moves)

        def on_info(info):
            if verbose and info.pv:
                score = info.score.display if info.score else "?"
                print(f"  depth {info.depth} multipv {info.multipv or 1}: {score} {' '.join(info.pv[:8])}")

        try:
            result = engine.go(params, on_info=on_info)
        except KeyboardInterrupt:
            print("\nStopping search...")
            engine.stop()
            raise

        print()
        print(f"{'#':<4} {'Score':<10} {'Depth':<7} {'Nodes':<10} {'Time':<10} Line")
        print("-" * 80)
        for rank, pv in enumerate(engine.pvs, start=1):
            score = pv.score.display if pv.score else "-"
            time_ms = f"{pv.time_ms}ms" if pv.time_ms is not None else "-"
            line = " ".join(pv.moves[:10])
            print(f"{rank:<4} {score:<10} {str(pv.depth or '-'):<7} {format_nodes(pv.nodes):<10} {time_ms:<10} {line}")
        print("-" * 80)

        ponder = f" (ponder {result.ponder})" if result.ponder else ""
        print(f"bestmove {result.bestmove}{ponder}")
        print("=" * 80)

    return result


def main():
    parser = argparse.ArgumentParser(
        description="Analyse a position with a UCI engine"
    )
    parser.add_argument("engine", help="Path to the engine executable")
    parser.add_argument("--fen", type=str, default=None, help="Position in FEN (default: start position)")
    parser.add_argument(
        "--moves",
        type=str,
        default="",
        help="Comma-separated UCI moves played from the position"
    )
    parser.add_argument("--depth", type=int, default=None, help="Search depth in plies")
    parser.add_argument("--movetime", type=int, default=None, help="Search time in milliseconds")
    parser.add_argument("--multipv", type=int, default=1, help="Number of variations (default: 1)")
    parser.add_argument(
        "--option",
        action="append",
        default=[],
        help="Engine option as NAME=VALUE (repeatable)"
    )
    parser.add_argument("--verbose", action="store_true", help="Print info lines during the search")
    parser.add_argument("--debug", action="store_true", help="Log engine traffic to stderr")

    args = parser.parse_args()

    setup_logger(debug=args.debug)

    try:
        options = parse_options(args.option)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    moves = [m.strip() for m in args.moves.split(",") if m.strip()]
    if args.depth is None and args.movetime is None:
        args.depth = 18
    params = SearchParameters(depth=args.depth, movetime=args.movetime)

    try:
        analyse(args.engine, args.fen, moves, params, args.multipv, options, verbose=args.verbose)
    except KeyboardInterrupt:
        print("\n\nAnalysis interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\n\nError running analysis: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
