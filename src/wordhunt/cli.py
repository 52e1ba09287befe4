from __future__ import annotations

import argparse
import asyncio
import logging
import os
import random
import statistics
import sys

from .data.pool_loader import POOL_ENV_VAR
from .exceptions import PoolLoadError
from .features.session import Cue, CuePlan, PlaybackSequencer, SessionConfig, SessionManager

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--words", type=str, default=None, help=f"Path to the word pool JSON (sets {POOL_ENV_VAR})")
    p.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])


def _serve(args: argparse.Namespace) -> int:  # pragma: no cover - runner
    import uvicorn

    from .web.app import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level)
    return 0


async def _play_rounds(
    manager: SessionManager,
    sid: str,
    rounds: int,
    chooser: random.Random,
    show_cues: bool = False,
) -> list[int]:
    async def player(cue: Cue) -> None:
        if show_cues:
            print(f"    {cue.kind:<9} {cue.src}")
        await asyncio.sleep(0)

    sequencer = PlaybackSequencer(player)
    clicks_per_round: list[int] = []
    for index in range(rounds):
        if index:
            manager.reset(sid)
            sequencer.advance_generation()
        board = manager.get_board(sid)
        clicks = 0
        while not board.complete:
            hidden = [card.slot for card in board.cards if not card.revealed]
            result = manager.select(sid, chooser.choice(hidden), board.round_id)
            clicks += 1
            plan = CuePlan(cues=tuple(Cue(cue.kind, cue.src) for cue in result.feedback.cues))
            await sequencer.play(plan)
            board = result.board
        clicks_per_round.append(clicks)
        print(f"round {index + 1}: {clicks} clicks to find {board.round_size} cards")
    return clicks_per_round


def _simulate(args: argparse.Namespace) -> int:
    manager = SessionManager()
    try:
        sid = manager.create_session(SessionConfig(round_size=args.round_size, seed=args.seed))
    except PoolLoadError as exc:
        print(f"Error Loading Game: {exc}", file=sys.stderr)
        return 2
    chooser = random.Random(args.seed)
    clicks = asyncio.run(_play_rounds(manager, sid, max(1, args.rounds), chooser, args.show_cues))
    print(f"mean clicks per round: {statistics.fmean(clicks):.1f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordhunt", description="Find-the-word memory grid")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the web UI (default)")
    serve.add_argument("--host", default=os.environ.get("BIND", "0.0.0.0"))
    serve.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")))
    _add_common_args(serve)

    simulate = sub.add_parser("simulate", help="Play rounds headlessly with random clicks")
    simulate.add_argument("--rounds", type=int, default=1, help="Number of rounds to play")
    # If omitted, runs with a random seed for variety. Pass an int to reproduce.
    simulate.add_argument("--seed", type=int, default=None, help="RNG seed (random if omitted)")
    simulate.add_argument("--round-size", type=int, default=16, help="Cards per round")
    simulate.add_argument("--show-cues", action="store_true", help="Print the audio cues in playback order")
    _add_common_args(simulate)
    return parser


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    # A bare invocation (or one starting with flags) serves the web UI.
    if not argv or (argv[0].startswith("-") and argv[0] not in ("-h", "--help")):
        argv = ["serve", *argv]
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=_LOG_FORMAT)
    if args.words:
        os.environ[POOL_ENV_VAR] = args.words
    if args.command == "simulate":
        return _simulate(args)
    return _serve(args)


if __name__ == "__main__":
    raise SystemExit(main())
