from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from gdsim.contracts import EventType, GameEvent
from gdsim.core import EngineIntegrityError, EventBus, default_settings, persist_forensic_artifact
from gdsim.football import GameSession, TableStore
from gdsim.persistence import GameLogStore

logger = logging.getLogger(__name__)


def _print_log(event: GameEvent) -> None:
    if event.event_type == EventType.LOG:
        print(event.payload.get("message", ""))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Gridiron dice simulation: auto-play one game")
    parser.add_argument("--seed", type=int, default=None, help="seed for a deterministic game")
    parser.add_argument("--home-coach", default="Andy Reid", help="home coach profile name")
    parser.add_argument("--away-coach", default="Bill Belichick", help="away coach profile name")
    parser.add_argument("--overtime", action="store_true", help="play sudden-death overtime when tied")
    parser.add_argument("--export", type=Path, default=None, help="DuckDB file to record the game into")
    parser.add_argument("--forensics", type=Path, default=None, help="directory for forensic artifacts on failure")
    parser.add_argument("--log-level", default="WARNING", help="logging level")
    parser.add_argument("--quiet", action="store_true", help="only print the final score")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    tables = TableStore.default()
    settings = replace(default_settings(), overtime_enabled=args.overtime)
    bus = EventBus()
    if not args.quiet:
        bus.subscribe(_print_log)

    session = GameSession(tables, seed=args.seed, settings=settings, bus=bus)
    try:
        result = session.play_game(args.home_coach, args.away_coach)
    except EngineIntegrityError as exc:
        if args.forensics is not None:
            path = persist_forensic_artifact(exc.artifact, args.forensics)
            logger.error("forensic artifact written to %s", path)
        print(f"engine failure: {exc}", file=sys.stderr)
        return 1

    print(
        f"FINAL: {result.home_coach} (home) {result.home_score} - "
        f"{result.away_coach} (away) {result.away_score}"
    )
    if args.export is not None:
        game_id = f"seed_{args.seed}" if args.seed is not None else f"game_{result.events[0].event_id}"
        GameLogStore(args.export).record_game(game_id, result)
        print(f"recorded {game_id} to {args.export}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
