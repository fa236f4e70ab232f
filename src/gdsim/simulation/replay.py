from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, replace
from pathlib import Path

from gdsim.core.settings import EngineSettings, default_settings
from gdsim.football.models import GameResult
from gdsim.football.session import GameSession
from gdsim.football.tables import TableStore


@dataclass(slots=True)
class ReplayHarness:
    """Plays the same seeded game twice and compares fingerprints."""

    seed: int
    home_coach: str = "Andy Reid"
    away_coach: str = "Bill Belichick"
    overtime: bool = False

    def save(self, path: Path) -> None:
        payload = {
            "seed": self.seed,
            "home_coach": self.home_coach,
            "away_coach": self.away_coach,
            "overtime": self.overtime,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    @staticmethod
    def load(path: Path) -> ReplayHarness:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ReplayHarness(
            seed=int(data["seed"]),
            home_coach=str(data.get("home_coach", "Andy Reid")),
            away_coach=str(data.get("away_coach", "Bill Belichick")),
            overtime=bool(data.get("overtime", False)),
        )

    def run(self, tables: TableStore | None = None, settings: EngineSettings | None = None) -> GameResult:
        settings = replace(settings or default_settings(), overtime_enabled=self.overtime)
        session = GameSession(tables, seed=self.seed, settings=settings)
        return session.play_game(self.home_coach, self.away_coach)

    def replay(self, tables: TableStore | None = None) -> tuple[dict, dict]:
        tables = tables or TableStore.default()
        first = self.fingerprint(self.run(tables))
        second = self.fingerprint(self.run(tables))
        return first, second

    @staticmethod
    def fingerprint(result: GameResult) -> dict:
        digest = hashlib.sha256()
        for event in result.events:
            line = json.dumps(
                {"sequence": event.sequence, "type": event.event_type.value, "payload": event.payload},
                sort_keys=True,
                default=str,
            )
            digest.update(line.encode("utf-8"))
        return {
            "seed": result.seed,
            "home_score": result.home_score,
            "away_score": result.away_score,
            "quarter": result.final_state.quarter,
            "snaps": len(result.snaps),
            "events": len(result.events),
            "event_digest": digest.hexdigest(),
        }
