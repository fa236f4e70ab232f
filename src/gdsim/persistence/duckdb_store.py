from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

try:
    import duckdb
except ModuleNotFoundError:  # pragma: no cover
    duckdb = None  # type: ignore[assignment]

from gdsim.contracts import EventType
from gdsim.football.models import GameResult

logger = logging.getLogger(__name__)


class GameLogStore:
    """Caller-side DuckDB log of finished games; the engine itself never writes to disk."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> Any:
        if duckdb is None:
            raise RuntimeError("duckdb is required for game log operations")
        return duckdb.connect(str(self.db_path))

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS game_summaries (
                    game_id VARCHAR PRIMARY KEY,
                    seed BIGINT,
                    home_coach VARCHAR,
                    away_coach VARCHAR,
                    home_score INTEGER,
                    away_score INTEGER,
                    quarter INTEGER,
                    overtime BOOLEAN,
                    snaps INTEGER,
                    turnovers INTEGER,
                    penalties INTEGER
                );

                CREATE TABLE IF NOT EXISTS play_log (
                    game_id VARCHAR,
                    snap INTEGER,
                    quarter INTEGER,
                    clock_seconds INTEGER,
                    possession VARCHAR,
                    kind VARCHAR,
                    result VARCHAR,
                    yards INTEGER,
                    roll INTEGER,
                    play_id VARCHAR,
                    defense_call VARCHAR,
                    penalty VARCHAR,
                    home_score INTEGER,
                    away_score INTEGER,
                    PRIMARY KEY(game_id, snap)
                );

                CREATE TABLE IF NOT EXISTS event_log (
                    game_id VARCHAR,
                    sequence INTEGER,
                    event_type VARCHAR,
                    payload_json VARCHAR,
                    PRIMARY KEY(game_id, sequence)
                );
                """
            )

    def record_game(self, game_id: str, result: GameResult) -> None:
        self.initialize_schema()
        final = result.final_state
        turnovers = sum(1 for s in result.snaps if s.kind == "play" and s.result in {"interception", "fumble"})
        penalties = sum(1 for e in result.events if e.event_type == EventType.PENALTY)
        summary = (
            game_id,
            result.seed,
            result.home_coach,
            result.away_coach,
            result.home_score,
            result.away_score,
            final.quarter,
            final.is_overtime,
            len(result.snaps),
            turnovers,
            penalties,
        )
        plays = [
            (
                game_id,
                row["snap"],
                row["quarter"],
                row["clock_seconds"],
                row["possession"],
                row["kind"],
                row["result"],
                row["yards"],
                row["roll"],
                row["play_id"],
                row["defense_call"],
                row["penalty"],
                row["home_score"],
                row["away_score"],
            )
            for row in (snap.as_row() for snap in result.snaps)
        ]
        events = [
            (game_id, e.sequence, e.event_type.value, json.dumps(e.payload, sort_keys=True, default=str))
            for e in result.events
        ]
        with self.connect() as conn:
            for table in ("game_summaries", "play_log", "event_log"):
                conn.execute(f"DELETE FROM {table} WHERE game_id = ?", [game_id])
            conn.execute("INSERT INTO game_summaries VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)", summary)
            if plays:
                conn.executemany("INSERT INTO play_log VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)", plays)
            if events:
                conn.executemany("INSERT INTO event_log VALUES (?, ?, ?, ?)", events)
        logger.info("recorded game %s (%d snaps, %d events)", game_id, len(plays), len(events))

    def game_summary(self, game_id: str) -> dict[str, Any] | None:
        with self.connect() as conn:
            cursor = conn.execute("SELECT * FROM game_summaries WHERE game_id = ?", [game_id])
            row = cursor.fetchone()
            if row is None:
                return None
            columns = [d[0] for d in cursor.description]
        return dict(zip(columns, row))

    def play_rows(self, game_id: str) -> list[dict[str, Any]]:
        with self.connect() as conn:
            cursor = conn.execute("SELECT * FROM play_log WHERE game_id = ? ORDER BY snap", [game_id])
            rows = cursor.fetchall()
            columns = [d[0] for d in cursor.description]
        return [dict(zip(columns, row)) for row in rows]

    def event_types(self, game_id: str) -> list[str]:
        with self.connect() as conn:
            rows = conn.execute("SELECT event_type FROM event_log WHERE game_id = ? ORDER BY sequence", [game_id]).fetchall()
        return [r[0] for r in rows]
