from __future__ import annotations

from dataclasses import dataclass, field

from gdsim.contracts import GameEvent, GameState, Side


@dataclass(slots=True)
class SnapRecord:
    snap: int
    quarter: int
    clock_seconds: int
    possession: Side
    kind: str
    result: str
    yards: int = 0
    roll: int | None = None
    play_id: str | None = None
    defense_call: str | None = None
    penalty: str | None = None
    home_score: int = 0
    away_score: int = 0

    def as_row(self) -> dict[str, object]:
        return {
            "snap": self.snap,
            "quarter": self.quarter,
            "clock_seconds": self.clock_seconds,
            "possession": self.possession.value,
            "kind": self.kind,
            "result": self.result,
            "yards": self.yards,
            "roll": self.roll,
            "play_id": self.play_id,
            "defense_call": self.defense_call,
            "penalty": self.penalty,
            "home_score": self.home_score,
            "away_score": self.away_score,
        }


@dataclass(slots=True)
class GameResult:
    final_state: GameState
    home_coach: str
    away_coach: str
    seed: int | None = None
    snaps: list[SnapRecord] = field(default_factory=list)
    events: list[GameEvent] = field(default_factory=list)

    @property
    def home_score(self) -> int:
        return self.final_state.score[Side.HOME]

    @property
    def away_score(self) -> int:
        return self.final_state.score[Side.AWAY]

    @property
    def winner(self) -> Side | None:
        if self.home_score == self.away_score:
            return None
        return Side.HOME if self.home_score > self.away_score else Side.AWAY
