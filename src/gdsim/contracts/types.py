from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence


class Side(str, Enum):
    HOME = "home"
    AWAY = "away"

    @property
    def other(self) -> Side:
        return Side.AWAY if self is Side.HOME else Side.HOME


class PlayType(str, Enum):
    RUN = "run"
    PASS = "pass"
    PLAY_ACTION = "play_action"
    TRICK = "trick"


class PlayDepth(str, Enum):
    SHORT = "short"
    MID = "mid"
    DEEP = "deep"


class RiskProfile(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PenaltySide(str, Enum):
    OFFENSE = "offense"
    DEFENSE = "defense"


class TurnoverType(str, Enum):
    INT = "INT"
    FUM = "FUM"


class KickoffType(str, Enum):
    NORMAL = "normal"
    ONSIDE = "onside"


class ConversionChoice(str, Enum):
    KICK = "kick"
    TWO_POINT = "two_point"


class FourthDownChoice(str, Enum):
    GO_FOR_IT = "go_for_it"
    PUNT = "punt"
    FIELD_GOAL = "field_goal"


class FreeKickChoice(str, Enum):
    KICKOFF = "kickoff"
    PUNT = "punt"


class Tempo(str, Enum):
    NORMAL = "normal"
    HURRY_UP = "hurry_up"
    BURN_CLOCK = "burn_clock"


class EventType(str, Enum):
    LOG = "log"
    HAND_UPDATE = "hand_update"
    SCORE = "score"
    CLOCK = "clock"
    DOWN = "down"
    POSSESSION = "possession"
    KICKOFF = "kickoff"
    PENALTY = "penalty"
    TWO_MINUTE_WARNING = "two_minute_warning"
    END_OF_QUARTER = "end_of_quarter"
    HALFTIME = "halftime"
    FINAL = "final"


class RandomSource(Protocol):
    def next(self) -> float: ...


@dataclass(slots=True, frozen=True)
class FieldState:
    ball_spot: int
    down: int
    distance: int


@dataclass(slots=True, frozen=True)
class PlayDefinition:
    play_id: str
    name: str
    play_type: PlayType
    depth: PlayDepth
    risk: RiskProfile
    perimeter: bool = False


@dataclass(slots=True, frozen=True)
class TurnoverSpec:
    turnover_type: TurnoverType
    return_yards: int = 0


@dataclass(slots=True, frozen=True)
class MatchupEntry:
    yards: int
    clock: str
    turnover: TurnoverSpec | None = None
    oob: bool | None = None
    incomplete: bool | None = None
    tags: tuple[str, ...] | None = None


@dataclass(slots=True, frozen=True)
class MatchupChart:
    offense_type: PlayType
    defense_call: str
    entries: Mapping[int, MatchupEntry]


@dataclass(slots=True, frozen=True)
class PenaltyEntry:
    index: int
    side: PenaltySide
    yards: int
    label: str
    loss_of_down: bool | None = None
    replay_down: bool | None = None
    auto_first_down: bool | None = None


@dataclass(slots=True, frozen=True)
class FieldGoalBand:
    label: str
    min_distance: int
    max_distance: int


@dataclass(slots=True, frozen=True)
class KickoffEntry:
    yard_line: int
    muffed: bool | None = None


@dataclass(slots=True, frozen=True)
class OnsideEntry:
    recovered_by: str
    yard_line: int


@dataclass(slots=True, frozen=True)
class PuntReturnEntry:
    yards: int
    fair_catch: bool | None = None
    long_gain: bool | None = None


@dataclass(slots=True, frozen=True)
class LongGainEntry:
    yards: int
    bonus_per_pip: int | None = None


@dataclass(slots=True, frozen=True)
class CoachProfile:
    name: str
    onside_aggressive: bool = False
    two_point_aggressive_late: bool = False
    aggression: float = 0.5
    fourth_down_boost: float = 0.0
    pass_bias: float = 0.0

    def validate(self) -> None:
        if not 0.0 <= self.aggression <= 1.0:
            raise ValueError("coach aggression must be within [0, 1]")
        if not -1.0 <= self.pass_bias <= 1.0:
            raise ValueError("coach pass_bias must be within [-1, 1]")
        if self.fourth_down_boost < 0.0:
            raise ValueError("coach fourth_down_boost must be non-negative")


@dataclass(slots=True, frozen=True)
class PenaltyResult:
    index: int
    side: PenaltySide
    yards: int
    label: str
    loss_of_down: bool = False
    replay_down: bool = False
    auto_first_down: bool = False
    accepted: bool = True


@dataclass(slots=True, frozen=True)
class Outcome:
    field: FieldState
    roll: int
    play_yards: int
    yards: int
    clock_runoff: int
    touchdown: bool = False
    safety: bool = False
    turnover: bool = False
    turnover_type: TurnoverType | None = None
    return_yards: int = 0
    out_of_bounds: bool = False
    incomplete: bool = False
    first_down: bool = False
    tags: tuple[str, ...] = ()
    penalty: PenaltyResult | None = None

    @property
    def end_spot(self) -> int:
        return self.field.ball_spot + self.yards

    @property
    def enforced_penalty(self) -> PenaltyResult | None:
        if self.penalty is not None and self.penalty.accepted:
            return self.penalty
        return None


@dataclass(slots=True)
class GameState:
    quarter: int
    clock_seconds: int
    down: int
    distance: int
    ball_spot: int
    possession: Side
    score: dict[Side, int]
    awaiting_conversion: bool = False
    awaiting_kickoff: bool = False
    free_kick_after_safety: bool = False
    game_over: bool = False
    is_overtime: bool = False
    two_minute_warned: bool = False
    untimed_down: bool = False
    opening_receiver: Side = Side.HOME

    def field_state(self) -> FieldState:
        return FieldState(ball_spot=self.ball_spot, down=self.down, distance=self.distance)

    def score_diff(self, side: Side) -> int:
        return self.score[side] - self.score[side.other]

    def snapshot(self) -> dict[str, object]:
        return {
            "quarter": self.quarter,
            "clock_seconds": self.clock_seconds,
            "down": self.down,
            "distance": self.distance,
            "ball_spot": self.ball_spot,
            "possession": self.possession.value,
            "score": {side.value: points for side, points in self.score.items()},
            "awaiting_conversion": self.awaiting_conversion,
            "awaiting_kickoff": self.awaiting_kickoff,
            "free_kick_after_safety": self.free_kick_after_safety,
            "game_over": self.game_over,
            "is_overtime": self.is_overtime,
            "two_minute_warned": self.two_minute_warned,
            "untimed_down": self.untimed_down,
            "opening_receiver": self.opening_receiver.value,
        }


@dataclass(slots=True, frozen=True)
class KickoffDecision:
    type: KickoffType
    onside_probability: float
    kind: str = "kickoff"


@dataclass(slots=True, frozen=True)
class KickoffResult:
    receiving_yard_line: int
    kicking_team_recovers: bool
    onside: bool
    roll: int


@dataclass(slots=True, frozen=True)
class PuntResult:
    gross_yards: int
    return_yards: int
    receiving_spot: int
    touchback: bool
    fair_catch: bool
    long_gain: bool = False
    kicking_team_recovers: bool = False


@dataclass(slots=True)
class GameEvent:
    event_id: str
    time: datetime
    sequence: int
    event_type: EventType
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ValidationIssue:
    code: str
    severity: str
    field_path: str
    entity_id: str
    message: str


@dataclass(slots=True)
class ForensicArtifact:
    artifact_id: str
    timestamp: datetime
    engine_scope: str
    error_code: str
    message: str
    state_snapshot: Mapping[str, Any]
    context: Mapping[str, Any]
    identifiers: Mapping[str, str]
    causal_fragment: Sequence[str]
