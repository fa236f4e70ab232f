from __future__ import annotations

import logging
import math
from typing import Sequence, TypeVar

from gdsim.contracts import (
    CoachProfile,
    ConversionChoice,
    FourthDownChoice,
    FreeKickChoice,
    GameState,
    KickoffDecision,
    KickoffType,
    PlayDefinition,
    PlayType,
    RandomSource,
    Tempo,
)
from gdsim.core.errors import table_gap
from gdsim.core.randomness import draw
from gdsim.core.settings import EngineSettings, default_settings
from gdsim.football.resolver import GOAL_LINE
from gdsim.football.tables import Playbook

logger = logging.getLogger(__name__)

T = TypeVar("T")

BASE_PASS_PROBABILITY = 0.5
MIN_PASS_PROBABILITY = 0.1
MAX_PASS_PROBABILITY = 0.9

SHORT_YARDAGE = 2
LONG_YARDAGE = 8

# Situational weights over defense calls; calls not listed weigh 1.0.
DEFENSE_WEIGHTS: dict[str, dict[str, float]] = {
    "short": {"run_defense": 1.4, "blitz": 1.1, "balanced": 0.6, "pass_defense": 0.2},
    "medium": {"balanced": 1.2, "run_defense": 0.6, "pass_defense": 0.6, "blitz": 0.4},
    "long": {"pass_defense": 1.3, "blitz": 1.1, "balanced": 0.6, "run_defense": 0.2},
    "prevent": {"pass_defense": 1.0, "balanced": 0.0, "run_defense": 0.0, "blitz": 0.0},
}


def choose_weighted(rng: RandomSource, items: Sequence[tuple[T, float]]) -> T:
    """One draw over the positive weights; falls back to the first item when none are positive."""
    total = sum(weight for _, weight in items if weight > 0)
    if total <= 0:
        return items[0][0]
    point = draw(rng) * total
    running = 0.0
    for item, weight in items:
        if weight <= 0:
            continue
        running += weight
        if point < running:
            return item
    return items[-1][0]


class CoachAI:
    """Situational decisions for one sideline.

    Every method is a pure function of the game state, the coach profile and the
    injected random source; kicking decisions read the possessing side as the kicker.
    """

    def __init__(
        self,
        playbook: Playbook,
        settings: EngineSettings | None = None,
        max_field_goal_distance: int = 45,
    ) -> None:
        self._playbook = playbook
        self._settings = settings or default_settings()
        self._max_field_goal_distance = max_field_goal_distance

    def onside_probability(self, state: GameState, coach: CoachProfile) -> float:
        s = self._settings
        deficit = -state.score_diff(state.possession)
        trailing = deficit > 0
        late_q4_tight = state.quarter == 4 and state.clock_seconds <= s.tight_window_seconds
        down_big_late = (
            state.quarter == 4 and state.clock_seconds <= s.desperation_window_seconds and deficit >= s.desperation_deficit
        )
        if trailing and (late_q4_tight or down_big_late):
            return s.onside_probability_aggressive if coach.onside_aggressive else s.onside_probability_conservative
        return 0.0

    def choose_kickoff(self, state: GameState, coach: CoachProfile, rng: RandomSource) -> KickoffDecision:
        probability = self.onside_probability(state, coach)
        onside = draw(rng) < probability
        decision = KickoffDecision(type=KickoffType.ONSIDE if onside else KickoffType.NORMAL, onside_probability=probability)
        logger.debug("%s kickoff decision %s (p=%.2f)", coach.name, decision.type.value, probability)
        return decision

    def choose_conversion(self, state: GameState, coach: CoachProfile) -> ConversionChoice:
        # Score already includes the touchdown.
        diff = state.score_diff(state.possession)
        late = state.quarter == 4 and state.clock_seconds <= self._settings.two_point_late_seconds
        if -2 <= diff <= -1:
            return ConversionChoice.TWO_POINT
        if coach.two_point_aggressive_late and diff == 1 and late:
            return ConversionChoice.TWO_POINT
        return ConversionChoice.KICK

    def choose_fourth_down(self, state: GameState, coach: CoachProfile) -> FourthDownChoice:
        s = self._settings
        yards_to_goal = GOAL_LINE - state.ball_spot
        attempt_yards = yards_to_goal + s.field_goal_snap_yards
        diff = state.score_diff(state.possession)
        if attempt_yards <= self._max_field_goal_distance and diff <= 3:
            return FourthDownChoice.FIELD_GOAL

        urgency = 0.0
        if diff < 0 and state.quarter == 4 and state.clock_seconds <= s.fourth_down_urgency_seconds:
            urgency = coach.fourth_down_boost + s.fourth_down_urgency_boost
        appetite = coach.aggression + urgency
        opponent_side = yards_to_goal <= 50

        near, far = s.fourth_down_window_near, s.fourth_down_window_far
        if state.distance <= 4 and near <= yards_to_goal <= far and appetite > s.fourth_down_go_threshold:
            return FourthDownChoice.GO_FOR_IT
        if opponent_side:
            # Outside field goal range but past midfield: never punt.
            return FourthDownChoice.GO_FOR_IT
        if yards_to_goal > s.deep_own_territory_yards and state.distance >= 2:
            return FourthDownChoice.PUNT
        if state.distance >= 5 or (yards_to_goal > 50 and state.distance >= 3):
            return FourthDownChoice.PUNT
        if appetite < s.fourth_down_punt_threshold:
            return FourthDownChoice.PUNT
        return FourthDownChoice.GO_FOR_IT

    def choose_tempo(self, state: GameState) -> Tempo:
        s = self._settings
        diff = state.score_diff(state.possession)
        late = state.quarter in (2, 4) and state.clock_seconds <= s.tempo_window_seconds
        if late and diff < 0:
            return Tempo.HURRY_UP
        if late and diff >= s.burn_clock_lead:
            return Tempo.BURN_CLOCK
        return Tempo.NORMAL

    def pass_probability(self, state: GameState, coach: CoachProfile) -> float:
        s = self._settings
        probability = BASE_PASS_PROBABILITY
        distance = state.distance
        red_zone = GOAL_LINE - state.ball_spot < s.red_zone_yards
        if state.down in (1, 2):
            if distance <= 3:
                probability -= 0.25
            if distance >= LONG_YARDAGE:
                probability += 0.35
        if state.down == 3:
            probability += 0.45
            if distance <= SHORT_YARDAGE:
                probability -= 0.35
        if red_zone:
            if distance <= 3:
                probability -= 0.3
            if distance >= LONG_YARDAGE:
                probability += 0.35

        diff = state.score_diff(state.possession)
        two_minute = state.quarter in (2, 4) and state.clock_seconds <= s.two_minute_warning_seconds
        if two_minute and diff < 0:
            probability += 0.35
        if two_minute and diff > 0 and distance <= SHORT_YARDAGE:
            probability -= 0.2
        if state.quarter == 4 and diff < 0:
            probability += 0.1
        if self.choose_tempo(state) == Tempo.BURN_CLOCK and distance <= 3:
            probability -= 0.1
        probability += coach.pass_bias
        return max(MIN_PASS_PROBABILITY, min(MAX_PASS_PROBABILITY, probability))

    def choose_play_call(self, state: GameState, coach: CoachProfile, rng: RandomSource) -> PlayDefinition:
        passing = draw(rng) < self.pass_probability(state, coach)
        if passing:
            family = [PlayType.PASS, PlayType.PLAY_ACTION]
            if coach.aggression >= self._settings.trick_play_aggression:
                family.append(PlayType.TRICK)
        else:
            family = [PlayType.RUN]
        candidates = self._playbook.plays_of(*family)
        if not candidates:
            raise table_gap("playbook", ",".join(t.value for t in family), "playbook has no plays for the chosen family")
        index = min(int(math.floor(draw(rng) * len(candidates))), len(candidates) - 1)
        return candidates[index]

    def choose_defense_call(self, state: GameState, rng: RandomSource) -> str:
        s = self._settings
        defense = state.possession.other
        lead = state.score_diff(defense)
        red_zone = GOAL_LINE - state.ball_spot < s.red_zone_yards

        if state.quarter == 4 and state.clock_seconds <= s.tight_window_seconds and lead >= 6:
            bucket = "prevent"
        elif state.distance <= SHORT_YARDAGE or (red_zone and (state.distance <= 3 or state.down == 1)):
            bucket = "short"
        elif state.distance >= LONG_YARDAGE:
            bucket = "long"
        else:
            bucket = "medium"
        weights = DEFENSE_WEIGHTS[bucket]
        items = [(call, weights.get(call, 1.0)) for call in self._playbook.defense_calls]
        return choose_weighted(rng, items)

    def choose_safety_free_kick(self, state: GameState, coach: CoachProfile) -> FreeKickChoice:
        # The conceding side kicks and holds possession at decision time.
        leading = state.score_diff(state.possession) > 0
        if leading and coach.aggression < self._settings.free_kick_punt_aggression:
            return FreeKickChoice.PUNT
        return FreeKickChoice.KICKOFF
