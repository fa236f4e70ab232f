from __future__ import annotations

import logging

from gdsim.contracts import FieldState, MatchupEntry, Outcome, PlayDefinition, RandomSource
from gdsim.core.randomness import roll_2d6
from gdsim.football.tables import MatchupTable

logger = logging.getLogger(__name__)

GOAL_LINE = 100
CLOCK_STOPPED = 10
CLOCK_FIRST_DOWN = 20
CLOCK_RUNNING = 30


def clock_runoff(out_of_bounds: bool, incomplete: bool, first_down: bool) -> int:
    if out_of_bounds or incomplete:
        return CLOCK_STOPPED
    if first_down:
        return CLOCK_FIRST_DOWN
    return CLOCK_RUNNING


class PlayResolver:
    """Resolves a scrimmage snap against the matchup charts with a 2d6 roll."""

    def __init__(self, matchup: MatchupTable) -> None:
        self._matchup = matchup

    def resolve_play(
        self,
        offense_call: PlayDefinition,
        defense_call: str,
        field_state: FieldState,
        rng: RandomSource,
    ) -> Outcome:
        # Unknown calls fail before any dice are consumed.
        self._matchup.chart(offense_call.play_type, defense_call)
        roll = roll_2d6(rng)
        entry = self._matchup.lookup(offense_call.play_type, defense_call, roll)
        outcome = self.outcome_from_entry(entry, field_state, roll)
        logger.debug(
            "resolved %s vs %s roll=%d yards=%d",
            offense_call.play_id,
            defense_call,
            roll,
            outcome.yards,
        )
        return outcome

    def outcome_from_entry(self, entry: MatchupEntry, field_state: FieldState, roll: int) -> Outcome:
        spot = field_state.ball_spot
        yards = entry.yards
        touchdown = False
        safety = False
        turnover = entry.turnover is not None
        if turnover:
            # The ball changes hands; the clamp keeps the spot on the field without scoring for the offense.
            yards = max(-spot, min(GOAL_LINE - spot, yards))
        elif spot + yards >= GOAL_LINE:
            yards = GOAL_LINE - spot
            touchdown = True
        elif spot + yards <= 0:
            yards = -spot
            safety = True

        out_of_bounds = bool(entry.oob)
        incomplete = bool(entry.incomplete)
        first_down = not turnover and yards >= field_state.distance
        return Outcome(
            field=field_state,
            roll=roll,
            play_yards=yards,
            yards=yards,
            clock_runoff=clock_runoff(out_of_bounds, incomplete, first_down),
            touchdown=touchdown,
            safety=safety,
            turnover=turnover,
            turnover_type=entry.turnover.turnover_type if entry.turnover else None,
            return_yards=entry.turnover.return_yards if entry.turnover else 0,
            out_of_bounds=out_of_bounds,
            incomplete=incomplete,
            first_down=first_down,
            tags=entry.tags or (),
        )
