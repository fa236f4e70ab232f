from __future__ import annotations

import logging
import math
from dataclasses import replace

from gdsim.contracts import Outcome, PenaltyResult, PenaltySide, RandomSource
from gdsim.core.errors import table_gap
from gdsim.core.randomness import draw
from gdsim.core.settings import EngineSettings, default_settings
from gdsim.football.resolver import GOAL_LINE, clock_runoff
from gdsim.football.tables import PenaltyTable

logger = logging.getLogger(__name__)

# Offense-side valuation used to accept or decline a flag.
SCORE_VALUE = 100.0
DOWN_VALUES = {1: 5.0, 2: 2.0, 3: 0.0, 4: -3.0}
TO_GO_WEIGHT = 0.2


class PenaltyResolver:
    """Rolls for a flag after a snap and merges any enforced yardage into the outcome.

    Draw order is fixed: occurrence, then side, then the entry among that side's rows.
    A clean play consumes exactly one draw.
    """

    def __init__(self, table: PenaltyTable, settings: EngineSettings | None = None) -> None:
        self._table = table
        self._settings = settings or default_settings()

    def maybe_penalty(self, outcome: Outcome, rng: RandomSource) -> Outcome:
        if draw(rng) >= self._settings.penalty_occurrence:
            return outcome
        side = PenaltySide.OFFENSE if draw(rng) < self._settings.penalty_offense_share else PenaltySide.DEFENSE
        candidates = self._table.entries_for(side)
        if not candidates:
            raise table_gap("penalty", side.value, f"penalty table has no {side.value} entries")
        entry = candidates[min(int(math.floor(draw(rng) * len(candidates))), len(candidates) - 1)]
        penalty = PenaltyResult(
            index=entry.index,
            side=entry.side,
            yards=entry.yards,
            label=entry.label,
            loss_of_down=bool(entry.loss_of_down),
            replay_down=bool(entry.replay_down),
            auto_first_down=bool(entry.auto_first_down),
        )
        logger.debug("penalty %s (%s, %d yards)", penalty.label, penalty.side.value, penalty.yards)
        return self.merge(outcome, penalty)

    def merge(self, outcome: Outcome, penalty: PenaltyResult) -> Outcome:
        """Enforce the foul, then let the fouled side keep whichever result suits it better."""
        if outcome.turnover or penalty.replay_down:
            accepted = self._nullified(outcome, penalty)
        else:
            accepted = self._enforced(outcome, penalty)
        declined = replace(outcome, tags=outcome.tags + ("penalty_declined",), penalty=replace(penalty, accepted=False))

        margin = self._settings.penalty_decline_margin
        accept_value = self._offense_value(accepted)
        decline_value = self._offense_value(declined)
        if penalty.side == PenaltySide.DEFENSE:
            keep_play = decline_value > accept_value + margin
        else:
            keep_play = decline_value < accept_value - margin
        logger.debug(
            "%s %s (accept %.1f, decline %.1f)",
            penalty.label,
            "declined" if keep_play else "accepted",
            accept_value,
            decline_value,
        )
        return declined if keep_play else accepted

    def _march(self, base: int, penalty: PenaltyResult) -> tuple[int, bool]:
        """Penalty yards from ``base``; a defensive foul moves at most half the distance to the goal."""
        if penalty.side == PenaltySide.DEFENSE:
            cap = (GOAL_LINE - base) // 2
            if penalty.yards > cap:
                return cap, True
        return penalty.yards, False

    def _enforced(self, outcome: Outcome, penalty: PenaltyResult) -> Outcome:
        spot = outcome.field.ball_spot
        yards, halved = self._march(spot + outcome.yards, penalty)
        net = outcome.yards + yards
        safety = False
        if spot + net <= 0:
            if penalty.side == PenaltySide.OFFENSE:
                net = -spot
                safety = True
            else:
                net = 1 - spot
        first_down = penalty.auto_first_down or net >= outcome.field.distance
        return replace(
            outcome,
            yards=net,
            touchdown=outcome.touchdown and spot + net >= GOAL_LINE,
            safety=safety,
            first_down=first_down,
            clock_runoff=clock_runoff(outcome.out_of_bounds, outcome.incomplete, first_down),
            tags=outcome.tags + ("half_distance",) if halved else outcome.tags,
            penalty=penalty,
        )

    def _nullified(self, outcome: Outcome, penalty: PenaltyResult) -> Outcome:
        spot = outcome.field.ball_spot
        net, halved = self._march(spot, penalty)
        safety = False
        if spot + net <= 0:
            if penalty.side == PenaltySide.OFFENSE:
                net = -spot
                safety = True
            else:
                net = 1 - spot
        return replace(
            outcome,
            yards=net,
            touchdown=False,
            safety=safety,
            turnover=False,
            turnover_type=None,
            return_yards=0,
            out_of_bounds=False,
            incomplete=False,
            first_down=penalty.auto_first_down or net >= outcome.field.distance,
            clock_runoff=self._settings.penalty_clock_seconds,
            tags=outcome.tags + ("half_distance",) if halved else outcome.tags,
            penalty=penalty,
        )

    def _offense_value(self, outcome: Outcome) -> float:
        """How good a result is for the offense: field position plus the down it leaves."""
        if outcome.touchdown:
            return SCORE_VALUE
        if outcome.safety:
            return -SCORE_VALUE
        if outcome.turnover:
            return outcome.yards - SCORE_VALUE
        field = outcome.field
        penalty = outcome.enforced_penalty
        if outcome.first_down:
            down = 1
            to_go = min(self._settings.first_down_distance, GOAL_LINE - outcome.end_spot)
        else:
            down = field.down if penalty is not None and penalty.replay_down else field.down + 1
            if penalty is not None and penalty.loss_of_down:
                down += 1
            to_go = field.distance - outcome.yards
        if down > 4:
            return outcome.yards - SCORE_VALUE
        return outcome.yards + DOWN_VALUES[down] + max(0, self._settings.first_down_distance - to_go) * TO_GO_WEIGHT
