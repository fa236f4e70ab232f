from __future__ import annotations

import logging

from gdsim.contracts import KickoffResult, PuntResult, RandomSource
from gdsim.core.randomness import draw, roll_2d6, roll_die
from gdsim.core.settings import EngineSettings, default_settings
from gdsim.football.resolver import GOAL_LINE
from gdsim.football.tables import KickingTable

logger = logging.getLogger(__name__)


class KickingResolver:
    def __init__(self, table: KickingTable, settings: EngineSettings | None = None) -> None:
        self._table = table
        self._settings = settings or default_settings()

    def field_goal_distance(self, ball_spot: int) -> int:
        return GOAL_LINE - ball_spot + self._settings.field_goal_snap_yards

    def attempt_pat(self, rng: RandomSource) -> bool:
        roll = roll_2d6(rng)
        good = self._table.pat_result(roll)
        logger.debug("PAT roll=%d good=%s", roll, good)
        return good

    def attempt_field_goal(self, rng: RandomSource, distance: float) -> bool:
        """Out-of-range kicks fail without touching the random source."""
        yards = max(int(round(distance)), self._table.field_goal_bands[0].min_distance)
        band = self._table.band_for(yards)
        if band is None:
            logger.debug("field goal from %d yards is beyond range", yards)
            return False
        roll = roll_2d6(rng)
        good = self._table.field_goal_result(band.label, roll)
        logger.debug("field goal %d yards band=%s roll=%d good=%s", yards, band.label, roll, good)
        return good

    def kickoff(self, rng: RandomSource, onside: bool = False, kicker_leading_or_tied: bool = False) -> KickoffResult:
        if onside:
            face = roll_die(rng)
            if kicker_leading_or_tied:
                face = min(face + 1, 6)
            entry = self._table.onside_entry(face)
            return KickoffResult(
                receiving_yard_line=entry.yard_line,
                kicking_team_recovers=entry.recovered_by == "kicker",
                onside=True,
                roll=face,
            )
        roll = roll_2d6(rng)
        entry = self._table.kickoff_entry(roll)
        return KickoffResult(
            receiving_yard_line=entry.yard_line,
            kicking_team_recovers=bool(entry.muffed),
            onside=False,
            roll=roll,
        )

    def punt(self, rng: RandomSource, ball_spot: int) -> PuntResult:
        gross = self._table.punt_gross(roll_2d6(rng))
        landing = ball_spot + gross
        if landing >= GOAL_LINE:
            return PuntResult(
                gross_yards=gross,
                return_yards=0,
                receiving_spot=self._settings.touchback_spot,
                touchback=True,
                fair_catch=False,
            )
        return_roll = roll_2d6(rng)
        returned = self._table.punt_return_entry(return_roll)
        fair_catch = bool(returned.fair_catch)
        long_gain = bool(returned.long_gain) and not fair_catch
        if fair_catch:
            return_yards = 0
        elif long_gain:
            return_yards = self._long_gain_yards(rng)
        else:
            return_yards = returned.yards
        receiving_spot = max(1, min(GOAL_LINE - 1, GOAL_LINE - landing + return_yards))

        recovered = False
        s = self._settings
        if not fair_catch and not long_gain and return_roll <= s.punt_return_fumble_max_roll:
            if draw(rng) < s.punt_return_fumble_chance:
                recovered = draw(rng) < s.punt_return_fumble_recovery
                logger.debug("punt return fumbled at %d, kicking team recovers=%s", receiving_spot, recovered)
        return PuntResult(
            gross_yards=gross,
            return_yards=return_yards,
            receiving_spot=receiving_spot,
            touchback=False,
            fair_catch=fair_catch,
            long_gain=long_gain,
            kicking_team_recovers=recovered,
        )

    def _long_gain_yards(self, rng: RandomSource) -> int:
        face = roll_die(rng)
        entry = self._table.long_gain_entry(face)
        yards = entry.yards
        if entry.bonus_per_pip:
            yards += entry.bonus_per_pip * roll_die(rng)
        logger.debug("punt return long gain face=%d yards=%d", face, yards)
        return yards
