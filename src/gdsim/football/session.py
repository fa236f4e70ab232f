from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from gdsim.contracts import (
    CoachProfile,
    ConversionChoice,
    EventType,
    FourthDownChoice,
    FreeKickChoice,
    GameState,
    KickoffResult,
    KickoffType,
    Outcome,
    PenaltySide,
    PlayDefinition,
    PuntResult,
    RandomSource,
    Side,
    Tempo,
    TurnoverType,
)
from gdsim.core.errors import invalid_state
from gdsim.core.events import EventBus
from gdsim.core.randomness import draw, gameplay_random, seeded_random
from gdsim.core.settings import EngineSettings, default_settings
from gdsim.football.coaching import CoachAI
from gdsim.football.kicking import KickingResolver
from gdsim.football.models import GameResult, SnapRecord
from gdsim.football.penalties import PenaltyResolver
from gdsim.football.resolver import GOAL_LINE, PlayResolver
from gdsim.football.tables import TableStore

logger = logging.getLogger(__name__)

Note = tuple[EventType, dict[str, Any]]

TOUCHDOWN_POINTS = 6
FIELD_GOAL_POINTS = 3
SAFETY_POINTS = 2
EXTRA_POINT_POINTS = 1
TWO_POINT_POINTS = 2
KICKOFF_SPOT = 35
CONVERSION_SPOT = GOAL_LINE - 2
END_ZONE_DEPTH = 10
OVERTIME_QUARTER = 5


def clone_state(state: GameState) -> GameState:
    return replace(state, score=dict(state.score))


def _begin(state: GameState) -> GameState:
    """Working copy for the next snap; an untimed down lasts exactly one snap."""
    nxt = clone_state(state)
    nxt.untimed_down = False
    return nxt


def validate_state(state: GameState) -> None:
    problems: list[str] = []
    if not 1 <= state.quarter <= OVERTIME_QUARTER:
        problems.append(f"quarter {state.quarter} outside 1..{OVERTIME_QUARTER}")
    if state.clock_seconds < 0:
        problems.append(f"clock {state.clock_seconds} is negative")
    if not 1 <= state.down <= 4:
        problems.append(f"down {state.down} outside 1..4")
    if state.distance < 0:
        problems.append(f"distance {state.distance} is negative")
    if not 0 <= state.ball_spot <= GOAL_LINE:
        problems.append(f"ball spot {state.ball_spot} outside 0..{GOAL_LINE}")
    if not isinstance(state.possession, Side):
        problems.append(f"possession {state.possession!r} is not a side")
    if set(state.score) != {Side.HOME, Side.AWAY} or any(points < 0 for points in state.score.values()):
        problems.append("score must hold non-negative points for exactly home and away")
    if problems:
        printable = isinstance(state.possession, Side) and all(isinstance(side, Side) for side in state.score)
        snapshot = state.snapshot() if printable else {}
        raise invalid_state("; ".join(problems), snapshot, "validate_state")


class GameStateMachine:
    """Single owner of the GameState.

    ``apply_outcome`` is the pure transition; the orchestration methods resolve a phase
    against the tables, apply it, record the snap and publish the resulting events.
    """

    def __init__(
        self,
        tables: TableStore,
        rng: RandomSource,
        settings: EngineSettings | None = None,
        bus: EventBus | None = None,
        opening_receiver: Side = Side.HOME,
    ) -> None:
        self._settings = settings or default_settings()
        self._settings.validate()
        self._rng = rng
        self._bus = bus or EventBus()
        self._plays = PlayResolver(tables.matchup)
        self._penalties = PenaltyResolver(tables.penalty, self._settings)
        self._kicking = KickingResolver(tables.kicking, self._settings)
        self.state = self.initial_state(opening_receiver)
        self.snaps: list[SnapRecord] = []

    @property
    def bus(self) -> EventBus:
        return self._bus

    def initial_state(self, opening_receiver: Side = Side.HOME) -> GameState:
        state = GameState(
            quarter=1,
            clock_seconds=self._settings.quarter_seconds,
            down=1,
            distance=self._settings.first_down_distance,
            ball_spot=KICKOFF_SPOT,
            possession=opening_receiver.other,
            score={Side.HOME: 0, Side.AWAY: 0},
            awaiting_kickoff=True,
            opening_receiver=opening_receiver,
        )
        validate_state(state)
        return state

    def apply_outcome(self, state: GameState, outcome: Outcome, tempo: Tempo = Tempo.NORMAL) -> GameState:
        return self._transition(state, outcome, tempo)[0]

    def run_play(self, offense_call: PlayDefinition, defense_call: str, tempo: Tempo = Tempo.NORMAL) -> Outcome:
        state = self._require_scrimmage("run_play")
        outcome = self._plays.resolve_play(offense_call, defense_call, state.field_state(), self._rng)
        outcome = self._penalties.maybe_penalty(outcome, self._rng)
        nxt, notes = self._transition(state, outcome, tempo)
        result = _describe(outcome)
        notes.insert(
            0,
            (
                EventType.LOG,
                {"message": f"{state.possession.value} {offense_call.name} vs {defense_call}: {result} ({outcome.yards:+d})"},
            ),
        )
        self._commit(
            state,
            nxt,
            notes,
            kind="play",
            result=result,
            yards=outcome.yards,
            roll=outcome.roll,
            play_id=offense_call.play_id,
            defense_call=defense_call,
            penalty=outcome.penalty.label if outcome.penalty else None,
        )
        return outcome

    def attempt_field_goal(self) -> bool:
        s = self._settings
        state = self._require_scrimmage("attempt_field_goal")
        kicker = state.possession
        distance = self._kicking.field_goal_distance(state.ball_spot)
        good = self._kicking.attempt_field_goal(self._rng, distance)

        nxt = _begin(state)
        notes: list[Note] = [
            (EventType.LOG, {"message": f"{kicker.value} {distance}-yard field goal is {'good' if good else 'no good'}"})
        ]
        self._run_clock(nxt, s.field_goal_clock_seconds, notes)
        if good:
            self._add_points(nxt, kicker, FIELD_GOAL_POINTS, "field_goal", notes)
            if not nxt.game_over:
                self._prepare_kickoff(nxt, kicker)
        else:
            kick_spot = state.ball_spot - (s.field_goal_snap_yards - END_ZONE_DEPTH)
            takeover = min(GOAL_LINE - 1, max(GOAL_LINE - kick_spot, s.touchback_spot))
            self._set_possession(nxt, kicker.other, takeover, notes)
        self._close_quarter_if_expired(nxt, notes)
        validate_state(nxt)
        self._commit(state, nxt, notes, kind="field_goal", result="good" if good else "no_good", yards=distance)
        return good

    def attempt_conversion(
        self,
        two_point: bool,
        offense_call: PlayDefinition | None = None,
        defense_call: str | None = None,
    ) -> bool:
        s = self._settings
        state = self.state
        if state.game_over or not state.awaiting_conversion:
            raise invalid_state("no conversion is pending", state.snapshot(), "attempt_conversion")
        scorer = state.possession
        roll = None
        if two_point and offense_call is not None and defense_call is not None:
            outcome = self._plays.resolve_play(offense_call, defense_call, state.field_state(), self._rng)
            good = outcome.touchdown
            roll = outcome.roll
        elif two_point:
            good = draw(self._rng) < s.two_point_success_probability
        else:
            good = self._kicking.attempt_pat(self._rng)
        label = "two-point try" if two_point else "extra point"

        nxt = _begin(state)
        nxt.awaiting_conversion = False
        notes: list[Note] = [(EventType.LOG, {"message": f"{scorer.value} {label} is {'good' if good else 'no good'}"})]
        self._run_clock(nxt, s.conversion_clock_seconds, notes)
        if good:
            points = TWO_POINT_POINTS if two_point else EXTRA_POINT_POINTS
            self._add_points(nxt, scorer, points, "two_point" if two_point else "extra_point", notes)
        if not nxt.game_over:
            self._prepare_kickoff(nxt, scorer)
        self._close_quarter_if_expired(nxt, notes)
        validate_state(nxt)
        self._commit(
            state,
            nxt,
            notes,
            kind="two_point" if two_point else "extra_point",
            result="good" if good else "no_good",
            roll=roll,
            play_id=offense_call.play_id if offense_call else None,
            defense_call=defense_call,
        )
        return good

    def punt(self) -> PuntResult:
        state = self._require_scrimmage("punt")
        punter = state.possession
        result = self._kicking.punt(self._rng, state.ball_spot)

        nxt = _begin(state)
        if result.touchback:
            kind, detail = "touchback", "touchback"
        elif result.fair_catch:
            kind, detail = "fair_catch", "fair catch"
        elif result.kicking_team_recovers:
            kind, detail = "fumble_recovered", f"returned {result.return_yards}, fumbled and recovered by {punter.value}"
        elif result.long_gain:
            kind, detail = "returned", f"long return of {result.return_yards}"
        else:
            kind, detail = "returned", f"returned {result.return_yards}"
        notes: list[Note] = [(EventType.LOG, {"message": f"{punter.value} punts {result.gross_yards} yards, {detail}"})]
        self._run_clock(nxt, self._settings.punt_clock_seconds, notes)
        if result.kicking_team_recovers:
            self._set_possession(nxt, punter, GOAL_LINE - result.receiving_spot, notes)
        else:
            self._set_possession(nxt, punter.other, result.receiving_spot, notes)
        self._close_quarter_if_expired(nxt, notes)
        validate_state(nxt)
        self._commit(state, nxt, notes, kind="punt", result=kind, yards=result.gross_yards)
        return result

    def kickoff(self, kind: KickoffType = KickoffType.NORMAL) -> KickoffResult:
        state = self.state
        if state.game_over or not state.awaiting_kickoff or state.free_kick_after_safety:
            raise invalid_state("no kickoff is pending", state.snapshot(), "kickoff")
        kicker = state.possession
        result = self._kicking.kickoff(
            self._rng,
            onside=kind == KickoffType.ONSIDE,
            kicker_leading_or_tied=state.score_diff(kicker) >= 0,
        )

        nxt = _begin(state)
        nxt.awaiting_kickoff = False
        recovered_by = kicker if result.kicking_team_recovers else kicker.other
        notes: list[Note] = [
            (
                EventType.KICKOFF,
                {
                    "kicker": kicker.value,
                    "onside": result.onside,
                    "roll": result.roll,
                    "recovered_by": recovered_by.value,
                    "receiving_yard_line": result.receiving_yard_line,
                },
            )
        ]
        self._run_clock(nxt, self._settings.kickoff_clock_seconds, notes)
        if result.kicking_team_recovers:
            self._set_possession(nxt, kicker, GOAL_LINE - result.receiving_yard_line, notes)
        else:
            self._set_possession(nxt, kicker.other, result.receiving_yard_line, notes)
        self._close_quarter_if_expired(nxt, notes)
        validate_state(nxt)
        self._commit(
            state,
            nxt,
            notes,
            kind="onside_kick" if result.onside else "kickoff",
            result="recovered" if result.kicking_team_recovers else "received",
            roll=result.roll,
        )
        return result

    def safety_free_kick(self, choice: FreeKickChoice) -> int:
        s = self._settings
        state = self.state
        if state.game_over or not state.free_kick_after_safety:
            raise invalid_state("no safety free kick is pending", state.snapshot(), "safety_free_kick")
        kicker = state.possession
        spot = s.kickoff_spot_after_safety if choice == FreeKickChoice.KICKOFF else s.punt_spot_after_safety

        nxt = _begin(state)
        nxt.awaiting_kickoff = False
        nxt.free_kick_after_safety = False
        notes: list[Note] = [
            (
                EventType.KICKOFF,
                {"kicker": kicker.value, "free_kick": choice.value, "recovered_by": kicker.other.value, "receiving_yard_line": spot},
            )
        ]
        self._run_clock(nxt, s.kickoff_clock_seconds if choice == FreeKickChoice.KICKOFF else s.punt_clock_seconds, notes)
        self._set_possession(nxt, kicker.other, spot, notes)
        self._close_quarter_if_expired(nxt, notes)
        validate_state(nxt)
        self._commit(state, nxt, notes, kind="free_kick", result=choice.value)
        return spot

    def _transition(self, state: GameState, outcome: Outcome, tempo: Tempo = Tempo.NORMAL) -> tuple[GameState, list[Note]]:
        validate_state(state)
        nxt = _begin(state)
        notes: list[Note] = []
        offense = state.possession
        penalty = outcome.penalty
        if penalty is not None:
            notes.append(
                (
                    EventType.PENALTY,
                    {
                        "label": penalty.label,
                        "side": penalty.side.value,
                        "yards": penalty.yards,
                        "loss_of_down": penalty.loss_of_down,
                        "replay_down": penalty.replay_down,
                        "auto_first_down": penalty.auto_first_down,
                        "accepted": penalty.accepted,
                    },
                )
            )
        self._run_clock(nxt, self._play_clock(state, outcome, tempo), notes)

        if outcome.turnover:
            defense = offense.other
            spot = GOAL_LINE - (state.ball_spot + outcome.yards) + outcome.return_yards
            if spot >= GOAL_LINE:
                self._set_possession(nxt, defense, GOAL_LINE, notes)
                self._touchdown(nxt, defense, "defensive_touchdown", notes)
            elif spot <= 0:
                self._set_possession(nxt, defense, self._settings.touchback_spot, notes)
            else:
                self._set_possession(nxt, defense, spot, notes)
        elif outcome.touchdown:
            nxt.ball_spot = GOAL_LINE
            self._touchdown(nxt, offense, "touchdown", notes)
        elif outcome.safety:
            self._safety(nxt, offense, notes)
        else:
            self._advance_downs(nxt, state, outcome, notes)

        if self._grants_untimed_down(state, nxt, outcome):
            nxt.untimed_down = True
            notes.append((EventType.LOG, {"message": f"untimed down for {offense.value} after a defensive foul"}))
        else:
            self._close_quarter_if_expired(nxt, notes)
        validate_state(nxt)
        return nxt, notes

    def _play_clock(self, state: GameState, outcome: Outcome, tempo: Tempo) -> int:
        """Seconds a scrimmage snap takes once stoppages and tempo are applied."""
        s = self._settings
        seconds = outcome.clock_runoff
        if outcome.enforced_penalty is not None:
            return seconds
        stopped = outcome.incomplete or outcome.out_of_bounds
        if self._in_two_minute(state) and (stopped or outcome.first_down or outcome.touchdown):
            return 0
        if tempo == Tempo.HURRY_UP:
            return max(s.hurry_up_min_seconds, round(seconds * s.hurry_up_factor))
        if tempo == Tempo.BURN_CLOCK and not (stopped or outcome.turnover):
            return min(max(seconds, s.burn_clock_min_seconds), s.burn_clock_max_seconds)
        return seconds

    def _in_two_minute(self, state: GameState) -> bool:
        return state.quarter in (2, 4) and state.clock_seconds <= self._settings.two_minute_warning_seconds

    def _grants_untimed_down(self, pre: GameState, nxt: GameState, outcome: Outcome) -> bool:
        """A regulation period cannot end on an accepted defensive foul."""
        penalty = outcome.enforced_penalty
        if penalty is None or penalty.side != PenaltySide.DEFENSE:
            return False
        if pre.quarter > 4 or nxt.clock_seconds > 0 or nxt.possession != pre.possession:
            return False
        return not (nxt.game_over or nxt.awaiting_kickoff or nxt.awaiting_conversion)

    def _advance_downs(self, nxt: GameState, pre: GameState, outcome: Outcome, notes: list[Note]) -> None:
        penalty = outcome.enforced_penalty
        spot = pre.ball_spot + outcome.yards
        to_goal = GOAL_LINE - spot
        nxt.ball_spot = spot
        if outcome.first_down:
            nxt.down = 1
            nxt.distance = min(self._settings.first_down_distance, to_goal)
        elif penalty is not None and penalty.replay_down:
            # Same down, same line to gain.
            nxt.down = pre.down
            nxt.distance = pre.distance - outcome.yards
        else:
            down = pre.down + 1
            if penalty is not None and penalty.loss_of_down:
                down += 1
            if down > 4:
                notes.append((EventType.LOG, {"message": f"{pre.possession.value} turns it over on downs"}))
                self._set_possession(nxt, pre.possession.other, GOAL_LINE - spot, notes)
                return
            nxt.down = down
            nxt.distance = pre.distance - outcome.yards
        notes.append((EventType.DOWN, {"down": nxt.down, "distance": nxt.distance, "ball_spot": nxt.ball_spot}))

    def _touchdown(self, state: GameState, scorer: Side, reason: str, notes: list[Note]) -> None:
        state.possession = scorer
        self._add_points(state, scorer, TOUCHDOWN_POINTS, reason, notes)
        if state.game_over:
            return
        state.awaiting_conversion = True
        state.ball_spot = CONVERSION_SPOT
        state.down = 1
        state.distance = GOAL_LINE - CONVERSION_SPOT

    def _safety(self, state: GameState, conceding: Side, notes: list[Note]) -> None:
        self._add_points(state, conceding.other, SAFETY_POINTS, "safety", notes)
        if state.game_over:
            return
        self._prepare_kickoff(state, conceding)
        state.ball_spot = self._settings.touchback_spot
        state.free_kick_after_safety = True

    def _add_points(self, state: GameState, side: Side, points: int, reason: str, notes: list[Note]) -> None:
        state.score[side] += points
        notes.append(
            (
                EventType.SCORE,
                {
                    "side": side.value,
                    "points": points,
                    "reason": reason,
                    "home": state.score[Side.HOME],
                    "away": state.score[Side.AWAY],
                },
            )
        )
        if state.is_overtime:
            self._finish(state, notes)

    def _set_possession(self, state: GameState, side: Side, spot: int, notes: list[Note]) -> None:
        if side != state.possession:
            notes.append((EventType.POSSESSION, {"side": side.value, "ball_spot": spot}))
        state.possession = side
        state.ball_spot = spot
        state.down = 1
        state.distance = min(self._settings.first_down_distance, GOAL_LINE - spot)

    def _prepare_kickoff(self, state: GameState, kicker: Side) -> None:
        state.awaiting_kickoff = True
        state.free_kick_after_safety = False
        state.possession = kicker
        state.ball_spot = KICKOFF_SPOT
        state.down = 1
        state.distance = self._settings.first_down_distance

    def _run_clock(self, state: GameState, seconds: int, notes: list[Note]) -> None:
        if seconds <= 0:
            return
        warning = self._settings.two_minute_warning_seconds
        before = state.clock_seconds
        state.clock_seconds = max(0, before - seconds)
        if state.quarter in (2, 4) and not state.two_minute_warned and before > warning >= state.clock_seconds:
            state.clock_seconds = warning
            state.two_minute_warned = True
            notes.append((EventType.TWO_MINUTE_WARNING, {"quarter": state.quarter}))
        notes.append((EventType.CLOCK, {"quarter": state.quarter, "clock_seconds": state.clock_seconds}))

    def _close_quarter_if_expired(self, state: GameState, notes: list[Note]) -> None:
        s = self._settings
        if state.game_over or state.clock_seconds > 0 or state.awaiting_conversion:
            return
        ended = state.quarter
        notes.append((EventType.END_OF_QUARTER, {"quarter": ended}))
        if ended in (1, 3):
            state.quarter += 1
            state.clock_seconds = s.quarter_seconds
            state.two_minute_warned = False
        elif ended == 2:
            notes.append((EventType.HALFTIME, {"home": state.score[Side.HOME], "away": state.score[Side.AWAY]}))
            state.quarter = 3
            state.clock_seconds = s.quarter_seconds
            state.two_minute_warned = False
            self._prepare_kickoff(state, state.opening_receiver)
        elif ended == 4 and s.overtime_enabled and state.score[Side.HOME] == state.score[Side.AWAY]:
            state.quarter = OVERTIME_QUARTER
            state.clock_seconds = s.overtime_seconds
            state.is_overtime = True
            self._prepare_kickoff(state, state.opening_receiver.other)
        else:
            self._finish(state, notes)

    def _finish(self, state: GameState, notes: list[Note]) -> None:
        state.game_over = True
        state.clock_seconds = 0
        state.awaiting_conversion = False
        state.awaiting_kickoff = False
        state.free_kick_after_safety = False
        notes.append((EventType.FINAL, {"home": state.score[Side.HOME], "away": state.score[Side.AWAY]}))

    def _require_scrimmage(self, phase: str) -> GameState:
        state = self.state
        if state.game_over or state.awaiting_kickoff or state.awaiting_conversion:
            raise invalid_state(f"{phase} requires a live ball at scrimmage", state.snapshot(), phase)
        return state

    def _commit(self, pre: GameState, nxt: GameState, notes: list[Note], *, kind: str, result: str, **fields: Any) -> None:
        self.state = nxt
        record = SnapRecord(
            snap=len(self.snaps) + 1,
            quarter=pre.quarter,
            clock_seconds=pre.clock_seconds,
            possession=pre.possession,
            kind=kind,
            result=result,
            home_score=nxt.score[Side.HOME],
            away_score=nxt.score[Side.AWAY],
            **fields,
        )
        self.snaps.append(record)
        logger.debug("snap %d %s -> %s", record.snap, kind, result)
        for event_type, payload in notes:
            self._bus.emit(event_type, **payload)


def _describe(outcome: Outcome) -> str:
    if outcome.turnover:
        return "interception" if outcome.turnover_type == TurnoverType.INT else "fumble"
    if outcome.touchdown:
        return "touchdown"
    if outcome.safety:
        return "safety"
    if outcome.incomplete:
        return "incomplete"
    if outcome.first_down:
        return "first_down"
    if outcome.yards < 0:
        return "loss"
    return "gain"


class GameSession:
    """Auto-plays a full game with a CoachAI on each sideline; use one session per game."""

    def __init__(
        self,
        tables: TableStore | None = None,
        *,
        seed: int | None = None,
        rng: RandomSource | None = None,
        settings: EngineSettings | None = None,
        bus: EventBus | None = None,
        opening_receiver: Side = Side.HOME,
    ) -> None:
        self._tables = tables or TableStore.default()
        self._settings = settings or default_settings()
        self._seed = seed
        self._rng = rng or (seeded_random(seed) if seed is not None else gameplay_random())
        self._bus = bus or EventBus()
        self._opening_receiver = opening_receiver
        self._coach_ai = CoachAI(self._tables.playbook, self._settings, self._tables.kicking.max_field_goal_distance)
        self.machine: GameStateMachine | None = None

    def play_game(
        self,
        home_coach: CoachProfile | str,
        away_coach: CoachProfile | str,
        max_snaps: int | None = None,
    ) -> GameResult:
        limit = max_snaps or self._settings.max_snaps
        coaches = {Side.HOME: self._profile(home_coach), Side.AWAY: self._profile(away_coach)}
        machine = GameStateMachine(self._tables, self._rng, self._settings, self._bus, self._opening_receiver)
        self.machine = machine
        logger.info("kickoff: %s (home) vs %s (away)", coaches[Side.HOME].name, coaches[Side.AWAY].name)

        while not machine.state.game_over:
            if len(machine.snaps) >= limit:
                raise invalid_state(f"game did not finish within {limit} snaps", machine.state.snapshot(), "play_game")
            self._step(machine, coaches)

        final = clone_state(machine.state)
        logger.info("final: home %d, away %d after %d snaps", final.score[Side.HOME], final.score[Side.AWAY], len(machine.snaps))
        return GameResult(
            final_state=final,
            home_coach=coaches[Side.HOME].name,
            away_coach=coaches[Side.AWAY].name,
            seed=self._seed,
            snaps=list(machine.snaps),
            events=self._bus.events(),
        )

    def _profile(self, coach: CoachProfile | str) -> CoachProfile:
        if isinstance(coach, CoachProfile):
            coach.validate()
            return coach
        return self._tables.coaches.profile(coach)

    def _step(self, machine: GameStateMachine, coaches: dict[Side, CoachProfile]) -> None:
        ai = self._coach_ai
        state = machine.state
        coach = coaches[state.possession]
        if state.awaiting_conversion:
            choice = ai.choose_conversion(state, coach)
            machine.attempt_conversion(choice == ConversionChoice.TWO_POINT)
            return
        if state.awaiting_kickoff:
            if state.free_kick_after_safety:
                machine.safety_free_kick(ai.choose_safety_free_kick(state, coach))
            else:
                machine.kickoff(ai.choose_kickoff(state, coach, self._rng).type)
            return
        if state.down == 4:
            choice = ai.choose_fourth_down(state, coach)
            if choice == FourthDownChoice.FIELD_GOAL:
                machine.attempt_field_goal()
                return
            if choice == FourthDownChoice.PUNT:
                machine.punt()
                return
        play = ai.choose_play_call(state, coach, self._rng)
        defense_call = ai.choose_defense_call(state, self._rng)
        tempo = ai.choose_tempo(state)
        self._bus.emit(
            EventType.HAND_UPDATE,
            side=state.possession.value,
            play_id=play.play_id,
            defense_call=defense_call,
            tempo=tempo.value,
        )
        machine.run_play(play, defense_call, tempo)
