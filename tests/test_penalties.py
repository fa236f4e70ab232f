from __future__ import annotations

import pytest

from gdsim.contracts import FieldState, MatchupEntry, PenaltyEntry, PenaltySide, TurnoverSpec, TurnoverType
from gdsim.core import SequenceRandomSource, TableGap
from gdsim.football import PenaltyResolver, PlayResolver
from gdsim.football.tables import PenaltyTable
from tests.helpers import CLEAN, DEFENSE_FOUL, OFFENSE_FOUL, default_tables, flag


def _outcome(yards: int, spot: int = 40, down: int = 1, distance: int = 10, turnover: bool = False, clock: str = "30"):
    entry = MatchupEntry(
        yards=yards,
        clock=clock,
        turnover=TurnoverSpec(TurnoverType.INT, 10) if turnover else None,
    )
    return PlayResolver(default_tables().matchup).outcome_from_entry(entry, FieldState(spot, down, distance), roll=7)


def _resolver() -> PenaltyResolver:
    return PenaltyResolver(default_tables().penalty)


def test_clean_snap_consumes_one_draw_and_keeps_the_outcome():
    outcome = _outcome(4)
    rng = SequenceRandomSource([CLEAN])
    assert _resolver().maybe_penalty(outcome, rng) is outcome
    assert rng.consumed == 1


def test_replay_down_nullifies_the_play():
    rng = SequenceRandomSource(flag(OFFENSE_FOUL, 0))
    merged = _resolver().maybe_penalty(_outcome(12, down=2, distance=5), rng)
    assert rng.consumed == 3
    assert merged.penalty.label == "False start"
    assert merged.penalty.replay_down is True
    assert merged.yards == -5
    assert merged.play_yards == 12
    assert merged.first_down is False
    assert merged.clock_runoff == 15


def test_auto_first_down_adds_to_the_play():
    merged = _resolver().maybe_penalty(
        _outcome(2, down=3, distance=10), SequenceRandomSource(flag(DEFENSE_FOUL, 2))
    )
    assert merged.penalty.label == "Defensive holding"
    assert merged.yards == 7
    assert merged.first_down is True


def test_offensive_yardage_is_netted_against_the_gain():
    merged = _resolver().maybe_penalty(_outcome(4, down=1, distance=10), SequenceRandomSource(flag(OFFENSE_FOUL, 2)))
    assert merged.penalty.label == "Offensive holding"
    assert merged.yards == -6
    assert merged.first_down is False


def test_loss_of_down_flag_is_carried():
    merged = _resolver().maybe_penalty(_outcome(0, down=2, distance=10), SequenceRandomSource(flag(OFFENSE_FOUL, 3)))
    assert merged.penalty.loss_of_down is True
    assert merged.yards == -10


def test_offensive_foul_on_a_turnover_is_declined():
    outcome = _outcome(12, turnover=True)
    merged = _resolver().maybe_penalty(outcome, SequenceRandomSource(flag(OFFENSE_FOUL, 2)))
    assert merged.turnover is True
    assert merged.penalty.accepted is False
    assert merged.enforced_penalty is None
    assert "penalty_declined" in merged.tags


def test_defensive_foul_wipes_out_a_turnover():
    merged = _resolver().maybe_penalty(_outcome(12, turnover=True), SequenceRandomSource(flag(DEFENSE_FOUL, 3)))
    assert merged.penalty.label == "Defensive pass interference"
    assert merged.turnover is False
    assert merged.turnover_type is None
    assert merged.return_yards == 0
    assert merged.yards == 15
    assert merged.first_down is True


def test_touchdown_stands_with_a_defensive_foul():
    merged = _resolver().maybe_penalty(_outcome(10, spot=90), SequenceRandomSource(flag(DEFENSE_FOUL, 5)))
    assert merged.touchdown is True
    assert merged.end_spot == 100


def test_defensive_foul_near_the_goal_is_half_the_distance():
    merged = _resolver().maybe_penalty(_outcome(3, spot=90), SequenceRandomSource(flag(DEFENSE_FOUL, 5)))
    assert merged.penalty.label == "Face mask"
    assert merged.touchdown is False
    assert merged.yards == 6
    assert merged.end_spot == 96
    assert "half_distance" in merged.tags


def test_half_distance_still_awards_the_automatic_first_down():
    merged = _resolver().maybe_penalty(
        _outcome(0, spot=96, down=1, distance=4), SequenceRandomSource(flag(DEFENSE_FOUL, 3))
    )
    assert merged.end_spot == 98
    assert merged.first_down is True
    assert "half_distance" in merged.tags


def test_offense_declines_a_defensive_foul_on_a_touchdown():
    merged = _resolver().maybe_penalty(_outcome(20, spot=80), SequenceRandomSource(flag(DEFENSE_FOUL, 0)))
    assert merged.penalty.label == "Offside"
    assert merged.penalty.accepted is False
    assert merged.touchdown is True
    assert merged.yards == 20
    assert "penalty_declined" in merged.tags


def test_defensive_replay_foul_can_reach_the_line_to_gain():
    merged = _resolver().maybe_penalty(
        _outcome(-3, down=3, distance=2), SequenceRandomSource(flag(DEFENSE_FOUL, 0))
    )
    assert merged.penalty.accepted is True
    assert merged.yards == 5
    assert merged.first_down is True


def test_defense_declines_an_offensive_foul_that_helps_the_offense():
    merged = _resolver().maybe_penalty(
        _outcome(-8, down=3, distance=5), SequenceRandomSource(flag(OFFENSE_FOUL, 0))
    )
    assert merged.penalty.label == "False start"
    assert merged.penalty.accepted is False
    assert merged.yards == -8


def test_offensive_foul_in_own_end_zone_is_a_safety():
    merged = _resolver().maybe_penalty(_outcome(0, spot=5), SequenceRandomSource(flag(OFFENSE_FOUL, 4)))
    assert merged.penalty.label == "Illegal block in the back"
    assert merged.safety is True
    assert merged.end_spot == 0


def test_side_without_entries_is_a_table_gap():
    table = PenaltyTable(
        version="1.0",
        entries={1: PenaltyEntry(index=1, side=PenaltySide.OFFENSE, yards=-5, label="False start", replay_down=True)},
    )
    with pytest.raises(TableGap):
        PenaltyResolver(table).maybe_penalty(_outcome(3), SequenceRandomSource(flag(DEFENSE_FOUL, 0)))
