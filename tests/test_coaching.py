from __future__ import annotations

import pytest

from gdsim.contracts import CoachProfile, ConversionChoice, FourthDownChoice, FreeKickChoice, KickoffType, Side, Tempo
from gdsim.core import SequenceRandomSource
from gdsim.football import CoachAI, choose_weighted
from tests.helpers import default_tables, make_state, pick


def _ai() -> CoachAI:
    tables = default_tables()
    return CoachAI(tables.playbook, max_field_goal_distance=tables.kicking.max_field_goal_distance)


def _coach(name: str) -> CoachProfile:
    return default_tables().coaches.profile(name)


NEUTRAL = CoachProfile(name="Neutral")


def _trailing_kicker(deficit: int, clock: int):
    return make_state(quarter=4, clock_seconds=clock, possession=Side.HOME, score={Side.HOME: 0, Side.AWAY: deficit})


def test_onside_probability_follows_the_profile():
    ai = _ai()
    late = _trailing_kicker(7, 100)
    assert ai.onside_probability(late, _coach("Andy Reid")) == pytest.approx(0.7)
    assert ai.onside_probability(late, _coach("Bill Belichick")) == pytest.approx(0.3)


def test_big_deficit_opens_the_onside_window_earlier():
    ai = _ai()
    assert ai.onside_probability(_trailing_kicker(10, 200), _coach("John Madden")) == pytest.approx(0.3)
    assert ai.onside_probability(_trailing_kicker(7, 200), _coach("John Madden")) == 0.0


def test_big_deficit_outside_two_minutes_uses_the_aggressive_rate():
    ai = _ai()
    assert ai.onside_probability(_trailing_kicker(10, 200), _coach("Andy Reid")) == pytest.approx(0.7)
    assert ai.onside_probability(_trailing_kicker(10, 300), _coach("Andy Reid")) == 0.0


def test_no_onside_when_not_trailing():
    ai = _ai()
    tied = make_state(quarter=4, clock_seconds=30)
    rng = SequenceRandomSource([0.0])
    decision = ai.choose_kickoff(tied, _coach("Andy Reid"), rng)
    assert decision.type == KickoffType.NORMAL
    assert decision.onside_probability == 0.0
    assert rng.consumed == 1


def test_kickoff_choice_draws_against_the_probability():
    ai = _ai()
    late = _trailing_kicker(7, 100)
    assert ai.choose_kickoff(late, _coach("Andy Reid"), SequenceRandomSource([0.5])).type == KickoffType.ONSIDE
    assert ai.choose_kickoff(late, _coach("Bill Belichick"), SequenceRandomSource([0.5])).type == KickoffType.NORMAL


def test_conversion_choice():
    ai = _ai()
    down_one = make_state(score={Side.HOME: 13, Side.AWAY: 14})
    tied = make_state(score={Side.HOME: 14, Side.AWAY: 14})
    up_one_late = make_state(quarter=4, clock_seconds=200, score={Side.HOME: 15, Side.AWAY: 14})
    assert ai.choose_conversion(down_one, NEUTRAL) == ConversionChoice.TWO_POINT
    assert ai.choose_conversion(tied, NEUTRAL) == ConversionChoice.KICK
    assert ai.choose_conversion(up_one_late, _coach("Andy Reid")) == ConversionChoice.TWO_POINT
    assert ai.choose_conversion(up_one_late, _coach("Bill Belichick")) == ConversionChoice.KICK


def test_fourth_down_field_goal_in_range():
    ai = _ai()
    assert ai.choose_fourth_down(make_state(down=4, distance=6, ball_spot=75), NEUTRAL) == FourthDownChoice.FIELD_GOAL
    assert ai.choose_fourth_down(make_state(down=4, distance=6, ball_spot=72), NEUTRAL) == FourthDownChoice.FIELD_GOAL


def test_fourth_down_in_opponent_territory_goes_for_it():
    ai = _ai()
    state = make_state(down=4, distance=3, ball_spot=60)
    assert ai.choose_fourth_down(state, _coach("Andy Reid")) == FourthDownChoice.GO_FOR_IT
    assert ai.choose_fourth_down(state, _coach("Bill Belichick")) == FourthDownChoice.GO_FOR_IT


def test_fourth_down_on_own_side():
    ai = _ai()
    long_yardage = make_state(down=4, distance=6, ball_spot=30)
    short_yardage = make_state(down=4, distance=1, ball_spot=30)
    assert ai.choose_fourth_down(long_yardage, _coach("Andy Reid")) == FourthDownChoice.PUNT
    assert ai.choose_fourth_down(short_yardage, _coach("Bill Belichick")) == FourthDownChoice.PUNT
    assert ai.choose_fourth_down(short_yardage, _coach("Andy Reid")) == FourthDownChoice.GO_FOR_IT


def test_fourth_down_window_near_midfield():
    ai = _ai()
    own_40 = make_state(down=4, distance=3, ball_spot=40)
    assert ai.choose_fourth_down(own_40, _coach("Andy Reid")) == FourthDownChoice.GO_FOR_IT
    assert ai.choose_fourth_down(own_40, _coach("Bill Belichick")) == FourthDownChoice.PUNT
    too_long = make_state(down=4, distance=5, ball_spot=40)
    assert ai.choose_fourth_down(too_long, _coach("Andy Reid")) == FourthDownChoice.PUNT


def test_deep_in_own_territory_punts_unless_inches_remain():
    ai = _ai()
    assert ai.choose_fourth_down(make_state(down=4, distance=2, ball_spot=20), _coach("Andy Reid")) == FourthDownChoice.PUNT
    assert ai.choose_fourth_down(make_state(down=4, distance=1, ball_spot=20), _coach("Andy Reid")) == FourthDownChoice.GO_FOR_IT


def test_fourth_down_urgency_when_trailing_late():
    ai = _ai()
    state = make_state(quarter=4, clock_seconds=300, down=4, distance=1, ball_spot=30, score={Side.HOME: 7, Side.AWAY: 10})
    assert ai.choose_fourth_down(state, _coach("Bill Belichick")) == FourthDownChoice.GO_FOR_IT


def test_pass_probability_by_situation():
    ai = _ai()
    assert ai.pass_probability(make_state(down=1, distance=10), NEUTRAL) == pytest.approx(0.85)
    assert ai.pass_probability(make_state(down=3, distance=1), NEUTRAL) == pytest.approx(0.6)
    desperate = make_state(quarter=4, clock_seconds=90, down=3, distance=10, score={Side.HOME: 0, Side.AWAY: 7})
    assert ai.pass_probability(desperate, NEUTRAL) == pytest.approx(0.9)


def test_burn_clock_leans_on_the_run():
    ai = _ai()
    comfortable = make_state(quarter=4, clock_seconds=200, down=1, distance=2, score={Side.HOME: 17, Side.AWAY: 7})
    close = make_state(quarter=4, clock_seconds=200, down=1, distance=2, score={Side.HOME: 10, Side.AWAY: 7})
    assert ai.pass_probability(comfortable, NEUTRAL) == pytest.approx(0.15)
    assert ai.pass_probability(close, NEUTRAL) == pytest.approx(0.25)


def test_tempo_follows_the_score_late_in_a_half():
    ai = _ai()
    assert ai.choose_tempo(make_state(quarter=4, clock_seconds=200, score={Side.HOME: 0, Side.AWAY: 3})) == Tempo.HURRY_UP
    assert ai.choose_tempo(make_state(quarter=2, clock_seconds=250, score={Side.HOME: 0, Side.AWAY: 3})) == Tempo.HURRY_UP
    assert ai.choose_tempo(make_state(quarter=4, clock_seconds=200, score={Side.HOME: 10, Side.AWAY: 0})) == Tempo.BURN_CLOCK
    assert ai.choose_tempo(make_state(quarter=4, clock_seconds=200, score={Side.HOME: 8, Side.AWAY: 0})) == Tempo.NORMAL
    assert ai.choose_tempo(make_state(quarter=4, clock_seconds=400, score={Side.HOME: 0, Side.AWAY: 3})) == Tempo.NORMAL
    assert ai.choose_tempo(make_state(quarter=3, clock_seconds=100, score={Side.HOME: 0, Side.AWAY: 3})) == Tempo.NORMAL


def test_play_call_families_depend_on_aggression():
    ai = _ai()
    state = make_state(down=1, distance=10)
    bold = ai.choose_play_call(state, _coach("Andy Reid"), SequenceRandomSource([0.0, pick(6, 7)]))
    assert bold.play_id == "trick_flea_flicker"
    careful = ai.choose_play_call(state, _coach("Bill Belichick"), SequenceRandomSource([0.0, pick(4, 5)]))
    assert careful.play_id == "pa_deep_post"
    run = ai.choose_play_call(state, NEUTRAL, SequenceRandomSource([0.99, pick(0, 3)]))
    assert run.play_id == "run_inside_zone"


def test_defense_call_buckets():
    ai = _ai()
    prevent = make_state(quarter=4, clock_seconds=100, score={Side.HOME: 0, Side.AWAY: 14})
    assert ai.choose_defense_call(prevent, SequenceRandomSource([0.0])) == "pass_defense"
    assert ai.choose_defense_call(prevent, SequenceRandomSource([0.99])) == "pass_defense"
    short = make_state(down=3, distance=1, ball_spot=40)
    assert ai.choose_defense_call(short, SequenceRandomSource([0.0])) == "run_defense"
    assert ai.choose_defense_call(short, SequenceRandomSource([0.99])) == "blitz"


def test_choose_weighted():
    items = [("a", 1.0), ("b", 0.0), ("c", 3.0)]
    assert choose_weighted(SequenceRandomSource([0.1]), items) == "a"
    assert choose_weighted(SequenceRandomSource([0.5]), items) == "c"
    assert choose_weighted(SequenceRandomSource([]), [("x", 0.0), ("y", 0.0)]) == "x"


def test_safety_free_kick_choice():
    ai = _ai()
    leading = make_state(possession=Side.HOME, score={Side.HOME: 10, Side.AWAY: 2})
    trailing = make_state(possession=Side.HOME, score={Side.HOME: 0, Side.AWAY: 2})
    assert ai.choose_safety_free_kick(leading, _coach("Bill Belichick")) == FreeKickChoice.PUNT
    assert ai.choose_safety_free_kick(leading, _coach("Andy Reid")) == FreeKickChoice.KICKOFF
    assert ai.choose_safety_free_kick(trailing, _coach("Bill Belichick")) == FreeKickChoice.KICKOFF
