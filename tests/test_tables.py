from __future__ import annotations

import copy

import pytest

from gdsim.contracts import PenaltySide, PlayType, TurnoverType
from gdsim.core import SchemaViolation, TableGap
from gdsim.football import TableStore, TableValidator
from gdsim.football.tables import (
    RESOURCE_FILES,
    coach_profile_from_mapping,
    dump_coach_profiles,
    dump_kicking_table,
    dump_matchup_table,
    dump_penalty_table,
    dump_playbook,
    load_coach_profiles,
    load_kicking_table,
    load_matchup_table,
    load_penalty_table,
    load_playbook,
    read_resource,
)
from tests.helpers import default_tables


def test_default_tables_load_and_cross_check():
    tables = default_tables()
    assert len(tables.matchup.charts) == len(tables.matchup.offense_types) * len(tables.matchup.defense_calls)
    assert set(tables.playbook.defense_calls) <= set(tables.matchup.defense_calls)
    assert tables.kicking.max_field_goal_distance == 45
    assert tables.coaches.names() == ["Andy Reid", "Bill Belichick", "John Madden"]
    assert tables.coaches.profile("Andy Reid").onside_aggressive is True


def test_matchup_lookup_reads_the_chart():
    matchup = default_tables().matchup
    entry = matchup.lookup(PlayType.RUN, "run_defense", 7)
    assert entry.yards == 2
    assert entry.turnover is None
    pick = matchup.lookup(PlayType.PASS, "balanced", 2)
    assert pick.turnover.turnover_type == TurnoverType.INT
    assert pick.turnover.return_yards == 15
    assert matchup.lookup(PlayType.RUN, "run_defense", 10).oob is True


def test_matchup_gaps_raise_table_gap():
    matchup = default_tables().matchup
    with pytest.raises(TableGap):
        matchup.chart(PlayType.RUN, "zone_blitz")
    with pytest.raises(TableGap):
        matchup.lookup(PlayType.RUN, "run_defense", 13)


def test_penalty_entries_split_by_side_in_index_order():
    penalty = default_tables().penalty
    assert [e.index for e in penalty.entries_for(PenaltySide.OFFENSE)] == [1, 2, 3, 4, 5, 6]
    assert [e.index for e in penalty.entries_for(PenaltySide.DEFENSE)] == [7, 8, 9, 10, 11, 12]
    assert penalty.entry(10).label == "Defensive pass interference"
    with pytest.raises(TableGap):
        penalty.entry(99)


def test_kicking_lookups():
    kicking = default_tables().kicking
    assert kicking.pat_result(2) is False
    assert kicking.pat_result(3) is True
    assert kicking.band_for(20).label == "13-22"
    assert kicking.band_for(46) is None
    assert kicking.field_goal_result("39-45", 12) is True
    assert kicking.kickoff_entry(2).muffed is True
    assert kicking.onside_entry(1).recovered_by == "kicker"
    assert kicking.punt_gross(7) == 43
    assert kicking.punt_return_entry(12).fair_catch is True
    with pytest.raises(TableGap):
        kicking.field_goal_result("46-60", 7)


def test_playbook_families():
    playbook = default_tables().playbook
    assert [p.play_id for p in playbook.plays_of(PlayType.TRICK)] == ["trick_reverse", "trick_flea_flicker"]
    assert playbook.play("pa_boot").perimeter is True
    with pytest.raises(TableGap):
        playbook.play("hail_mary")


def test_loaded_tables_survive_a_dump_and_reload():
    tables = default_tables()
    assert load_matchup_table(dump_matchup_table(tables.matchup)) == tables.matchup
    assert load_penalty_table(dump_penalty_table(tables.penalty)) == tables.penalty
    assert load_kicking_table(dump_kicking_table(tables.kicking)) == tables.kicking
    assert load_playbook(dump_playbook(tables.playbook)) == tables.playbook
    assert load_coach_profiles(dump_coach_profiles(tables.coaches)) == tables.coaches


def test_schema_version_mismatch_is_reported():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["penalty"]))
    raw["version"] = "2.0"
    with pytest.raises(SchemaViolation) as exc:
        load_penalty_table(raw)
    assert "penalty.version" in exc.value.field_paths


def test_penalty_sign_and_exclusive_flags_are_rejected_together():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["penalty"]))
    raw["entries"]["3"]["yards"] = 10
    raw["entries"]["9"]["replay_down"] = True
    with pytest.raises(SchemaViolation) as exc:
        load_penalty_table(raw)
    codes = {issue.code for issue in exc.value.issues}
    assert codes == {"INCONSISTENT_SIGN", "EXCLUSIVE_FLAGS"}
    assert "penalty.entries.3.yards" in exc.value.field_paths


def test_penalty_indexes_must_be_contiguous():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["penalty"]))
    raw["entries"]["14"] = raw["entries"].pop("12")
    issues = TableValidator().validate_penalty(raw)
    assert [i.code for i in issues] == ["NON_CONTIGUOUS"]


def test_missing_roll_in_matchup_chart_is_rejected():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["matchup"]))
    del raw["charts"][0]["entries"]["7"]
    with pytest.raises(SchemaViolation) as exc:
        load_matchup_table(raw)
    assert exc.value.field_paths == ["matchup.charts[0].entries.7"]


def test_missing_chart_is_rejected():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["matchup"]))
    raw["charts"].pop()
    issues = TableValidator().validate_matchup(raw)
    assert [i.code for i in issues] == ["MISSING_CHART"]


def test_field_goal_bands_must_be_contiguous():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["kicking"]))
    raw["field_goal"]["bands"][1]["min"] = 14
    issues = TableValidator().validate_kicking(raw)
    assert [(i.code, i.field_path) for i in issues] == [("NON_CONTIGUOUS", "kicking.field_goal.bands[1]")]


def test_duplicate_play_ids_are_rejected():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["playbook"]))
    raw["plays"].append(dict(raw["plays"][0]))
    with pytest.raises(SchemaViolation) as exc:
        load_playbook(raw)
    assert exc.value.issues[0].code == "DUPLICATE_ID"


def test_overrides_replace_single_tables():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["coaches"]))
    raw["profiles"].append({"name": "Sean Payton", "aggression": 0.7, "ignoredKey": 3})
    tables = TableStore.default({"coaches": raw})
    assert tables.coaches.profile("Sean Payton").aggression == pytest.approx(0.7)
    assert tables.matchup == default_tables().matchup


def test_unknown_override_key_is_rejected():
    with pytest.raises(ValueError):
        TableStore.default({"weather": {}})


def test_playbook_defense_calls_must_exist_in_matchup():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["playbook"]))
    raw["defense_calls"].append("dime_zone")
    with pytest.raises(TableGap):
        TableStore.default({"playbook": raw})


def test_coach_profile_mapping_accepts_both_key_styles():
    camel = coach_profile_from_mapping({"name": "A", "passBias": 0.2, "onsideAggressive": True})
    snake = coach_profile_from_mapping({"name": "A", "pass_bias": 0.2, "onside_aggressive": True})
    assert camel == snake


@pytest.mark.parametrize("aggression", ["high", None, 2.0, True])
def test_malformed_aggression_is_a_schema_violation(aggression):
    with pytest.raises(SchemaViolation) as exc:
        coach_profile_from_mapping({"name": "B", "aggression": aggression})
    assert exc.value.field_paths == ["coach.aggression"]


def test_coach_profile_issues_name_the_profile_field():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["coaches"]))
    raw["profiles"][1]["passBias"] = "pass"
    raw["profiles"][2]["onsideAggressive"] = "yes"
    with pytest.raises(SchemaViolation) as exc:
        load_coach_profiles(raw)
    assert exc.value.field_paths == ["coaches.profiles[1].passBias", "coaches.profiles[2].onsideAggressive"]


def test_unhashable_enum_values_are_schema_violations():
    matchup = copy.deepcopy(read_resource(RESOURCE_FILES["matchup"]))
    matchup["offense_types"][0] = ["run"]
    with pytest.raises(SchemaViolation) as exc:
        load_matchup_table(matchup)
    assert "matchup.offense_types[0]" in exc.value.field_paths

    penalty = copy.deepcopy(read_resource(RESOURCE_FILES["penalty"]))
    penalty["entries"]["1"]["side"] = {"offense": True}
    with pytest.raises(SchemaViolation) as exc:
        load_penalty_table(penalty)
    assert "penalty.entries.1.side" in exc.value.field_paths

    playbook = copy.deepcopy(read_resource(RESOURCE_FILES["playbook"]))
    playbook["plays"][0]["type"] = ["run"]
    with pytest.raises(SchemaViolation) as exc:
        load_playbook(playbook)
    assert exc.value.field_paths == ["playbook.plays[0].type"]


def test_authored_false_flags_survive_a_dump():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["kicking"]))
    raw["kickoff"]["7"]["muffed"] = False
    raw["punt"]["return"]["7"]["fair_catch"] = False
    raw["punt"]["return"]["8"]["long_gain"] = False
    dumped = dump_kicking_table(load_kicking_table(raw))
    assert dumped["kickoff"]["7"] == {"yard_line": 25, "muffed": False}
    assert dumped["punt"]["return"]["7"] == {"yards": 8, "fair_catch": False}
    assert dumped["punt"]["return"]["8"] == {"yards": 6, "long_gain": False}
    assert "muffed" not in dumped["kickoff"]["8"]
    assert dumped == raw


def test_long_gain_rows_need_a_long_gain_table():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["kicking"]))
    del raw["punt"]["long_gain"]
    issues = TableValidator().validate_kicking(raw)
    assert [(i.code, i.field_path) for i in issues] == [("MISSING_KEY", "kicking.punt.long_gain")]


def test_long_gain_cannot_be_a_fair_catch():
    raw = copy.deepcopy(read_resource(RESOURCE_FILES["kicking"]))
    raw["punt"]["return"]["2"]["fair_catch"] = True
    issues = TableValidator().validate_kicking(raw)
    assert [(i.code, i.field_path) for i in issues] == [("EXCLUSIVE_FLAGS", "kicking.punt.return.2")]
