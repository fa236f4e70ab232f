from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from gdsim.contracts import PenaltySide, PlayDepth, PlayType, RiskProfile, TurnoverType, ValidationIssue
from gdsim.core.errors import SchemaViolation

EXPECTED_SCHEMA_VERSION = "1.0"
ROLL_SUMS = tuple(range(2, 13))
D6_FACES = tuple(range(1, 7))
CLOCK_VALUES = {"10", "20", "30"}
PENALTY_FLAGS = ("loss_of_down", "replay_down", "auto_first_down")

# Profile keys accepted from raw mappings, camelCase as authored and snake_case as dumped.
PROFILE_KEYS = {
    "onsideAggressive": "onside_aggressive",
    "onside_aggressive": "onside_aggressive",
    "twoPointAggressiveLate": "two_point_aggressive_late",
    "two_point_aggressive_late": "two_point_aggressive_late",
    "aggression": "aggression",
    "fourthDownBoost": "fourth_down_boost",
    "fourth_down_boost": "fourth_down_boost",
    "passBias": "pass_bias",
    "pass_bias": "pass_bias",
}
PROFILE_FLAGS = {"onside_aggressive", "two_point_aggressive_late"}
PROFILE_RANGES = {
    "aggression": (0.0, 1.0),
    "fourth_down_boost": (0.0, math.inf),
    "pass_bias": (-1.0, 1.0),
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _is_member(value: Any, allowed: Iterable[str]) -> bool:
    return isinstance(value, str) and value in allowed


def _issue(code: str, field_path: str, entity_id: str, message: str) -> ValidationIssue:
    return ValidationIssue(code=code, severity="blocking", field_path=field_path, entity_id=entity_id, message=message)


class TableValidator:
    """Schema checks for every table kind; collects all issues before failing."""

    def validate_matchup(self, raw: Any) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if not isinstance(raw, Mapping):
            return [_issue("INVALID_TABLE", "matchup", "matchup", "matchup table must be a mapping")]
        issues.extend(self._validate_version(raw, "matchup"))
        if raw.get("dice") != "2d6":
            issues.append(_issue("INVALID_DICE", "matchup.dice", "matchup", "dice must be '2d6'"))

        offense_types = raw.get("offense_types")
        defense_calls = raw.get("defense_calls")
        charts = raw.get("charts")
        if not isinstance(offense_types, list) or not offense_types:
            issues.append(_issue("MISSING_KEY", "matchup.offense_types", "matchup", "offense_types must be a non-empty list"))
            offense_types = []
        if not isinstance(defense_calls, list) or not defense_calls or not all(isinstance(c, str) and c for c in defense_calls):
            issues.append(_issue("MISSING_KEY", "matchup.defense_calls", "matchup", "defense_calls must be a non-empty list of strings"))
            defense_calls = []
        if not isinstance(charts, list):
            issues.append(_issue("MISSING_KEY", "matchup.charts", "matchup", "charts must be a list"))
            charts = []

        valid_types = {t.value for t in PlayType}
        for idx, value in enumerate(offense_types):
            if not _is_member(value, valid_types):
                issues.append(
                    _issue("OUT_OF_RANGE", f"matchup.offense_types[{idx}]", "matchup", f"unsupported offense type '{value}'")
                )

        seen: set[tuple[str, str]] = set()
        for idx, chart in enumerate(charts):
            path = f"matchup.charts[{idx}]"
            if not isinstance(chart, Mapping):
                issues.append(_issue("WRONG_TYPE", path, "matchup", "chart must be a mapping"))
                continue
            offense_type = chart.get("offense_type")
            defense_call = chart.get("defense_call")
            if offense_type not in offense_types:
                issues.append(_issue("OUT_OF_RANGE", f"{path}.offense_type", "matchup", f"offense_type '{offense_type}' not declared"))
            if defense_call not in defense_calls:
                issues.append(_issue("OUT_OF_RANGE", f"{path}.defense_call", "matchup", f"defense_call '{defense_call}' not declared"))
            key = (str(offense_type), str(defense_call))
            if key in seen:
                issues.append(_issue("DUPLICATE_CHART", path, "matchup", f"duplicate chart for {key[0]} x {key[1]}"))
            seen.add(key)
            issues.extend(self._validate_matchup_entries(chart.get("entries"), f"{path}.entries"))

        for offense_type in offense_types:
            for defense_call in defense_calls:
                if (str(offense_type), str(defense_call)) not in seen:
                    issues.append(
                        _issue(
                            "MISSING_CHART",
                            "matchup.charts",
                            "matchup",
                            f"no chart for {offense_type} x {defense_call}",
                        )
                    )
        return issues

    def validate_penalty(self, raw: Any) -> list[ValidationIssue]:
        if not isinstance(raw, Mapping):
            return [_issue("INVALID_TABLE", "penalty", "penalty", "penalty table must be a mapping")]
        issues = self._validate_version(raw, "penalty")
        entries = raw.get("entries")
        if not isinstance(entries, Mapping) or not entries:
            issues.append(_issue("MISSING_KEY", "penalty.entries", "penalty", "entries must be a non-empty mapping"))
            return issues

        indexes: list[int] = []
        for key, entry in entries.items():
            path = f"penalty.entries.{key}"
            if not str(key).isdigit() or int(key) < 1:
                issues.append(_issue("OUT_OF_RANGE", path, "penalty", "entry keys must be positive integers"))
                continue
            indexes.append(int(key))
            if not isinstance(entry, Mapping):
                issues.append(_issue("WRONG_TYPE", path, "penalty", "entry must be a mapping"))
                continue
            side = entry.get("side")
            if not _is_member(side, {s.value for s in PenaltySide}):
                issues.append(_issue("OUT_OF_RANGE", f"{path}.side", "penalty", f"side must be offense or defense, got '{side}'"))
            yards = entry.get("yards")
            if not _is_int(yards):
                issues.append(_issue("WRONG_TYPE", f"{path}.yards", "penalty", "yards must be an integer"))
            elif side == PenaltySide.OFFENSE.value and yards > 0:
                issues.append(_issue("INCONSISTENT_SIGN", f"{path}.yards", "penalty", "offense penalties must not gain yards"))
            elif side == PenaltySide.DEFENSE.value and yards < 0:
                issues.append(_issue("INCONSISTENT_SIGN", f"{path}.yards", "penalty", "defense penalties must not lose yards"))
            label = entry.get("label")
            if not isinstance(label, str) or not label:
                issues.append(_issue("MISSING_KEY", f"{path}.label", "penalty", "label must be a non-empty string"))
            set_flags = []
            for flag in PENALTY_FLAGS:
                if flag not in entry:
                    continue
                if not isinstance(entry[flag], bool):
                    issues.append(_issue("WRONG_TYPE", f"{path}.{flag}", "penalty", f"{flag} must be boolean"))
                elif entry[flag]:
                    set_flags.append(flag)
            if len(set_flags) > 1:
                issues.append(
                    _issue("EXCLUSIVE_FLAGS", path, "penalty", f"flags are mutually exclusive: {', '.join(set_flags)}")
                )

        if indexes and sorted(indexes) != list(range(1, len(indexes) + 1)):
            issues.append(_issue("NON_CONTIGUOUS", "penalty.entries", "penalty", "entry keys must run 1..N without gaps"))
        return issues

    def validate_kicking(self, raw: Any) -> list[ValidationIssue]:
        if not isinstance(raw, Mapping):
            return [_issue("INVALID_TABLE", "kicking", "kicking", "kicking table must be a mapping")]
        issues = self._validate_version(raw, "kicking")
        issues.extend(self._validate_bool_rows(raw.get("pat"), "kicking.pat", ROLL_SUMS))

        field_goal = raw.get("field_goal")
        if not isinstance(field_goal, Mapping):
            issues.append(_issue("MISSING_KEY", "kicking.field_goal", "kicking", "field_goal must be a mapping"))
        else:
            bands = field_goal.get("bands")
            results = field_goal.get("results")
            labels = self._validate_bands(bands, issues)
            if not isinstance(results, Mapping):
                issues.append(_issue("MISSING_KEY", "kicking.field_goal.results", "kicking", "results must be a mapping"))
            else:
                for label in labels:
                    issues.extend(self._validate_bool_rows(results.get(label), f"kicking.field_goal.results.{label}", ROLL_SUMS))

        if "kickoff" in raw:
            issues.extend(self._validate_kickoff(raw["kickoff"]))
        if "onside" in raw:
            issues.extend(self._validate_onside(raw["onside"]))
        if "punt" in raw:
            issues.extend(self._validate_punt(raw["punt"]))
        return issues

    def validate_playbook(self, raw: Any) -> list[ValidationIssue]:
        if not isinstance(raw, Mapping):
            return [_issue("INVALID_TABLE", "playbook", "playbook", "playbook must be a mapping")]
        issues = self._validate_version(raw, "playbook")
        plays = raw.get("plays")
        if not isinstance(plays, list) or not plays:
            issues.append(_issue("MISSING_KEY", "playbook.plays", "playbook", "plays must be a non-empty list"))
            plays = []
        seen: set[str] = set()
        for idx, play in enumerate(plays):
            path = f"playbook.plays[{idx}]"
            if not isinstance(play, Mapping):
                issues.append(_issue("WRONG_TYPE", path, "playbook", "play must be a mapping"))
                continue
            play_id = play.get("id")
            if not isinstance(play_id, str) or not play_id:
                issues.append(_issue("MISSING_KEY", f"{path}.id", "playbook", "id must be a non-empty string"))
            elif play_id in seen:
                issues.append(_issue("DUPLICATE_ID", f"{path}.id", play_id, f"duplicate play id '{play_id}'"))
            else:
                seen.add(play_id)
            if not isinstance(play.get("name"), str):
                issues.append(_issue("MISSING_KEY", f"{path}.name", str(play_id), "name must be a string"))
            issues.extend(self._validate_enum(play.get("type"), PlayType, f"{path}.type", str(play_id)))
            issues.extend(self._validate_enum(play.get("depth"), PlayDepth, f"{path}.depth", str(play_id)))
            issues.extend(self._validate_enum(play.get("risk"), RiskProfile, f"{path}.risk", str(play_id)))
            if "perimeter" in play and not isinstance(play["perimeter"], bool):
                issues.append(_issue("WRONG_TYPE", f"{path}.perimeter", str(play_id), "perimeter must be boolean"))
        defense_calls = raw.get("defense_calls")
        if not isinstance(defense_calls, list) or not defense_calls or not all(isinstance(c, str) for c in defense_calls):
            issues.append(_issue("MISSING_KEY", "playbook.defense_calls", "playbook", "defense_calls must be a non-empty list"))
        return issues

    def validate_coach_profiles(self, raw: Any) -> list[ValidationIssue]:
        if not isinstance(raw, Mapping):
            return [_issue("INVALID_TABLE", "coaches", "coaches", "coach profile document must be a mapping")]
        issues = self._validate_version(raw, "coaches")
        profiles = raw.get("profiles")
        if not isinstance(profiles, list) or not profiles:
            issues.append(_issue("MISSING_KEY", "coaches.profiles", "coaches", "profiles must be a non-empty list"))
            return issues
        seen: set[str] = set()
        for idx, profile in enumerate(profiles):
            path = f"coaches.profiles[{idx}]"
            profile_issues = self.validate_coach_profile(profile, path)
            issues.extend(profile_issues)
            if profile_issues:
                continue
            if profile["name"] in seen:
                issues.append(_issue("DUPLICATE_ID", f"{path}.name", profile["name"], f"duplicate coach '{profile['name']}'"))
            seen.add(profile["name"])
        return issues

    def validate_coach_profile(self, raw: Any, path: str) -> list[ValidationIssue]:
        if not isinstance(raw, Mapping):
            return [_issue("WRONG_TYPE", path, "coaches", "profile must be a mapping")]
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            return [_issue("MISSING_KEY", f"{path}.name", "coaches", "profile requires a name")]
        issues: list[ValidationIssue] = []
        for key, value in raw.items():
            target = PROFILE_KEYS.get(key)
            if target is None:
                continue
            field_path = f"{path}.{key}"
            if target in PROFILE_FLAGS:
                if not isinstance(value, bool):
                    issues.append(_issue("WRONG_TYPE", field_path, name, f"{key} must be boolean"))
                continue
            if not _is_number(value):
                issues.append(_issue("WRONG_TYPE", field_path, name, f"{key} must be a number"))
                continue
            low, high = PROFILE_RANGES[target]
            if not low <= value <= high:
                bounds = "non-negative" if high == math.inf else f"within [{low}, {high}]"
                issues.append(_issue("OUT_OF_RANGE", field_path, name, f"{key} must be {bounds}"))
        return issues

    def _validate_version(self, raw: Mapping[str, Any], table: str) -> list[ValidationIssue]:
        version = raw.get("version")
        if version != EXPECTED_SCHEMA_VERSION:
            return [
                _issue(
                    "SCHEMA_VERSION_MISMATCH",
                    f"{table}.version",
                    table,
                    f"expected version '{EXPECTED_SCHEMA_VERSION}', got '{version}'",
                )
            ]
        return []

    def _validate_matchup_entries(self, entries: Any, path: str) -> list[ValidationIssue]:
        if not isinstance(entries, Mapping):
            return [_issue("MISSING_KEY", path, "matchup", "entries must be a mapping")]
        issues: list[ValidationIssue] = []
        for key in entries:
            if not str(key).isdigit() or int(key) not in ROLL_SUMS:
                issues.append(_issue("OUT_OF_RANGE", f"{path}.{key}", "matchup", "roll sums must be within 2..12"))
        for roll in ROLL_SUMS:
            entry = entries.get(str(roll))
            entry_path = f"{path}.{roll}"
            if entry is None:
                issues.append(_issue("MISSING_KEY", entry_path, "matchup", f"no entry for roll {roll}"))
                continue
            if not isinstance(entry, Mapping):
                issues.append(_issue("WRONG_TYPE", entry_path, "matchup", "entry must be a mapping"))
                continue
            if not _is_int(entry.get("yards")):
                issues.append(_issue("WRONG_TYPE", f"{entry_path}.yards", "matchup", "yards must be an integer"))
            if not _is_member(entry.get("clock"), CLOCK_VALUES):
                issues.append(_issue("OUT_OF_RANGE", f"{entry_path}.clock", "matchup", "clock must be '10', '20' or '30'"))
            for flag in ("oob", "incomplete"):
                if flag in entry and not isinstance(entry[flag], bool):
                    issues.append(_issue("WRONG_TYPE", f"{entry_path}.{flag}", "matchup", f"{flag} must be boolean"))
            tags = entry.get("tags")
            if tags is not None and (not isinstance(tags, list) or not all(isinstance(t, str) for t in tags)):
                issues.append(_issue("WRONG_TYPE", f"{entry_path}.tags", "matchup", "tags must be a list of strings"))
            turnover = entry.get("turnover")
            if turnover is not None:
                if not isinstance(turnover, Mapping):
                    issues.append(_issue("WRONG_TYPE", f"{entry_path}.turnover", "matchup", "turnover must be a mapping"))
                    continue
                issues.extend(self._validate_enum(turnover.get("type"), TurnoverType, f"{entry_path}.turnover.type", "matchup"))
                return_yards = turnover.get("return_yards", 0)
                if not _is_int(return_yards) or return_yards < 0:
                    issues.append(
                        _issue("OUT_OF_RANGE", f"{entry_path}.turnover.return_yards", "matchup", "return_yards must be a non-negative integer")
                    )
        return issues

    def _validate_bool_rows(self, rows: Any, path: str, keys: Iterable[int]) -> list[ValidationIssue]:
        if not isinstance(rows, Mapping):
            return [_issue("MISSING_KEY", path, "kicking", "sub-table must be a mapping")]
        issues: list[ValidationIssue] = []
        for key in keys:
            value = rows.get(str(key))
            if value is None:
                issues.append(_issue("MISSING_KEY", f"{path}.{key}", "kicking", f"no result for roll {key}"))
            elif not isinstance(value, bool):
                issues.append(_issue("WRONG_TYPE", f"{path}.{key}", "kicking", "result must be boolean"))
        return issues

    def _validate_bands(self, bands: Any, issues: list[ValidationIssue]) -> list[str]:
        if not isinstance(bands, list) or not bands:
            issues.append(_issue("MISSING_KEY", "kicking.field_goal.bands", "kicking", "bands must be a non-empty list"))
            return []
        labels: list[str] = []
        previous_max: int | None = None
        for idx, band in enumerate(bands):
            path = f"kicking.field_goal.bands[{idx}]"
            if not isinstance(band, Mapping):
                issues.append(_issue("WRONG_TYPE", path, "kicking", "band must be a mapping"))
                continue
            label, low, high = band.get("label"), band.get("min"), band.get("max")
            if not isinstance(label, str) or not label:
                issues.append(_issue("MISSING_KEY", f"{path}.label", "kicking", "band label must be a string"))
                continue
            if not _is_int(low) or not _is_int(high) or low < 1 or high < low:
                issues.append(_issue("OUT_OF_RANGE", path, "kicking", "band bounds must be integers with 1 <= min <= max"))
                continue
            if previous_max is not None and low != previous_max + 1:
                issues.append(_issue("NON_CONTIGUOUS", path, "kicking", "bands must be ascending and contiguous"))
            previous_max = high
            labels.append(label)
        return labels

    def _validate_kickoff(self, rows: Any) -> list[ValidationIssue]:
        if not isinstance(rows, Mapping):
            return [_issue("WRONG_TYPE", "kicking.kickoff", "kicking", "kickoff must be a mapping")]
        issues: list[ValidationIssue] = []
        for roll in ROLL_SUMS:
            path = f"kicking.kickoff.{roll}"
            row = rows.get(str(roll))
            if not isinstance(row, Mapping):
                issues.append(_issue("MISSING_KEY", path, "kicking", f"no kickoff row for roll {roll}"))
                continue
            if not _is_int(row.get("yard_line")) or not 1 <= row["yard_line"] <= 99:
                issues.append(_issue("OUT_OF_RANGE", f"{path}.yard_line", "kicking", "yard_line must be within 1..99"))
            if "muffed" in row and not isinstance(row["muffed"], bool):
                issues.append(_issue("WRONG_TYPE", f"{path}.muffed", "kicking", "muffed must be boolean"))
        return issues

    def _validate_onside(self, rows: Any) -> list[ValidationIssue]:
        if not isinstance(rows, Mapping):
            return [_issue("WRONG_TYPE", "kicking.onside", "kicking", "onside must be a mapping")]
        issues: list[ValidationIssue] = []
        for face in D6_FACES:
            path = f"kicking.onside.{face}"
            row = rows.get(str(face))
            if not isinstance(row, Mapping):
                issues.append(_issue("MISSING_KEY", path, "kicking", f"no onside row for face {face}"))
                continue
            if not _is_member(row.get("recovered_by"), {"kicker", "receiver"}):
                issues.append(_issue("OUT_OF_RANGE", f"{path}.recovered_by", "kicking", "recovered_by must be kicker or receiver"))
            if not _is_int(row.get("yard_line")) or not 1 <= row["yard_line"] <= 99:
                issues.append(_issue("OUT_OF_RANGE", f"{path}.yard_line", "kicking", "yard_line must be within 1..99"))
        return issues

    def _validate_punt(self, raw: Any) -> list[ValidationIssue]:
        if not isinstance(raw, Mapping):
            return [_issue("WRONG_TYPE", "kicking.punt", "kicking", "punt must be a mapping")]
        issues: list[ValidationIssue] = []
        distance = raw.get("distance")
        returns = raw.get("return")
        if not isinstance(distance, Mapping) or not isinstance(returns, Mapping):
            return [_issue("MISSING_KEY", "kicking.punt", "kicking", "punt requires distance and return mappings")]
        needs_long_gain = False
        for roll in ROLL_SUMS:
            gross = distance.get(str(roll))
            if not _is_int(gross) or gross <= 0:
                issues.append(_issue("OUT_OF_RANGE", f"kicking.punt.distance.{roll}", "kicking", "punt distance must be a positive integer"))
            row = returns.get(str(roll))
            path = f"kicking.punt.return.{roll}"
            if not isinstance(row, Mapping):
                issues.append(_issue("MISSING_KEY", path, "kicking", f"no return row for roll {roll}"))
                continue
            if not _is_int(row.get("yards")) or row["yards"] < 0:
                issues.append(_issue("OUT_OF_RANGE", f"{path}.yards", "kicking", "return yards must be a non-negative integer"))
            if "fair_catch" in row and not isinstance(row["fair_catch"], bool):
                issues.append(_issue("WRONG_TYPE", f"{path}.fair_catch", "kicking", "fair_catch must be boolean"))
            if "long_gain" in row:
                if not isinstance(row["long_gain"], bool):
                    issues.append(_issue("WRONG_TYPE", f"{path}.long_gain", "kicking", "long_gain must be boolean"))
                elif row["long_gain"] and row.get("fair_catch") is True:
                    issues.append(_issue("EXCLUSIVE_FLAGS", path, "kicking", "a return row cannot be both fair_catch and long_gain"))
                elif row["long_gain"]:
                    needs_long_gain = True
        long_gain = raw.get("long_gain")
        if long_gain is not None:
            issues.extend(self._validate_long_gain(long_gain))
        elif needs_long_gain:
            issues.append(_issue("MISSING_KEY", "kicking.punt.long_gain", "kicking", "long_gain rows require a long_gain table"))
        return issues

    def _validate_long_gain(self, rows: Any) -> list[ValidationIssue]:
        if not isinstance(rows, Mapping):
            return [_issue("WRONG_TYPE", "kicking.punt.long_gain", "kicking", "long_gain must be a mapping")]
        issues: list[ValidationIssue] = []
        for face in D6_FACES:
            path = f"kicking.punt.long_gain.{face}"
            row = rows.get(str(face))
            if not isinstance(row, Mapping):
                issues.append(_issue("MISSING_KEY", path, "kicking", f"no long gain row for face {face}"))
                continue
            if not _is_int(row.get("yards")) or row["yards"] <= 0:
                issues.append(_issue("OUT_OF_RANGE", f"{path}.yards", "kicking", "long gain yards must be a positive integer"))
            bonus = row.get("bonus_per_pip")
            if bonus is not None and (not _is_int(bonus) or bonus <= 0):
                issues.append(_issue("OUT_OF_RANGE", f"{path}.bonus_per_pip", "kicking", "bonus_per_pip must be a positive integer"))
        return issues

    def _validate_enum(self, value: Any, enum_cls: type, path: str, entity_id: str) -> list[ValidationIssue]:
        allowed = {member.value for member in enum_cls}
        if not _is_member(value, allowed):
            return [_issue("OUT_OF_RANGE", path, entity_id, f"'{value}' is not one of {sorted(allowed)}")]
        return []


def raise_if_issues(issues: list[ValidationIssue]) -> None:
    if issues:
        raise SchemaViolation(issues)
