from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources
from typing import Any, Mapping

from gdsim.contracts import (
    CoachProfile,
    FieldGoalBand,
    KickoffEntry,
    LongGainEntry,
    MatchupChart,
    MatchupEntry,
    OnsideEntry,
    PenaltyEntry,
    PenaltySide,
    PlayDefinition,
    PlayDepth,
    PlayType,
    PuntReturnEntry,
    RiskProfile,
    TurnoverSpec,
    TurnoverType,
)
from gdsim.core.errors import table_gap
from gdsim.football.validation import EXPECTED_SCHEMA_VERSION, PROFILE_KEYS, TableValidator, raise_if_issues

logger = logging.getLogger(__name__)

RESOURCE_PACKAGE = "gdsim.resources.football"
RESOURCE_FILES = {
    "matchup": "matchup_tables.json",
    "penalty": "penalty_table.json",
    "kicking": "place_kicking.json",
    "playbook": "playbook.json",
    "coaches": "coach_profiles.json",
}


@dataclass(slots=True, frozen=True)
class MatchupTable:
    version: str
    dice: str
    offense_types: tuple[PlayType, ...]
    defense_calls: tuple[str, ...]
    charts: Mapping[tuple[PlayType, str], MatchupChart]

    def chart(self, offense_type: PlayType, defense_call: str) -> MatchupChart:
        chart = self.charts.get((PlayType(offense_type), defense_call))
        if chart is None:
            raise table_gap(
                "matchup",
                f"{PlayType(offense_type).value}:{defense_call}",
                f"no matchup chart for {PlayType(offense_type).value} vs '{defense_call}'",
            )
        return chart

    def lookup(self, offense_type: PlayType, defense_call: str, roll: int) -> MatchupEntry:
        chart = self.chart(offense_type, defense_call)
        entry = chart.entries.get(roll)
        if entry is None:
            raise table_gap(
                "matchup",
                f"{chart.offense_type.value}:{defense_call}:{roll}",
                f"no matchup entry for roll {roll}",
            )
        return entry


@dataclass(slots=True, frozen=True)
class PenaltyTable:
    version: str
    entries: Mapping[int, PenaltyEntry]

    def entry(self, index: int) -> PenaltyEntry:
        found = self.entries.get(index)
        if found is None:
            raise table_gap("penalty", str(index), f"no penalty entry at index {index}")
        return found

    def entries_for(self, side: PenaltySide) -> list[PenaltyEntry]:
        return [self.entries[idx] for idx in sorted(self.entries) if self.entries[idx].side == side]


@dataclass(slots=True, frozen=True)
class KickingTable:
    version: str
    pat: Mapping[int, bool]
    field_goal_bands: tuple[FieldGoalBand, ...]
    field_goal: Mapping[str, Mapping[int, bool]]
    kickoff: Mapping[int, KickoffEntry] | None = None
    onside: Mapping[int, OnsideEntry] | None = None
    punt_distance: Mapping[int, int] | None = None
    punt_return: Mapping[int, PuntReturnEntry] | None = None
    punt_long_gain: Mapping[int, LongGainEntry] | None = None

    @property
    def max_field_goal_distance(self) -> int:
        return self.field_goal_bands[-1].max_distance

    def pat_result(self, roll: int) -> bool:
        if roll not in self.pat:
            raise table_gap("kicking", f"pat:{roll}", f"no PAT result for roll {roll}")
        return self.pat[roll]

    def band_for(self, distance: int) -> FieldGoalBand | None:
        for band in self.field_goal_bands:
            if band.min_distance <= distance <= band.max_distance:
                return band
        return None

    def field_goal_result(self, band: str, roll: int) -> bool:
        rows = self.field_goal.get(band)
        if rows is None or roll not in rows:
            raise table_gap("kicking", f"field_goal:{band}:{roll}", f"no field goal result for band {band} roll {roll}")
        return rows[roll]

    def kickoff_entry(self, roll: int) -> KickoffEntry:
        if self.kickoff is None or roll not in self.kickoff:
            raise table_gap("kicking", f"kickoff:{roll}", f"no kickoff entry for roll {roll}")
        return self.kickoff[roll]

    def onside_entry(self, face: int) -> OnsideEntry:
        if self.onside is None or face not in self.onside:
            raise table_gap("kicking", f"onside:{face}", f"no onside entry for face {face}")
        return self.onside[face]

    def punt_gross(self, roll: int) -> int:
        if self.punt_distance is None or roll not in self.punt_distance:
            raise table_gap("kicking", f"punt:{roll}", f"no punt distance for roll {roll}")
        return self.punt_distance[roll]

    def punt_return_entry(self, roll: int) -> PuntReturnEntry:
        if self.punt_return is None or roll not in self.punt_return:
            raise table_gap("kicking", f"punt_return:{roll}", f"no punt return for roll {roll}")
        return self.punt_return[roll]

    def long_gain_entry(self, face: int) -> LongGainEntry:
        if self.punt_long_gain is None or face not in self.punt_long_gain:
            raise table_gap("kicking", f"long_gain:{face}", f"no long gain row for face {face}")
        return self.punt_long_gain[face]


@dataclass(slots=True, frozen=True)
class Playbook:
    version: str
    plays: tuple[PlayDefinition, ...]
    defense_calls: tuple[str, ...]

    def play(self, play_id: str) -> PlayDefinition:
        for play in self.plays:
            if play.play_id == play_id:
                return play
        raise table_gap("playbook", play_id, f"play id '{play_id}' is not registered")

    def plays_of(self, *play_types: PlayType) -> list[PlayDefinition]:
        wanted = set(play_types)
        return [play for play in self.plays if play.play_type in wanted]


@dataclass(slots=True, frozen=True)
class CoachProfiles:
    version: str
    profiles: Mapping[str, CoachProfile]

    def profile(self, name: str) -> CoachProfile:
        found = self.profiles.get(name)
        if found is None:
            raise table_gap("coaches", name, f"coach profile '{name}' is not registered")
        return found

    def names(self) -> list[str]:
        return sorted(self.profiles)


def _rows(raw: Mapping[str, Any]) -> dict[int, Any]:
    return {int(key): value for key, value in raw.items()}


def _matchup_entry(raw: Mapping[str, Any]) -> MatchupEntry:
    turnover = raw.get("turnover")
    tags = raw.get("tags")
    return MatchupEntry(
        yards=int(raw["yards"]),
        clock=str(raw["clock"]),
        turnover=(
            TurnoverSpec(TurnoverType(turnover["type"]), int(turnover.get("return_yards", 0)))
            if turnover is not None
            else None
        ),
        oob=raw.get("oob"),
        incomplete=raw.get("incomplete"),
        tags=tuple(tags) if tags is not None else None,
    )


def load_matchup_table(raw: Mapping[str, Any]) -> MatchupTable:
    raise_if_issues(TableValidator().validate_matchup(raw))
    charts: dict[tuple[PlayType, str], MatchupChart] = {}
    for chart in raw["charts"]:
        offense_type = PlayType(chart["offense_type"])
        defense_call = str(chart["defense_call"])
        entries = {roll: _matchup_entry(entry) for roll, entry in _rows(chart["entries"]).items()}
        charts[(offense_type, defense_call)] = MatchupChart(offense_type, defense_call, entries)
    table = MatchupTable(
        version=str(raw["version"]),
        dice=str(raw["dice"]),
        offense_types=tuple(PlayType(t) for t in raw["offense_types"]),
        defense_calls=tuple(str(c) for c in raw["defense_calls"]),
        charts=charts,
    )
    logger.debug("loaded matchup table with %d charts", len(charts))
    return table


def load_penalty_table(raw: Mapping[str, Any]) -> PenaltyTable:
    raise_if_issues(TableValidator().validate_penalty(raw))
    entries: dict[int, PenaltyEntry] = {}
    for index, entry in _rows(raw["entries"]).items():
        entries[index] = PenaltyEntry(
            index=index,
            side=PenaltySide(entry["side"]),
            yards=int(entry["yards"]),
            label=str(entry["label"]),
            loss_of_down=entry.get("loss_of_down"),
            replay_down=entry.get("replay_down"),
            auto_first_down=entry.get("auto_first_down"),
        )
    logger.debug("loaded penalty table with %d entries", len(entries))
    return PenaltyTable(version=str(raw["version"]), entries=entries)


def load_kicking_table(raw: Mapping[str, Any]) -> KickingTable:
    raise_if_issues(TableValidator().validate_kicking(raw))
    field_goal = raw["field_goal"]
    bands = tuple(FieldGoalBand(str(b["label"]), int(b["min"]), int(b["max"])) for b in field_goal["bands"])
    results = {band.label: _rows(field_goal["results"][band.label]) for band in bands}

    kickoff = None
    if "kickoff" in raw:
        kickoff = {
            roll: KickoffEntry(int(row["yard_line"]), row.get("muffed"))
            for roll, row in _rows(raw["kickoff"]).items()
        }
    onside = None
    if "onside" in raw:
        onside = {
            face: OnsideEntry(str(row["recovered_by"]), int(row["yard_line"]))
            for face, row in _rows(raw["onside"]).items()
        }
    punt_distance = None
    punt_return = None
    punt_long_gain = None
    if "punt" in raw:
        punt_distance = {roll: int(v) for roll, v in _rows(raw["punt"]["distance"]).items()}
        punt_return = {
            roll: PuntReturnEntry(int(row["yards"]), row.get("fair_catch"), row.get("long_gain"))
            for roll, row in _rows(raw["punt"]["return"]).items()
        }
        if "long_gain" in raw["punt"]:
            punt_long_gain = {
                face: LongGainEntry(int(row["yards"]), row.get("bonus_per_pip"))
                for face, row in _rows(raw["punt"]["long_gain"]).items()
            }
    logger.debug("loaded kicking table with %d field goal bands", len(bands))
    return KickingTable(
        version=str(raw["version"]),
        pat=_rows(raw["pat"]),
        field_goal_bands=bands,
        field_goal=results,
        kickoff=kickoff,
        onside=onside,
        punt_distance=punt_distance,
        punt_return=punt_return,
        punt_long_gain=punt_long_gain,
    )


def load_playbook(raw: Mapping[str, Any]) -> Playbook:
    raise_if_issues(TableValidator().validate_playbook(raw))
    plays = tuple(
        PlayDefinition(
            play_id=str(p["id"]),
            name=str(p["name"]),
            play_type=PlayType(p["type"]),
            depth=PlayDepth(p["depth"]),
            risk=RiskProfile(p["risk"]),
            perimeter=bool(p.get("perimeter", False)),
        )
        for p in raw["plays"]
    )
    return Playbook(version=str(raw["version"]), plays=plays, defense_calls=tuple(raw["defense_calls"]))


def coach_profile_from_mapping(raw: Mapping[str, Any]) -> CoachProfile:
    """Build a profile from a plain mapping; unrecognized keys are ignored."""
    raise_if_issues(TableValidator().validate_coach_profile(raw, "coach"))
    values = {PROFILE_KEYS[key]: value for key, value in raw.items() if key in PROFILE_KEYS}
    for key in ("aggression", "fourth_down_boost", "pass_bias"):
        if key in values:
            values[key] = float(values[key])
    return CoachProfile(name=raw["name"], **values)


def load_coach_profiles(raw: Mapping[str, Any]) -> CoachProfiles:
    raise_if_issues(TableValidator().validate_coach_profiles(raw))
    profiles = {}
    for row in raw["profiles"]:
        profile = coach_profile_from_mapping(row)
        profiles[profile.name] = profile
    return CoachProfiles(version=str(raw["version"]), profiles=profiles)


def _dump_matchup_entry(entry: MatchupEntry) -> dict[str, Any]:
    out: dict[str, Any] = {"yards": entry.yards, "clock": entry.clock}
    if entry.turnover is not None:
        out["turnover"] = {"type": entry.turnover.turnover_type.value, "return_yards": entry.turnover.return_yards}
    if entry.oob is not None:
        out["oob"] = entry.oob
    if entry.incomplete is not None:
        out["incomplete"] = entry.incomplete
    if entry.tags is not None:
        out["tags"] = list(entry.tags)
    return out


def dump_matchup_table(table: MatchupTable) -> dict[str, Any]:
    return {
        "version": table.version,
        "dice": table.dice,
        "offense_types": [t.value for t in table.offense_types],
        "defense_calls": list(table.defense_calls),
        "charts": [
            {
                "offense_type": chart.offense_type.value,
                "defense_call": chart.defense_call,
                "entries": {str(roll): _dump_matchup_entry(e) for roll, e in sorted(chart.entries.items())},
            }
            for chart in table.charts.values()
        ],
    }


def dump_penalty_table(table: PenaltyTable) -> dict[str, Any]:
    entries: dict[str, Any] = {}
    for index, entry in sorted(table.entries.items()):
        row: dict[str, Any] = {"side": entry.side.value, "yards": entry.yards, "label": entry.label}
        for flag in ("loss_of_down", "replay_down", "auto_first_down"):
            value = getattr(entry, flag)
            if value is not None:
                row[flag] = value
        entries[str(index)] = row
    return {"version": table.version, "entries": entries}


def _with_flags(row: dict[str, Any], **flags: Any) -> dict[str, Any]:
    row.update({key: value for key, value in flags.items() if value is not None})
    return row


def dump_kicking_table(table: KickingTable) -> dict[str, Any]:
    out: dict[str, Any] = {
        "version": table.version,
        "pat": {str(roll): ok for roll, ok in sorted(table.pat.items())},
        "field_goal": {
            "bands": [{"label": b.label, "min": b.min_distance, "max": b.max_distance} for b in table.field_goal_bands],
            "results": {
                label: {str(roll): ok for roll, ok in sorted(rows.items())} for label, rows in table.field_goal.items()
            },
        },
    }
    if table.kickoff is not None:
        out["kickoff"] = {
            str(roll): _with_flags({"yard_line": e.yard_line}, muffed=e.muffed) for roll, e in sorted(table.kickoff.items())
        }
    if table.onside is not None:
        out["onside"] = {
            str(face): {"recovered_by": e.recovered_by, "yard_line": e.yard_line} for face, e in sorted(table.onside.items())
        }
    if table.punt_distance is not None and table.punt_return is not None:
        out["punt"] = {
            "distance": {str(roll): gross for roll, gross in sorted(table.punt_distance.items())},
            "return": {
                str(roll): _with_flags({"yards": e.yards}, fair_catch=e.fair_catch, long_gain=e.long_gain)
                for roll, e in sorted(table.punt_return.items())
            },
        }
        if table.punt_long_gain is not None:
            out["punt"]["long_gain"] = {
                str(face): _with_flags({"yards": e.yards}, bonus_per_pip=e.bonus_per_pip)
                for face, e in sorted(table.punt_long_gain.items())
            }
    return out


def dump_playbook(playbook: Playbook) -> dict[str, Any]:
    return {
        "version": playbook.version,
        "plays": [
            {
                "id": p.play_id,
                "name": p.name,
                "type": p.play_type.value,
                "depth": p.depth.value,
                "risk": p.risk.value,
                "perimeter": p.perimeter,
            }
            for p in playbook.plays
        ],
        "defense_calls": list(playbook.defense_calls),
    }


def dump_coach_profiles(profiles: CoachProfiles) -> dict[str, Any]:
    return {
        "version": profiles.version,
        "profiles": [
            {
                "name": p.name,
                "onside_aggressive": p.onside_aggressive,
                "two_point_aggressive_late": p.two_point_aggressive_late,
                "aggression": p.aggression,
                "fourth_down_boost": p.fourth_down_boost,
                "pass_bias": p.pass_bias,
            }
            for p in profiles.profiles.values()
        ],
    }


@dataclass(slots=True, frozen=True)
class TableStore:
    """Immutable bundle of every table a game needs; safe to share between sessions."""

    matchup: MatchupTable
    penalty: PenaltyTable
    kicking: KickingTable
    playbook: Playbook
    coaches: CoachProfiles

    @classmethod
    def default(cls, overrides: Mapping[str, Mapping[str, Any]] | None = None) -> TableStore:
        overrides = overrides or {}
        unknown = sorted(set(overrides) - set(RESOURCE_FILES))
        if unknown:
            raise ValueError(f"unknown table overrides: {', '.join(unknown)}")

        def raw_for(kind: str) -> Mapping[str, Any]:
            if kind in overrides:
                return overrides[kind]
            return read_resource(RESOURCE_FILES[kind])

        store = cls(
            matchup=load_matchup_table(raw_for("matchup")),
            penalty=load_penalty_table(raw_for("penalty")),
            kicking=load_kicking_table(raw_for("kicking")),
            playbook=load_playbook(raw_for("playbook")),
            coaches=load_coach_profiles(raw_for("coaches")),
        )
        missing = sorted(set(store.playbook.defense_calls) - set(store.matchup.defense_calls))
        if missing:
            raise table_gap("playbook", ",".join(missing), "playbook defense calls missing from matchup table")
        logger.info("table store ready (schema %s)", EXPECTED_SCHEMA_VERSION)
        return store


def read_resource(filename: str) -> dict[str, Any]:
    package = resources.files(RESOURCE_PACKAGE)
    return json.loads((package / filename).read_text(encoding="utf-8"))
