from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping


@dataclass(slots=True, frozen=True)
class EngineSettings:
    """Named policy constants for resolution and coaching decisions."""

    penalty_occurrence: float = 0.10
    penalty_offense_share: float = 0.5
    onside_probability_conservative: float = 0.3
    onside_probability_aggressive: float = 0.7
    tight_window_seconds: int = 120
    desperation_window_seconds: int = 240
    desperation_deficit: int = 9
    two_point_late_seconds: int = 300
    fourth_down_urgency_seconds: int = 360
    fourth_down_urgency_boost: float = 0.15
    fourth_down_go_threshold: float = 0.5
    fourth_down_punt_threshold: float = 0.4
    fourth_down_window_near: int = 55
    fourth_down_window_far: int = 65
    deep_own_territory_yards: int = 60
    trick_play_aggression: float = 0.5
    free_kick_punt_aggression: float = 0.5
    red_zone_yards: int = 20
    first_down_distance: int = 10
    quarter_seconds: int = 900
    overtime_seconds: int = 600
    overtime_enabled: bool = False
    two_minute_warning_seconds: int = 120
    tempo_window_seconds: int = 300
    burn_clock_lead: int = 9
    hurry_up_factor: float = 0.7
    hurry_up_min_seconds: int = 5
    burn_clock_min_seconds: int = 35
    burn_clock_max_seconds: int = 40
    kickoff_clock_seconds: int = 15
    field_goal_clock_seconds: int = 15
    punt_clock_seconds: int = 15
    penalty_clock_seconds: int = 15
    penalty_decline_margin: float = 0.5
    conversion_clock_seconds: int = 0
    two_point_success_probability: float = 0.5
    touchback_spot: int = 20
    kickoff_spot_after_safety: int = 25
    punt_spot_after_safety: int = 35
    field_goal_snap_yards: int = 17
    punt_return_fumble_max_roll: int = 4
    punt_return_fumble_chance: float = 0.15
    punt_return_fumble_recovery: float = 0.5
    max_snaps: int = 600

    def validate(self) -> None:
        probabilities = [
            self.penalty_occurrence,
            self.penalty_offense_share,
            self.onside_probability_conservative,
            self.onside_probability_aggressive,
            self.two_point_success_probability,
            self.hurry_up_factor,
            self.punt_return_fumble_chance,
            self.punt_return_fumble_recovery,
        ]
        if any(p < 0.0 or p > 1.0 for p in probabilities):
            raise ValueError("settings probabilities must be within [0, 1]")
        durations = [
            self.quarter_seconds,
            self.overtime_seconds,
            self.tight_window_seconds,
            self.desperation_window_seconds,
            self.two_minute_warning_seconds,
            self.tempo_window_seconds,
        ]
        if any(d <= 0 for d in durations):
            raise ValueError("settings durations must be positive")
        clock_costs = [
            self.kickoff_clock_seconds,
            self.field_goal_clock_seconds,
            self.punt_clock_seconds,
            self.penalty_clock_seconds,
            self.conversion_clock_seconds,
            self.hurry_up_min_seconds,
        ]
        if any(c < 0 for c in clock_costs):
            raise ValueError("settings clock costs must be non-negative")
        if self.burn_clock_min_seconds > self.burn_clock_max_seconds:
            raise ValueError("burn_clock_min_seconds must not exceed burn_clock_max_seconds")
        if not 0 < self.fourth_down_window_near <= self.fourth_down_window_far < 100:
            raise ValueError("fourth down window must lie inside the field")
        if self.first_down_distance <= 0:
            raise ValueError("first_down_distance must be positive")
        for spot in (self.touchback_spot, self.kickoff_spot_after_safety, self.punt_spot_after_safety):
            if spot <= 0 or spot >= 100:
                raise ValueError("restart spots must be inside the field of play")
        if self.max_snaps <= 0:
            raise ValueError("max_snaps must be positive")


def default_settings() -> EngineSettings:
    return EngineSettings()


def settings_from_mapping(raw: Mapping[str, Any], base: EngineSettings | None = None) -> EngineSettings:
    known = {f.name for f in fields(EngineSettings)}
    unknown = sorted(set(raw.keys()) - known)
    if unknown:
        raise ValueError(f"unknown engine settings: {', '.join(unknown)}")
    settings = replace(base or default_settings(), **dict(raw))
    settings.validate()
    return settings
