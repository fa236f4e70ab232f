from __future__ import annotations

from dataclasses import replace
from functools import lru_cache

from gdsim.contracts import GameState, Side
from gdsim.core import EngineSettings, EventBus, SequenceRandomSource, face_to_draw
from gdsim.football import GameStateMachine, TableStore

# Penalty check draws: anything >= 0.10 is a clean snap.
CLEAN = 0.5
FLAG = 0.05
OFFENSE_FOUL = 0.25
DEFENSE_FOUL = 0.75


def faces(*values: int) -> list[float]:
    return [face_to_draw(v) for v in values]


def roll(total: int) -> list[float]:
    """Two die draws that sum to ``total``."""
    first = min(6, total - 1)
    return faces(first, total - first)


def pick(index: int, count: int) -> float:
    return (index + 0.5) / count


def flag(side_draw: float, index: int, count: int = 6) -> list[float]:
    return [FLAG, side_draw, pick(index, count)]


def scripted(*chunks) -> SequenceRandomSource:
    values: list[float] = []
    for chunk in chunks:
        if isinstance(chunk, (list, tuple)):
            values.extend(chunk)
        else:
            values.append(chunk)
    return SequenceRandomSource(values)


@lru_cache(maxsize=1)
def default_tables() -> TableStore:
    return TableStore.default()


def make_state(**overrides) -> GameState:
    state = GameState(
        quarter=1,
        clock_seconds=900,
        down=1,
        distance=10,
        ball_spot=25,
        possession=Side.HOME,
        score={Side.HOME: 0, Side.AWAY: 0},
    )
    return replace(state, **overrides)


def make_machine(*chunks, state: GameState | None = None, settings: EngineSettings | None = None) -> GameStateMachine:
    machine = GameStateMachine(default_tables(), scripted(*chunks), settings=settings, bus=EventBus())
    if state is not None:
        machine.state = state
    return machine
