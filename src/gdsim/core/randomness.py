from __future__ import annotations

import math
import random
from typing import Iterable

from gdsim.contracts import RandomSource
from gdsim.core.errors import RandomSourceExhausted, build_forensic_artifact, invalid_state


class PythonRandomSource(RandomSource):
    """Injected randomness source for gameplay and test determinism."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)
        self._draws = 0

    @property
    def seed(self) -> int | None:
        return self._seed

    @property
    def draws(self) -> int:
        return self._draws

    def next(self) -> float:
        self._draws += 1
        return self._rng.random()


class SequenceRandomSource(RandomSource):
    """Replays a frozen list of draws; running dry is fatal."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values = list(values)
        self._index = 0

    @property
    def consumed(self) -> int:
        return self._index

    @property
    def remaining(self) -> int:
        return len(self._values) - self._index

    def next(self) -> float:
        if self._index >= len(self._values):
            raise RandomSourceExhausted(
                build_forensic_artifact(
                    engine_scope="random_source",
                    error_code="RANDOM_SOURCE_EXHAUSTED",
                    message=f"sequence random source exhausted after {self._index} draws",
                    state_snapshot={"consumed": self._index},
                    context={},
                    identifiers={},
                    causal_fragment=["random_draw"],
                )
            )
        value = self._values[self._index]
        self._index += 1
        return value


def draw(rng: RandomSource) -> float:
    value = rng.next()
    if not 0.0 <= value < 1.0:
        raise invalid_state(f"random draw {value!r} outside [0, 1)", {"draw": value}, "random_draw")
    return value


def roll_die(rng: RandomSource, sides: int = 6) -> int:
    return int(math.floor(draw(rng) * sides)) + 1


def roll_2d6(rng: RandomSource) -> int:
    first = roll_die(rng)
    second = roll_die(rng)
    return first + second


def face_to_draw(face: int, sides: int = 6) -> float:
    """Midpoint draw that maps back to ``face``; used to script dice in tests and replays."""
    if face < 1 or face > sides:
        raise ValueError(f"face must be within [1, {sides}]")
    return (face - 0.5) / sides


def seeded_random(seed: int) -> PythonRandomSource:
    return PythonRandomSource(seed=seed)


def gameplay_random() -> PythonRandomSource:
    return PythonRandomSource(seed=None)
