from __future__ import annotations

import pytest

from gdsim.core import (
    InvalidState,
    PythonRandomSource,
    RandomSourceExhausted,
    SequenceRandomSource,
    face_to_draw,
    roll_2d6,
    roll_die,
    seeded_random,
)
from tests.helpers import faces, roll


def test_die_faces_cover_the_unit_interval():
    assert roll_die(SequenceRandomSource([0.0])) == 1
    assert roll_die(SequenceRandomSource([0.999999])) == 6
    assert [roll_die(SequenceRandomSource([face_to_draw(f)])) for f in range(1, 7)] == [1, 2, 3, 4, 5, 6]


def test_2d6_consumes_two_draws():
    rng = SequenceRandomSource(faces(3, 4) + [0.1])
    assert roll_2d6(rng) == 7
    assert rng.consumed == 2
    assert rng.remaining == 1


@pytest.mark.parametrize("total", range(2, 13))
def test_roll_helper_scripts_every_sum(total):
    assert roll_2d6(SequenceRandomSource(roll(total))) == total


def test_face_to_draw_rejects_impossible_faces():
    with pytest.raises(ValueError):
        face_to_draw(0)
    with pytest.raises(ValueError):
        face_to_draw(7)


def test_exhausted_sequence_is_fatal():
    rng = SequenceRandomSource([0.5])
    rng.next()
    with pytest.raises(RandomSourceExhausted) as exc:
        rng.next()
    assert exc.value.artifact.error_code == "RANDOM_SOURCE_EXHAUSTED"


def test_draw_outside_unit_interval_is_invalid_state():
    with pytest.raises(InvalidState):
        roll_die(SequenceRandomSource([1.0]))
    with pytest.raises(InvalidState):
        roll_die(SequenceRandomSource([-0.1]))


def test_seeded_sources_repeat():
    a = seeded_random(42)
    b = PythonRandomSource(seed=42)
    assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]
    assert a.draws == 20
    assert a.seed == 42
