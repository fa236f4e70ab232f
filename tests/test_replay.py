from __future__ import annotations

from gdsim.simulation import ReplayHarness


def test_replay_fingerprints_match(tmp_path):
    harness = ReplayHarness(seed=321)
    path = tmp_path / "replay.json"
    harness.save(path)
    loaded = ReplayHarness.load(path)
    assert loaded == harness

    first, second = loaded.replay()
    assert first == second
    assert first["seed"] == 321
    assert first["snaps"] > 0


def test_different_seeds_diverge():
    a, _ = ReplayHarness(seed=1).replay()
    b, _ = ReplayHarness(seed=2).replay()
    assert a["event_digest"] != b["event_digest"]


def test_overtime_flag_is_carried(tmp_path):
    harness = ReplayHarness(seed=8, home_coach="John Madden", away_coach="Andy Reid", overtime=True)
    path = tmp_path / "ot.json"
    harness.save(path)
    assert ReplayHarness.load(path).overtime is True
    result = harness.run()
    assert result.final_state.game_over is True
