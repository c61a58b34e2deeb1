import pytest

from utils.timing import PhaseTimer


def test_phase_timer_records_phase_and_context():
    timer = PhaseTimer({"file": "team.xlsx"})

    with timer.measure("parse", {"sheets": 3}):
        pass

    with timer.measure("reconcile"):
        pass

    entries = timer.as_list()
    assert len(entries) == 2

    first, second = entries
    assert first["phase"] == "parse"
    assert first["file"] == "team.xlsx"
    assert first["sheets"] == 3
    assert first["duration"] >= 0

    assert second["phase"] == "reconcile"
    assert "sheets" not in second
    assert timer.total >= first["duration"]


def test_phase_is_recorded_when_block_raises():
    timer = PhaseTimer()

    with pytest.raises(RuntimeError):
        with timer.measure("commit"):
            raise RuntimeError("boom")

    assert [entry["phase"] for entry in timer.as_list()] == ["commit"]
