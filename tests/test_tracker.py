from __future__ import annotations

from bloomgarden.config import get_preset
from bloomgarden.tracker import SpawnTracker


def test_first_spawn_is_flagged_once() -> None:
    tracker = SpawnTracker()
    first = tracker.handle_spawn()
    second = tracker.handle_spawn()
    assert first.first is True and first.count == 1
    assert second.first is False and second.count == 2


def test_classic_preset_has_no_messages() -> None:
    tracker = SpawnTracker(milestones=dict(get_preset("classic").milestones))
    events = [tracker.handle_spawn() for _ in range(40)]
    assert all(e.message is None for e in events)
    assert tracker.latest_message is None


def test_meadow_messages_fire_at_their_thresholds() -> None:
    milestones = dict(get_preset("meadow").milestones)
    tracker = SpawnTracker(milestones=milestones)
    fired = {}
    for _ in range(40):
        event = tracker.handle_spawn()
        if event.message:
            fired[event.count] = event.message
    assert fired == milestones
    assert sorted(fired) == [5, 15, 30]
    assert tracker.latest_message == milestones[30]


def test_reset_starts_a_new_run() -> None:
    tracker = SpawnTracker(milestones={2: "two"})
    tracker.handle_spawn()
    assert tracker.handle_spawn().message == "two"
    tracker.reset()
    assert tracker.count == 0
    assert tracker.handle_spawn().first is True
    assert tracker.handle_spawn().message == "two"
