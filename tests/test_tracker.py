"""Tests for watch-progress tracking."""
from course_player.tracker import PlaybackSession


def test_new_session_starts_at_zero():
    s = PlaybackSession("ep-1")
    assert s.episode_id == "ep-1"
    assert s.current_time == 0
    assert s.max_time_reached == 0
    assert s.progress_percent == 0


def test_time_update_raises_high_water_mark():
    s = PlaybackSession("ep-1")
    s.time_update(30, 120)
    assert s.current_time == 30
    assert s.max_time_reached == 30
    assert s.progress_percent == 25


def test_high_water_mark_is_monotonic():
    s = PlaybackSession("ep-1")
    times = [5, 12, 9, 40, 3, 41, 20]
    seen = []
    for t in times:
        s.time_update(t, 100)
        seen.append(s.max_time_reached)
    assert seen == sorted(seen)
    assert s.max_time_reached == max(times)


def test_progress_percent_floors():
    s = PlaybackSession("ep-1")
    s.time_update(59.9, 60)
    assert s.progress_percent == 99
    s.time_update(60, 60)
    assert s.progress_percent == 100


def test_progress_percent_zero_without_duration():
    s = PlaybackSession("ep-1")
    s.time_update(30, 0)
    assert s.progress_percent == 0
    assert s.max_time_reached == 30


def test_seek_does_not_raise_high_water_mark():
    s = PlaybackSession("ep-1")
    s.time_update(20, 100)
    s.seek_to(80)
    assert s.current_time == 80
    assert s.max_time_reached == 20


def test_seek_is_bounded_by_duration():
    s = PlaybackSession("ep-1")
    s.time_update(0, 100)
    s.seek_to(500)
    assert s.current_time == 100
    s.seek_to(-5)
    assert s.current_time == 0


def test_tick_advances_playback():
    s = PlaybackSession("ep-1")
    s.time_update(0, 100)
    s.tick(15)
    s.tick(15)
    assert s.current_time == 30
    assert s.max_time_reached == 30


def test_tick_stops_at_duration():
    s = PlaybackSession("ep-1")
    s.time_update(90, 100)
    s.tick(60)
    assert s.current_time == 100
    assert s.progress_percent == 100


def test_reset_for_new_episode():
    s = PlaybackSession("ep-1")
    s.time_update(50, 100)
    s.reset("ep-2")
    assert s.episode_id == "ep-2"
    assert s.current_time == 0
    assert s.max_time_reached == 0
    assert s.duration == 0
    assert s.progress_percent == 0
