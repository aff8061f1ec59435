"""Tests for sequential episode locking."""
from course_player.locks import is_episode_locked, lock_map
from course_player.models import ROLE_ADMIN, ROLE_STUDENT


def test_first_episode_never_locked():
    assert is_episode_locked(0, 0, ROLE_STUDENT) is False


def test_episodes_after_current_are_locked():
    assert lock_map(5, 2, ROLE_STUDENT) == [False, False, False, True, True]


def test_admin_sees_nothing_locked():
    assert lock_map(4, 0, ROLE_ADMIN) == [False] * 4


def test_lock_map_for_every_position():
    n = 6
    for current in range(n):
        locks = lock_map(n, current, ROLE_STUDENT)
        assert all(locks[i] for i in range(current + 1, n))
        assert not any(locks[i] for i in range(current + 1))
