"""Sequential episode locking."""
from course_player.models import ROLE_ADMIN


def is_episode_locked(index: int, current_index: int, role: str) -> bool:
    """Everything after the episode being played is locked for non-admins."""
    if role == ROLE_ADMIN or index == 0:
        return False
    return index > current_index


def lock_map(episode_count: int, current_index: int, role: str) -> list[bool]:
    return [is_episode_locked(i, current_index, role) for i in range(episode_count)]
