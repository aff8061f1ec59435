"""Seek and skip restriction policy."""
from course_player.config import SKIP_SECONDS
from course_player.models import ROLE_ADMIN


def can_seek(
    target: float,
    current_time: float,
    max_time_reached: float,
    is_completed: bool,
    role: str,
) -> bool:
    """Decide whether the play head may move to ``target``.

    Args:
        target: Requested position in seconds
        current_time: Current play head position
        max_time_reached: Furthest position actually played in this episode
        is_completed: Episode or course already fully completed (review mode)
        role: Role of the viewer

    Returns:
        True if the seek is allowed. Rules are applied in order; the first
        match wins.
    """
    if role == ROLE_ADMIN:
        return True
    if is_completed:
        return True
    if target <= max_time_reached:
        return True
    # Rewinding is never blocked
    if target < current_time:
        return True
    return False


def skip_target(current_time: float, seconds: float = SKIP_SECONDS, duration: float = 0) -> float:
    """Position a fixed-increment skip lands on, bounded to the video."""
    target = max(0.0, current_time + seconds)
    if duration:
        target = min(target, duration)
    return target
