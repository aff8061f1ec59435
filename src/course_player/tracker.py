"""Watch-progress tracking for the active episode."""
import math


class PlaybackSession:
    """Elapsed time and high-water mark of what was actually played.

    ``max_time_reached`` only moves forward through ``time_update``/``tick``
    (real playback). ``seek_to`` moves the play head without touching it.
    """

    def __init__(self, episode_id: str | None = None):
        self.reset(episode_id)

    def reset(self, episode_id: str | None = None) -> None:
        self.episode_id = episode_id
        self.current_time = 0.0
        self.duration = 0.0
        self.max_time_reached = 0.0

    @property
    def progress_percent(self) -> int:
        if not self.duration:
            return 0
        return min(100, math.floor(self.current_time / self.duration * 100))

    def time_update(self, current_time: float, duration: float | None = None) -> None:
        self.current_time = max(0.0, current_time)
        if duration:
            self.duration = duration
        if self.current_time > self.max_time_reached:
            self.max_time_reached = self.current_time

    def tick(self, elapsed: float) -> None:
        """Advance by ``elapsed`` seconds of playback."""
        target = self.current_time + max(0.0, elapsed)
        if self.duration:
            target = min(target, self.duration)
        self.time_update(target)

    def seek_to(self, target: float) -> None:
        target = max(0.0, target)
        if self.duration:
            target = min(target, self.duration)
        self.current_time = target
