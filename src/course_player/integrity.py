"""Advisory playback integrity signals (tab hiding, screen capture keys).

Nothing here gates progression. The monitor only emits alerts to its
listeners; the player reacts by pausing, the UI by showing a message.
"""
import logging
from dataclasses import dataclass

from course_player.models import ROLE_ADMIN

logger = logging.getLogger(__name__)

TAB_HIDDEN = "tab_hidden"
PRINT_SCREEN = "print_screen"


@dataclass(frozen=True)
class IntegrityAlert:
    reason: str
    pause: bool
    message: str


class IntegrityMonitor:
    def __init__(self, role: str):
        self.role = role
        self.is_playing = False
        self.alert: IntegrityAlert | None = None
        self._listeners = []

    @property
    def active(self) -> bool:
        return self.is_playing and self.role != ROLE_ADMIN

    def subscribe(self, listener) -> None:
        self._listeners.append(listener)

    def visibility_changed(self, hidden: bool) -> IntegrityAlert | None:
        if not hidden:
            return None
        return self._raise(IntegrityAlert(
            reason=TAB_HIDDEN,
            pause=True,
            message="Playback paused: leaving the lesson tab is not allowed while watching.",
        ))

    def key_pressed(self, key: str) -> IntegrityAlert | None:
        if key != "PrintScreen":
            return None
        return self._raise(IntegrityAlert(
            reason=PRINT_SCREEN,
            pause=False,
            message="Screen capture is not allowed for course content.",
        ))

    def dismiss(self) -> None:
        self.alert = None

    def _raise(self, alert: IntegrityAlert) -> IntegrityAlert | None:
        # One alert at a time until dismissed
        if not self.active or self.alert is not None:
            return None
        self.alert = alert
        logger.info("integrity alert: %s", alert.reason)
        for listener in self._listeners:
            listener(alert)
        return alert
