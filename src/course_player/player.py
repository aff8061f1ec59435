"""Course progression state machine.

The player walks a course's episodes in ``order_index`` order:

    Locked -> Active(i) -> [QuizPending(q, i)] -> Active(i + 1) -> ... -> Completed

Watch progress, seek restriction, episode locking and quiz gating are
delegated to the leaf modules; this class decides transitions and owns the
persistence calls that make them durable. A failed persistence call never
moves the state forward.
"""
import logging
from dataclasses import dataclass

from course_player.config import SKIP_SECONDS
from course_player.errors import BackendError, MediaError
from course_player.gate import can_mark_complete, requires_quiz, resolve_gate_quiz
from course_player.integrity import IntegrityMonitor
from course_player.locks import is_episode_locked, lock_map
from course_player.models import DEFAULT_EPISODE_ID, ROLE_ADMIN, ROLE_STUDENT, Course, Quiz
from course_player.quiz import passed_quiz_ids, score_answers
from course_player.seek import can_seek, skip_target
from course_player.tracker import PlaybackSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Locked:
    """Not enrolled; nothing can be played."""


@dataclass(frozen=True)
class Active:
    episode_index: int


@dataclass(frozen=True)
class QuizPending:
    quiz: Quiz
    episode_index: int


@dataclass(frozen=True)
class Completed:
    """Terminal. ``episode_index`` is the episode being reviewed."""
    episode_index: int = 0


class CoursePlayer:
    def __init__(self, course: Course, backend, role: str = ROLE_STUDENT, notifier=None, on_back=None):
        self.course = course
        self.episodes = course.ordered_episodes()
        self.backend = backend
        self.role = role
        self.notifier = notifier
        self.on_back = on_back

        self.session = PlaybackSession()
        self.monitor = IntegrityMonitor(role)
        self.monitor.subscribe(self._on_integrity_alert)
        self.is_playing = False
        self.media_error: MediaError | None = None
        self.last_error: str | None = None
        self.rejected_seeks = 0

        self.quizzes: list[Quiz] = []
        self.passed_quiz_ids: set = set()
        self.is_favorite = False
        self._loaded = False
        self._completed_listeners = []

        self.reload()
        self.state = self._initial_state()
        self.session.reset(self.current_episode.id)

    # -- mount -----------------------------------------------------------

    def reload(self) -> bool:
        """Fetch quizzes, results and favorites. Advancing is refused until this succeeds."""
        try:
            self.quizzes = self.backend.get_quizzes(self.course.id)
            results = self.backend.get_quiz_results()
            favorites = self.backend.get_favorites()
        except BackendError as e:
            self._loaded = False
            self._fail(f"Could not load course data: {e}")
            return False
        # Passes recorded locally this session survive a reload
        self.passed_quiz_ids |= passed_quiz_ids(self.quizzes, results)
        self.is_favorite = any(
            f["target_id"] == self.course.id and f["type"] == "course" for f in favorites
        )
        self._loaded = True
        return True

    def _initial_state(self):
        if not self.course.enrolled and self.role != ROLE_ADMIN:
            return Locked()
        if self.course.progress == 100:
            return Completed(0)
        for i, episode in enumerate(self.episodes):
            if episode.completed is not True:
                return Active(i)
        # Every episode done but the course was never closed out
        return Active(len(self.episodes) - 1)

    # -- derived values --------------------------------------------------

    @property
    def current_episode_index(self) -> int:
        return getattr(self.state, "episode_index", 0)

    @property
    def current_episode(self):
        return self.episodes[self.current_episode_index]

    @property
    def is_completed(self) -> bool:
        return isinstance(self.state, Completed) or self.current_episode.completed is True

    @property
    def progress_percent(self) -> int:
        return self.session.progress_percent

    @property
    def active_quiz(self) -> Quiz | None:
        if isinstance(self.state, QuizPending):
            return self.state.quiz
        return None

    @property
    def is_last_episode(self) -> bool:
        return self.current_episode_index == len(self.episodes) - 1

    def is_episode_locked(self, index: int) -> bool:
        if isinstance(self.state, Locked):
            return True
        if isinstance(self.state, Completed):
            return False
        return is_episode_locked(index, self.current_episode_index, self.role)

    def lock_map(self) -> list[bool]:
        if isinstance(self.state, (Locked, Completed)):
            return [self.is_episode_locked(i) for i in range(len(self.episodes))]
        return lock_map(len(self.episodes), self.current_episode_index, self.role)

    def on_completed(self, listener) -> None:
        """Register ``listener(course)`` to run when the course reaches Completed."""
        self._completed_listeners.append(listener)

    # -- navigation ------------------------------------------------------

    def enroll(self):
        if not isinstance(self.state, Locked):
            return self.state
        course_id = self.course.id
        try:
            self.backend.enroll(course_id)
        except BackendError as e:
            self._fail(str(e))
            return self.state
        self.course.enrolled = True
        self.state = self._initial_state()
        self._switch_episode(self.current_episode_index)
        return self.state

    def select_episode(self, index: int) -> bool:
        if not 0 <= index < len(self.episodes):
            return False
        if isinstance(self.state, (Locked, QuizPending)):
            logger.info("episode %s not selectable in state %s", index, type(self.state).__name__)
            return False
        if self.is_episode_locked(index):
            logger.info("episode %s is locked (playing %s)", index, self.current_episode_index)
            return False
        self.state = Completed(index) if isinstance(self.state, Completed) else Active(index)
        self._switch_episode(index)
        return True

    def _switch_episode(self, index: int) -> None:
        self.pause()
        self.media_error = None
        self.session.reset(self.episodes[index].id)

    def back_to_courses(self) -> None:
        self.pause()
        if self.on_back:
            self.on_back()

    # -- playback --------------------------------------------------------

    def play(self) -> bool:
        if isinstance(self.state, (Locked, QuizPending)) or self.media_error:
            return False
        self.is_playing = True
        self.monitor.is_playing = True
        return True

    def pause(self) -> None:
        self.is_playing = False
        self.monitor.is_playing = False

    def ended(self) -> None:
        self.pause()

    def time_update(self, current_time: float, duration: float | None = None) -> None:
        if isinstance(self.state, Locked):
            return
        self.session.time_update(current_time, duration)

    def tick(self, elapsed: float) -> None:
        """Simulate ``elapsed`` seconds of playback."""
        if not self.is_playing:
            return
        self.session.tick(elapsed)
        if self.session.duration and self.session.current_time >= self.session.duration:
            self.ended()

    def seek(self, target: float) -> bool:
        if isinstance(self.state, Locked):
            return False
        allowed = can_seek(
            target,
            self.session.current_time,
            self.session.max_time_reached,
            self.is_completed,
            self.role,
        )
        if not allowed:
            self.rejected_seeks += 1
            logger.info(
                "seek to %.1fs rejected (watched up to %.1fs, episode %s)",
                target, self.session.max_time_reached, self.current_episode.id,
            )
            return False
        self.session.seek_to(target)
        return True

    def skip_forward(self, seconds: float = SKIP_SECONDS) -> bool:
        return self.seek(skip_target(self.session.current_time, seconds, self.session.duration))

    def skip_back(self, seconds: float = SKIP_SECONDS) -> bool:
        return self.seek(skip_target(self.session.current_time, -seconds, self.session.duration))

    def media_failed(self, error) -> None:
        """Record a load or playback failure. ``error`` is a MediaError or its message."""
        if not isinstance(error, MediaError):
            error = MediaError(str(error))
        self.media_error = error
        self.pause()
        logger.warning("media error on episode %s: %s", self.current_episode.id, error)

    def retry_media(self) -> None:
        self.media_error = None

    # -- progression -----------------------------------------------------

    def mark_complete(self):
        state = self.state
        if isinstance(state, Completed):
            if state.episode_index < len(self.episodes) - 1:
                self.state = Completed(state.episode_index + 1)
                self._switch_episode(state.episode_index + 1)
            return self.state
        if not isinstance(state, Active):
            return state
        if not self._loaded:
            self._fail("Course data is not loaded; try again.")
            return state
        if not can_mark_complete(self.role, self.progress_percent, self.is_completed):
            logger.info(
                "episode %s not watched to the end (%s%%)", self.current_episode.id, self.progress_percent
            )
            return state

        index = state.episode_index
        quiz = resolve_gate_quiz(
            index, self.quizzes, self.course.quiz_frequency, self.passed_quiz_ids, self.role
        )
        if requires_quiz(quiz, self.passed_quiz_ids):
            logger.info("quiz %s required after episode %s", quiz.id, index + 1)
            self.pause()
            self.state = QuizPending(quiz, index)
            return self.state
        return self._advance(index)

    def submit_quiz(self, answers: list):
        """Score and save an attempt at the pending quiz. Returns the QuizResult or None."""
        state = self.state
        if not isinstance(state, QuizPending):
            return None
        quiz, index = state.quiz, state.episode_index
        score = score_answers(quiz, answers)
        try:
            result = self.backend.save_quiz_result(quiz.id, score, len(quiz.questions))
        except BackendError as e:
            self._fail(f"Quiz result was not saved: {e}")
            return None

        if not quiz.is_passed_by(result):
            logger.info("quiz %s failed with %.0f%% (needs %s%%)", quiz.id, result.percentage, quiz.passing_score)
            return result
        self.passed_quiz_ids.add(quiz.id)
        self.state = Active(index)
        self._advance(index)
        return result

    def close_quiz(self):
        if isinstance(self.state, QuizPending):
            self.state = Active(self.state.episode_index)
        return self.state

    def _advance(self, index: int):
        course_id = self.course.id
        episode = self.episodes[index]
        last = index == len(self.episodes) - 1
        try:
            if episode.id != DEFAULT_EPISODE_ID:
                self.backend.update_episode_progress(course_id, episode.id, True)
            episode.completed = True
            if last:
                self.backend.update_course_progress(course_id, 100)
        except BackendError as e:
            self._fail(f"Progress was not saved: {e}")
            return self.state

        self.last_error = None
        if last:
            self.course.progress = 100
            self.state = Completed(index)
            self.pause()
            logger.info("course %s completed", course_id)
            for listener in self._completed_listeners:
                listener(self.course)
            return self.state

        self.state = Active(index + 1)
        self._switch_episode(index + 1)
        return self.state

    # -- favorites and integrity -----------------------------------------

    def toggle_favorite(self) -> bool:
        try:
            self.is_favorite = self.backend.toggle_favorite(self.course.id, "course")
        except BackendError as e:
            self._fail(str(e))
        return self.is_favorite

    def visibility_changed(self, hidden: bool):
        return self.monitor.visibility_changed(hidden)

    def key_pressed(self, key: str):
        return self.monitor.key_pressed(key)

    def dismiss_alert(self) -> None:
        self.monitor.dismiss()

    def _on_integrity_alert(self, alert) -> None:
        if alert.pause:
            self.pause()
        self._notify(alert.message)

    def _fail(self, message: str) -> None:
        self.last_error = message
        logger.warning(message)
        self._notify(message)

    def _notify(self, message: str) -> None:
        if self.notifier:
            self.notifier(message)
