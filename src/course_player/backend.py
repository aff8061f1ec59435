"""Backend facade consumed by the player."""
import functools
import logging
import sqlite3

from course_player import catalog, certificates, favorites, quiz
from course_player.errors import BackendError

logger = logging.getLogger(__name__)


def _wrap_db_errors(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except sqlite3.Error as e:
            logger.warning("%s failed: %s", method.__name__, e)
            raise BackendError(f"{method.__name__} failed: {e}") from e
    return wrapper


class Backend:
    """Persistence calls for one signed-in user."""

    def __init__(self, db_path: str, user_id: str):
        self.db_path = db_path
        self.user_id = user_id

    @_wrap_db_errors
    def get_quizzes(self, course_id: str | None = None):
        return quiz.get_quizzes(self.db_path, course_id)

    @_wrap_db_errors
    def get_quiz_results(self):
        return quiz.get_quiz_results(self.db_path, self.user_id)

    @_wrap_db_errors
    def save_quiz_result(self, quiz_id: str, score: int, total: int):
        return quiz.save_quiz_result(self.db_path, self.user_id, quiz_id, score, total)

    @_wrap_db_errors
    def update_episode_progress(self, course_id: str, episode_id: str, completed: bool) -> None:
        catalog.update_episode_progress(self.db_path, self.user_id, course_id, episode_id, completed)

    @_wrap_db_errors
    def update_course_progress(self, course_id: str, progress: int) -> None:
        catalog.update_course_progress(self.db_path, self.user_id, course_id, progress)

    @_wrap_db_errors
    def enroll(self, course_id: str) -> None:
        catalog.enroll(self.db_path, self.user_id, course_id)

    @_wrap_db_errors
    def get_courses(self):
        return catalog.get_courses(self.db_path, self.user_id)

    @_wrap_db_errors
    def get_course_percentages(self):
        return catalog.get_course_percentages(self.db_path, self.user_id)

    @_wrap_db_errors
    def get_favorites(self):
        return favorites.get_favorites(self.db_path, self.user_id)

    @_wrap_db_errors
    def toggle_favorite(self, target_id: str, type: str = "course") -> bool:
        return favorites.toggle_favorite(self.db_path, self.user_id, target_id, type)

    @_wrap_db_errors
    def get_certificates(self):
        return certificates.get_certificates(self.db_path, self.user_id)

    @_wrap_db_errors
    def generate_certificate(self, course_id: str):
        return certificates.generate_certificate(self.db_path, self.user_id, course_id)

    @_wrap_db_errors
    def generate_master_certificate(self):
        return certificates.generate_master_certificate(self.db_path, self.user_id)
