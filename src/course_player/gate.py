"""Knowledge-check gating between episodes."""
from course_player.models import ROLE_ADMIN, Quiz


def can_mark_complete(role: str, progress_percent: int, is_completed: bool) -> bool:
    """An episode can be completed once watched to the end, or in review/admin mode."""
    return role == ROLE_ADMIN or progress_percent >= 100 or is_completed


def resolve_gate_quiz(
    episode_index: int,
    quizzes: list[Quiz],
    quiz_frequency: int,
    passed_ids: set,
    role: str,
) -> Quiz | None:
    """Find the quiz designated to follow the episode at ``episode_index`` (0-based).

    A quiz whose ``after_episode_index`` equals the number of completed
    episodes is an explicit gate. Without one, every ``quiz_frequency``
    episodes the first course quiz not yet passed is used instead.
    """
    completed_count = episode_index + 1
    for quiz in quizzes:
        if quiz.after_episode_index == completed_count:
            return quiz

    if quiz_frequency and quiz_frequency > 0 and role != ROLE_ADMIN:
        if completed_count % quiz_frequency == 0:
            for quiz in quizzes:
                if quiz.id not in passed_ids:
                    return quiz
    return None


def requires_quiz(quiz: Quiz | None, passed_ids: set) -> bool:
    return quiz is not None and quiz.id not in passed_ids
