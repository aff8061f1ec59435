"""Tests for quiz gating between episodes."""
from course_player.gate import can_mark_complete, requires_quiz, resolve_gate_quiz
from course_player.models import ROLE_ADMIN, ROLE_STUDENT, Quiz


def make_quiz(quiz_id, after=None, passing_score=70):
    return Quiz(id=quiz_id, course_id="c1", title=quiz_id, passing_score=passing_score, after_episode_index=after)


def test_mark_complete_requires_full_watch():
    assert can_mark_complete(ROLE_STUDENT, 99, False) is False
    assert can_mark_complete(ROLE_STUDENT, 100, False) is True


def test_mark_complete_allowed_for_admin_or_review():
    assert can_mark_complete(ROLE_ADMIN, 0, False) is True
    assert can_mark_complete(ROLE_STUDENT, 0, True) is True


def test_explicit_gate_uses_one_based_count():
    quizzes = [make_quiz("q1", after=1), make_quiz("q3", after=3)]
    assert resolve_gate_quiz(0, quizzes, 0, set(), ROLE_STUDENT).id == "q1"
    assert resolve_gate_quiz(1, quizzes, 0, set(), ROLE_STUDENT) is None
    assert resolve_gate_quiz(2, quizzes, 0, set(), ROLE_STUDENT).id == "q3"


def test_explicit_gate_returned_even_when_passed():
    quizzes = [make_quiz("q1", after=1)]
    quiz = resolve_gate_quiz(0, quizzes, 0, {"q1"}, ROLE_STUDENT)
    assert quiz.id == "q1"
    assert requires_quiz(quiz, {"q1"}) is False


def test_frequency_gate_picks_first_unpassed_quiz():
    quizzes = [make_quiz("a"), make_quiz("b"), make_quiz("c")]
    assert resolve_gate_quiz(1, quizzes, 2, set(), ROLE_STUDENT).id == "a"
    assert resolve_gate_quiz(1, quizzes, 2, {"a"}, ROLE_STUDENT).id == "b"
    assert resolve_gate_quiz(3, quizzes, 2, {"a", "b"}, ROLE_STUDENT).id == "c"


def test_frequency_gate_only_on_multiples():
    quizzes = [make_quiz("a")]
    assert resolve_gate_quiz(0, quizzes, 2, set(), ROLE_STUDENT) is None
    assert resolve_gate_quiz(2, quizzes, 2, set(), ROLE_STUDENT) is None
    assert resolve_gate_quiz(1, quizzes, 2, set(), ROLE_STUDENT) is not None


def test_frequency_gate_disabled_at_zero():
    assert resolve_gate_quiz(1, [make_quiz("a")], 0, set(), ROLE_STUDENT) is None


def test_frequency_gate_skipped_for_admin():
    assert resolve_gate_quiz(1, [make_quiz("a")], 2, set(), ROLE_ADMIN) is None


def test_frequency_gate_none_when_all_passed():
    quizzes = [make_quiz("a"), make_quiz("b")]
    assert resolve_gate_quiz(1, quizzes, 2, {"a", "b"}, ROLE_STUDENT) is None


def test_explicit_gate_wins_over_frequency():
    quizzes = [make_quiz("a"), make_quiz("explicit", after=2)]
    assert resolve_gate_quiz(1, quizzes, 2, set(), ROLE_STUDENT).id == "explicit"


def test_requires_quiz_without_quiz():
    assert requires_quiz(None, set()) is False
