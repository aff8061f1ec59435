"""Tests for data model classes."""
from course_player.models import Course, Episode, Quiz, QuizResult, DEFAULT_EPISODE_ID


def test_course_defaults():
    c = Course(id="c1", title="Intro")
    assert c.quiz_frequency == 0
    assert c.progress == 0
    assert c.enrolled is False


def test_ordered_episodes_sorted_by_order_index():
    c = Course(id="c1", title="Intro", episodes=[
        Episode(id="b", title="B", order_index=2),
        Episode(id="a", title="A", order_index=0),
        Episode(id="m", title="M", order_index=1),
    ])
    assert [e.id for e in c.ordered_episodes()] == ["a", "m", "b"]


def test_course_without_episodes_plays_default_episode():
    c = Course(id="c1", title="Intro", video_url="https://v/intro.mp4")
    episodes = c.ordered_episodes()
    assert len(episodes) == 1
    assert episodes[0].id == DEFAULT_EPISODE_ID
    assert episodes[0].video_url == "https://v/intro.mp4"


def test_episode_completed_absent_by_default():
    assert Episode(id="e", title="E").completed is None


def test_quiz_result_percentage():
    assert QuizResult(quiz_id="q", score=3, total=4).percentage == 75.0
    assert QuizResult(quiz_id="q", score=0, total=0).percentage == 0.0


def test_quiz_passed_at_threshold():
    quiz = Quiz(id="q", course_id="c1", title="Q")
    assert quiz.passing_score == 70
    assert quiz.is_passed_by(QuizResult(quiz_id="q", score=7, total=10)) is True
    assert quiz.is_passed_by(QuizResult(quiz_id="q", score=6, total=10)) is False
    assert quiz.is_passed_by(QuizResult(quiz_id="other", score=10, total=10)) is False
