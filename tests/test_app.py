from unittest.mock import patch

from course_player.app import (
    cmd_certificates, cmd_courses, cmd_favorites, cmd_play, cmd_whoami,
    current_user, fmt_time, run_quiz_session,
)
from course_player.backend import Backend
from course_player.catalog import get_course, update_course_progress
from course_player.config import MASTER_CERT
from course_player.models import ROLE_ADMIN, ROLE_STUDENT
from course_player.quiz import get_quizzes


def test_fmt_time():
    assert fmt_time(0) == "00:00"
    assert fmt_time(65) == "1:05"


def test_run_quiz_session_returns_zero_based_answers(seeded_db):
    quiz = get_quizzes(seeded_db, course_id="seerah")[0]
    with patch("course_player.app.IntPrompt.ask", side_effect=[2, 3, 2]):
        answers = run_quiz_session(quiz)
    assert answers == [1, 2, 1]


def test_current_user_defaults(seeded_db):
    assert current_user(seeded_db) == ("student-1", ROLE_STUDENT)


def test_cmd_whoami_saves_user(seeded_db):
    with patch("course_player.app.Prompt.ask", side_effect=["instructor-7", ROLE_ADMIN]):
        cmd_whoami(seeded_db)
    assert current_user(seeded_db) == ("instructor-7", ROLE_ADMIN)


def test_cmd_courses_lists(seeded_db):
    cmd_courses(Backend(seeded_db, "u1"))


def test_cmd_favorites_empty(seeded_db):
    cmd_favorites(Backend(seeded_db, "u1"))


def test_cmd_play_completes_single_video_course(seeded_db):
    backend = Backend(seeded_db, "u1")
    with patch("course_player.app.IntPrompt.ask", return_value=1), \
         patch("course_player.app.Prompt.ask", side_effect=["y", "watch 600", "complete", "exit"]):
        cmd_play(backend, ROLE_STUDENT)
    course = get_course(seeded_db, "u1", "orientation")
    assert course.enrolled is True
    assert course.progress == 100


def test_cmd_play_rejects_seek_past_watched(seeded_db):
    backend = Backend(seeded_db, "u1")
    with patch("course_player.app.IntPrompt.ask", return_value=4), \
         patch("course_player.app.Prompt.ask", side_effect=["y", "watch 30", "seek 500", "complete", "exit"]):
        cmd_play(backend, ROLE_STUDENT)
    course = get_course(seeded_db, "u1", "ethics")
    assert course.episodes[0].completed is None


def test_cmd_certificates_claims_offers(seeded_db):
    backend = Backend(seeded_db, "u1")
    for course_id in ("orientation", "foundations", "seerah", "ethics"):
        update_course_progress(seeded_db, "u1", course_id, 100)
    with patch("course_player.app.Prompt.ask", return_value="y"):
        cmd_certificates(backend)
    issued = {c.course_id for c in backend.get_certificates()}
    assert issued == {"orientation", "foundations", "seerah", "ethics", MASTER_CERT}

    with patch("course_player.app.Prompt.ask") as ask:
        cmd_certificates(backend)
    ask.assert_not_called()


def test_cmd_play_with_empty_catalog_does_not_prompt(tmp_db):
    from course_player.db import init_db
    init_db(tmp_db)
    with patch("course_player.app.IntPrompt.ask") as ask:
        cmd_play(Backend(tmp_db, "u1"), ROLE_STUDENT)
    ask.assert_not_called()
