"""Quiz storage, scoring and pass tracking."""
import json
from datetime import datetime

from course_player.db import get_connection
from course_player.config import DEFAULT_PASSING_SCORE
from course_player.models import Question, Quiz, QuizResult


def _row_to_quiz(row) -> Quiz:
    questions = [
        Question(text=q["text"], options=list(q["options"]), correct_answer=int(q["correctAnswer"]))
        for q in json.loads(row["questions"] or "[]")
    ]
    return Quiz(
        id=row["id"],
        course_id=row["course_id"],
        title=row["title"],
        questions=questions,
        passing_score=row["passing_score"] if row["passing_score"] is not None else DEFAULT_PASSING_SCORE,
        after_episode_index=row["after_episode_index"],
    )


def questions_to_json(questions: list) -> str:
    return json.dumps(
        [{"text": q.text, "options": q.options, "correctAnswer": q.correct_answer} for q in questions],
        ensure_ascii=False,
    )


def get_quizzes(db_path: str, course_id: str | None = None) -> list[Quiz]:
    """All quizzes in course order, optionally filtered to one course."""
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM quizzes ORDER BY position, id").fetchall()
    conn.close()
    quizzes = [_row_to_quiz(r) for r in rows]
    if course_id is not None:
        quizzes = [q for q in quizzes if str(q.course_id) == str(course_id)]
    return quizzes


def get_quiz_results(db_path: str, user_id: str) -> list[QuizResult]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM quiz_results WHERE user_id = ? ORDER BY id", (user_id,)
    ).fetchall()
    conn.close()
    return [
        QuizResult(quiz_id=r["quiz_id"], score=r["score"], total=r["total"], completed_at=r["completed_at"])
        for r in rows
    ]


def save_quiz_result(db_path: str, user_id: str, quiz_id: str, score: int, total: int) -> QuizResult:
    result = QuizResult(quiz_id=quiz_id, score=score, total=total, completed_at=datetime.now().isoformat())
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO quiz_results (user_id, quiz_id, score, total, percentage, completed_at)
        VALUES (?, ?, ?, ?, ?, ?)""",
        (user_id, quiz_id, score, total, result.percentage, result.completed_at),
    )
    conn.commit()
    conn.close()
    return result


def passed_quiz_ids(quizzes: list[Quiz], results: list[QuizResult]) -> set[str]:
    """Ids of quizzes with at least one passing result. A pass is never revoked."""
    by_id = {q.id: q for q in quizzes}
    return {
        r.quiz_id for r in results
        if r.quiz_id in by_id and by_id[r.quiz_id].is_passed_by(r)
    }


def get_passed_quiz_ids(db_path: str, user_id: str) -> set[str]:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT DISTINCT r.quiz_id FROM quiz_results r
        JOIN quizzes q ON r.quiz_id = q.id
        WHERE r.user_id = ? AND r.percentage >= q.passing_score""",
        (user_id,),
    ).fetchall()
    conn.close()
    return {r["quiz_id"] for r in rows}


def score_answers(quiz: Quiz, answers: list) -> int:
    """Count answers matching each question's correct option index."""
    return sum(
        1 for question, answer in zip(quiz.questions, answers)
        if answer is not None and int(answer) == question.correct_answer
    )
