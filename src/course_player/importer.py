"""Import curriculum files (courses, episodes and quizzes)."""
import json
from pathlib import Path

from course_player.config import DEFAULT_PASSING_SCORE
from course_player.db import get_connection
from course_player.models import Question
from course_player.quiz import questions_to_json


def load_catalog(file_path: str) -> dict:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    elif suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
    else:
        raise ValueError(f"Unsupported catalog format: {suffix}")
    if not isinstance(data, dict) or not isinstance(data.get("courses"), list):
        raise ValueError("Catalog must contain a 'courses' list")
    return data


def _validate_question(course_id: str, q: dict) -> Question:
    options = list(q.get("options") or [])
    if len(options) < 2:
        raise ValueError(f"Question in course {course_id} needs at least 2 options: {q.get('text')!r}")
    correct = int(q["correct_answer"])
    if not 0 <= correct < len(options):
        raise ValueError(f"correct_answer out of range in course {course_id}: {q.get('text')!r}")
    return Question(text=q["text"], options=options, correct_answer=correct)


def import_catalog(db_path: str, file_path: str) -> dict:
    """Upsert every course in the file. Returns counts of what was written."""
    data = load_catalog(file_path)
    counts = {"courses": 0, "episodes": 0, "quizzes": 0}
    conn = get_connection(db_path)
    try:
        for course in data["courses"]:
            course_id = str(course["id"])
            conn.execute(
                """INSERT INTO courses (id, title, instructor, video_url, quiz_frequency)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET title=excluded.title, instructor=excluded.instructor,
                    video_url=excluded.video_url, quiz_frequency=excluded.quiz_frequency""",
                (
                    course_id,
                    course["title"],
                    course.get("instructor", ""),
                    course.get("video_url", ""),
                    max(0, int(course.get("quiz_frequency", 0) or 0)),
                ),
            )
            counts["courses"] += 1
            for position, ep in enumerate(course.get("episodes") or []):
                conn.execute(
                    """INSERT INTO episodes (id, course_id, title, video_url, order_index, duration)
                    VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET course_id=excluded.course_id, title=excluded.title,
                        video_url=excluded.video_url, order_index=excluded.order_index, duration=excluded.duration""",
                    (
                        str(ep["id"]),
                        course_id,
                        ep["title"],
                        ep.get("video_url", ""),
                        int(ep.get("order_index", position)),
                        ep.get("duration", ""),
                    ),
                )
                counts["episodes"] += 1
            for position, qz in enumerate(course.get("quizzes") or []):
                questions = [_validate_question(course_id, q) for q in qz.get("questions") or []]
                conn.execute(
                    """INSERT INTO quizzes (id, course_id, title, questions, passing_score, after_episode_index, position)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET course_id=excluded.course_id, title=excluded.title,
                        questions=excluded.questions, passing_score=excluded.passing_score,
                        after_episode_index=excluded.after_episode_index, position=excluded.position""",
                    (
                        str(qz["id"]),
                        course_id,
                        qz["title"],
                        questions_to_json(questions),
                        qz.get("passing_score") or DEFAULT_PASSING_SCORE,
                        qz.get("after_episode_index"),
                        position,
                    ),
                )
                counts["quizzes"] += 1
        conn.commit()
    finally:
        conn.close()
    return counts
