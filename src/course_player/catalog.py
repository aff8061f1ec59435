"""Course catalog reads and per-user progress writes."""
from datetime import datetime

from course_player.db import get_connection
from course_player.errors import NotFoundError
from course_player.models import Course, Episode


def _load_course(conn, user_id: str, row) -> Course:
    episode_rows = conn.execute(
        """SELECT e.*, ep.completed AS done
        FROM episodes e
        LEFT JOIN episode_progress ep ON ep.episode_id = e.id AND ep.user_id = ?
        WHERE e.course_id = ?
        ORDER BY e.order_index""",
        (user_id, row["id"]),
    ).fetchall()
    episodes = [
        Episode(
            id=e["id"],
            title=e["title"],
            video_url=e["video_url"] or "",
            order_index=e["order_index"],
            completed=None if e["done"] is None else bool(e["done"]),
            duration=e["duration"] or "",
        )
        for e in episode_rows
    ]
    progress = conn.execute(
        "SELECT progress FROM course_progress WHERE user_id = ? AND course_id = ?",
        (user_id, row["id"]),
    ).fetchone()
    enrolled = conn.execute(
        "SELECT 1 FROM enrollments WHERE user_id = ? AND course_id = ?",
        (user_id, row["id"]),
    ).fetchone()
    return Course(
        id=row["id"],
        title=row["title"],
        episodes=episodes,
        quiz_frequency=row["quiz_frequency"] or 0,
        progress=progress["progress"] if progress else 0,
        enrolled=enrolled is not None,
        instructor=row["instructor"] or "",
        video_url=row["video_url"] or "",
    )


def get_courses(db_path: str, user_id: str) -> list[Course]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM courses ORDER BY rowid").fetchall()
    courses = [_load_course(conn, user_id, r) for r in rows]
    conn.close()
    return courses


def get_course(db_path: str, user_id: str, course_id: str) -> Course:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM courses WHERE id = ?", (course_id,)).fetchone()
    if row is None:
        conn.close()
        raise NotFoundError(f"Course not found: {course_id}")
    course = _load_course(conn, user_id, row)
    conn.close()
    return course


def get_course_percentages(db_path: str, user_id: str) -> dict[str, int]:
    """Stored completion percentage of every course in the curriculum."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT c.id, COALESCE(cp.progress, 0) AS progress
        FROM courses c
        LEFT JOIN course_progress cp ON cp.course_id = c.id AND cp.user_id = ?
        ORDER BY c.rowid""",
        (user_id,),
    ).fetchall()
    conn.close()
    return {r["id"]: r["progress"] for r in rows}


def update_episode_progress(db_path: str, user_id: str, course_id: str, episode_id: str, completed: bool) -> None:
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO episode_progress (user_id, episode_id, course_id, completed, updated_at)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(user_id, episode_id) DO UPDATE SET completed=excluded.completed, updated_at=excluded.updated_at""",
        (user_id, episode_id, course_id, int(completed), datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()


def update_course_progress(db_path: str, user_id: str, course_id: str, progress: int) -> None:
    progress = max(0, min(100, int(progress)))
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO course_progress (user_id, course_id, progress, updated_at)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(user_id, course_id) DO UPDATE SET progress=excluded.progress, updated_at=excluded.updated_at""",
        (user_id, course_id, progress, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()


def enroll(db_path: str, user_id: str, course_id: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT OR IGNORE INTO enrollments (user_id, course_id, enrolled_at) VALUES (?, ?, ?)",
        (user_id, course_id, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()
