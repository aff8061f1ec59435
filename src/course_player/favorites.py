"""Per-user favorites."""
from course_player.db import get_connection


def get_favorites(db_path: str, user_id: str) -> list[dict]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT target_id, type FROM favorites WHERE user_id = ? ORDER BY rowid", (user_id,)
    ).fetchall()
    conn.close()
    return [dict(r) for r in rows]


def toggle_favorite(db_path: str, user_id: str, target_id: str, type: str = "course") -> bool:
    """Flip the favorite flag and return the new state."""
    conn = get_connection(db_path)
    existing = conn.execute(
        "SELECT 1 FROM favorites WHERE user_id = ? AND target_id = ? AND type = ?",
        (user_id, target_id, type),
    ).fetchone()
    if existing:
        conn.execute(
            "DELETE FROM favorites WHERE user_id = ? AND target_id = ? AND type = ?",
            (user_id, target_id, type),
        )
    else:
        conn.execute(
            "INSERT INTO favorites (user_id, target_id, type) VALUES (?, ?, ?)",
            (user_id, target_id, type),
        )
    conn.commit()
    conn.close()
    return not existing
