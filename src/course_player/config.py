"""Runtime configuration and persistent user settings."""
import os
from pathlib import Path

from course_player.db import get_connection

DEFAULT_DB_PATH = os.environ.get(
    "COURSE_PLAYER_DB", str(Path.home() / ".course_player" / "player.db")
)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")

SKIP_SECONDS = 10
DEFAULT_PASSING_SCORE = 70
MASTER_CERT = "MASTER_CERT"


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()
