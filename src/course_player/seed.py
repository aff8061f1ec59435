"""Seed the database with the bundled sample curriculum."""
from pathlib import Path

from course_player.db import get_connection
from course_player.importer import import_catalog

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(db_path: str) -> bool:
    """Check whether the database already has courses."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM courses").fetchone()[0]
    conn.close()
    return count > 0


def seed_all(db_path: str) -> None:
    if is_seeded(db_path):
        return
    import_catalog(db_path, str(CONTENT_DIR / "sample_curriculum.yaml"))
