import json
import pytest

from course_player.db import init_db
from course_player.importer import import_catalog
from course_player.seed import seed_all


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_player.db")
    return db_path


@pytest.fixture
def seeded_db(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    return tmp_db


@pytest.fixture
def load_catalog(tmp_db, tmp_path):
    """Write a catalog dict to disk and import it into a fresh database."""
    def _load(courses: list) -> str:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"courses": courses}))
        init_db(tmp_db)
        import_catalog(tmp_db, str(path))
        return tmp_db
    return _load


def episodes(course_id: str, count: int) -> list:
    return [
        {"id": f"{course_id}-{i}", "title": f"Episode {i + 1}", "video_url": f"https://v/{course_id}/{i}.mp4"}
        for i in range(count)
    ]


def question(correct: int = 0) -> dict:
    return {"text": "Pick one", "options": ["a", "b", "c"], "correct_answer": correct}
