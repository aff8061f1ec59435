"""Data classes for the course player domain model."""
from dataclasses import dataclass, field
from typing import Optional

ROLE_ADMIN = "admin"
ROLE_SUPERVISOR = "supervisor"
ROLE_STUDENT = "student"

DEFAULT_EPISODE_ID = "default"


@dataclass
class Episode:
    id: str
    title: str
    video_url: str = ""
    order_index: int = 0
    completed: Optional[bool] = None  # absent for legacy episodes
    duration: str = ""


@dataclass
class Course:
    id: str
    title: str
    episodes: list = field(default_factory=list)
    quiz_frequency: int = 0
    progress: int = 0
    enrolled: bool = False
    instructor: str = ""
    video_url: str = ""

    def ordered_episodes(self) -> list:
        """Episodes in play order; a course without episodes plays its own video."""
        if not self.episodes:
            return [Episode(id=DEFAULT_EPISODE_ID, title=self.title, video_url=self.video_url)]
        return sorted(self.episodes, key=lambda e: e.order_index)


@dataclass
class Question:
    text: str
    options: list
    correct_answer: int


@dataclass
class Quiz:
    id: str
    course_id: str
    title: str
    questions: list = field(default_factory=list)
    passing_score: int = 70
    after_episode_index: Optional[int] = None

    def is_passed_by(self, result: "QuizResult") -> bool:
        return result.quiz_id == self.id and result.percentage >= self.passing_score


@dataclass
class QuizResult:
    quiz_id: str
    score: int
    total: int
    completed_at: Optional[str] = None

    @property
    def percentage(self) -> float:
        if not self.total:
            return 0.0
        return self.score / self.total * 100


@dataclass
class Certificate:
    id: str
    student_id: str
    course_id: str
    grade: str
    issue_date: str
    code: str
    course_title: str = ""
