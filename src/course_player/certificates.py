"""Certificate eligibility and issuance."""
import logging
import sqlite3
import uuid
from datetime import date

from course_player.catalog import get_course_percentages
from course_player.config import MASTER_CERT
from course_player.db import get_connection
from course_player.errors import CertificateExistsError, NotEligibleError, NotFoundError
from course_player.models import Certificate

logger = logging.getLogger(__name__)

MASTER_TITLE = "Comprehensive Curriculum Certificate"


def _has(certificates: list[Certificate], course_id: str) -> bool:
    return any(str(c.course_id) == str(course_id) for c in certificates)


def is_course_eligible(course_completed: bool, course_id: str, certificates: list[Certificate]) -> bool:
    return course_completed and not _has(certificates, course_id)


def is_master_eligible(course_percentages: dict, certificates: list[Certificate]) -> bool:
    """Every course in the curriculum at 100% and no master certificate yet."""
    if not course_percentages:
        return False
    if not all(p == 100 for p in course_percentages.values()):
        return False
    return not _has(certificates, MASTER_CERT)


class CertificateEligibility:
    """Tracks which certificates have been offered so none is offered twice."""

    def __init__(self, certificates: list[Certificate] | None = None):
        self.certificates = list(certificates or [])
        self.offered = set()

    def refresh(self, course_percentages: dict, certificates: list[Certificate] | None = None) -> list[str]:
        """Recompute eligibility and return course ids (or MASTER_CERT) newly eligible."""
        if certificates is not None:
            self.certificates = list(certificates)
        offers = []
        for course_id, pct in course_percentages.items():
            if course_id in self.offered:
                continue
            if is_course_eligible(pct == 100, course_id, self.certificates):
                offers.append(course_id)
        if MASTER_CERT not in self.offered and is_master_eligible(course_percentages, self.certificates):
            offers.append(MASTER_CERT)
        self.offered.update(offers)
        return offers

    def course_completed(self, course_id: str) -> bool:
        """Offer a single course the moment its player reaches the completed state."""
        if course_id in self.offered or not is_course_eligible(True, course_id, self.certificates):
            return False
        self.offered.add(course_id)
        return True

    def issued(self, certificate: Certificate) -> None:
        self.certificates.append(certificate)


def _row_to_certificate(row) -> Certificate:
    return Certificate(
        id=row["id"],
        student_id=row["user_id"],
        course_id=row["course_id"],
        grade=row["grade"],
        issue_date=row["issue_date"],
        code=row["certificate_code"],
        course_title=row["course_title"] or "",
    )


def get_certificates(db_path: str, user_id: str) -> list[Certificate]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM certificates WHERE user_id = ? ORDER BY issue_date, rowid", (user_id,)
    ).fetchall()
    conn.close()
    return [_row_to_certificate(r) for r in rows]


def _insert(db_path: str, cert: Certificate) -> Certificate:
    conn = get_connection(db_path)
    try:
        conn.execute(
            """INSERT INTO certificates (id, user_id, course_id, course_title, issue_date, grade, certificate_code)
            VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (cert.id, cert.student_id, cert.course_id, cert.course_title, cert.issue_date, cert.grade, cert.code),
        )
        conn.commit()
    except sqlite3.IntegrityError as e:
        raise CertificateExistsError(f"Certificate already exists for {cert.course_id}") from e
    finally:
        conn.close()
    return cert


def _new_certificate(user_id: str, course_id: str, title: str, grade: str, prefix: str) -> Certificate:
    token = uuid.uuid4().hex
    return Certificate(
        id=token,
        student_id=user_id,
        course_id=course_id,
        grade=grade,
        issue_date=date.today().isoformat(),
        code=f"{prefix}-{token[:12].upper()}",
        course_title=title,
    )


def generate_certificate(db_path: str, user_id: str, course_id: str) -> Certificate:
    """Issue the certificate for a completed course. A second call is rejected."""
    conn = get_connection(db_path)
    existing = conn.execute(
        "SELECT id FROM certificates WHERE user_id = ? AND course_id = ?", (user_id, course_id)
    ).fetchone()
    course = conn.execute("SELECT title FROM courses WHERE id = ?", (course_id,)).fetchone()
    progress = conn.execute(
        "SELECT progress FROM course_progress WHERE user_id = ? AND course_id = ?", (user_id, course_id)
    ).fetchone()
    conn.close()
    if existing:
        raise CertificateExistsError("Certificate already exists for this course")
    if course is None:
        raise NotFoundError(f"Course not found: {course_id}")
    if not progress or progress["progress"] != 100:
        raise NotEligibleError("Course is not completed", completed=0, total=1)

    cert = _insert(db_path, _new_certificate(user_id, course_id, course["title"], "Excellent", "CERT"))
    logger.info("certificate issued user=%s course=%s code=%s", user_id, course_id, cert.code)
    return cert


def generate_master_certificate(db_path: str, user_id: str) -> Certificate:
    """Issue the curriculum certificate once every course is at 100%."""
    certificates = get_certificates(db_path, user_id)
    if _has(certificates, MASTER_CERT):
        raise CertificateExistsError("Master certificate already exists")
    percentages = get_course_percentages(db_path, user_id)
    if not is_master_eligible(percentages, certificates):
        completed = sum(1 for p in percentages.values() if p == 100)
        raise NotEligibleError(
            f"Not all courses completed ({completed}/{len(percentages)})",
            completed=completed,
            total=len(percentages),
        )

    cert = _insert(db_path, _new_certificate(user_id, MASTER_CERT, MASTER_TITLE, "Distinction", "MASTER"))
    logger.info("master certificate issued user=%s code=%s", user_id, cert.code)
    return cert
