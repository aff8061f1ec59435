# tests/test_integration.py
"""End-to-end walk through a gated course to the master certificate."""
from course_player.backend import Backend
from course_player.catalog import get_course, update_course_progress
from course_player.certificates import CertificateEligibility
from course_player.config import MASTER_CERT
from course_player.player import Active, Completed, CoursePlayer, Locked, QuizPending


def test_full_curriculum_workflow(seeded_db):
    backend = Backend(seeded_db, "u1")
    for course_id in ("orientation", "foundations", "ethics"):
        update_course_progress(seeded_db, "u1", course_id, 100)

    eligibility = CertificateEligibility(backend.get_certificates())
    assert eligibility.refresh(backend.get_course_percentages()) == ["orientation", "foundations", "ethics"]

    offers = []
    course = get_course(seeded_db, "u1", "seerah")
    player = CoursePlayer(course, backend)
    player.on_completed(lambda c: offers.append(c.id) if eligibility.course_completed(c.id) else None)
    assert player.state == Locked()
    player.enroll()

    for index in range(3):
        assert player.state == Active(index)
        player.play()
        player.time_update(0, 300)
        # trying to jump to the end is refused
        assert player.seek(290) is False
        player.tick(300)
        player.mark_complete()

    assert isinstance(player.state, QuizPending)
    player.submit_quiz([0, 0, 0])
    assert isinstance(player.state, QuizPending)
    player.submit_quiz([1, 2, 1])
    assert isinstance(player.state, Completed)
    assert offers == ["seerah"]

    backend.generate_certificate("seerah")
    assert eligibility.refresh(backend.get_course_percentages(), backend.get_certificates()) == [MASTER_CERT]
    master = backend.generate_master_certificate()
    assert master.course_id == MASTER_CERT
    assert eligibility.refresh(backend.get_course_percentages(), backend.get_certificates()) == []
