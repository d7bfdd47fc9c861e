"""
Student self-service: own enrollments, available offerings and
self-enrollment gates.
"""

import pytest

from portal_backend.model import Enrollment

from .fixtures import assign, bearer, make_offering, make_program, make_session, make_staff, make_student


@pytest.fixture
def program(db):
    return make_program(db)


@pytest.fixture
def term(db):
    return make_session(db, "2025/2026", is_active=True)


@pytest.fixture
def enrolled_student(db, program, term):
    return make_student(db, program=program, session=term)


@pytest.fixture
def headers(db, enrolled_student):
    return bearer(db, enrolled_student.profile.user)


@pytest.mark.integration
class TestMyEnrollments:

    def test_lists_own_enrollments_by_session(self, client, db, enrolled_student, headers, term):
        current = make_offering(db, session=term, is_published=True)
        previous = make_offering(db, session=make_session(db), is_published=True)
        other = make_student(db)
        db.add_all([
            Enrollment(student_id=enrolled_student.id, course_offering_id=current.id),
            Enrollment(student_id=enrolled_student.id, course_offering_id=previous.id),
            Enrollment(student_id=other.id, course_offering_id=current.id),
        ])
        db.commit()

        everything = client.get("/student/enrollments", headers=headers).json()["enrollments"]
        this_term = client.get(f"/student/enrollments?session_id={term.id}", headers=headers).json()["enrollments"]

        assert {e["course_offering_id"] for e in everything} == {current.id, previous.id}
        assert [e["course_offering_id"] for e in this_term] == [current.id]
        assert this_term[0]["course_offering"]["course"]["code"]


@pytest.mark.integration
class TestAvailableOfferings:

    def test_requires_session(self, client, headers):
        response = client.get("/student/enrollments/available", headers=headers)
        assert response.json() == {"offerings": []}

        response = client.get("/student/enrollments/available?session_id=%20", headers=headers)
        assert response.json() == {"offerings": []}

    def test_unregistered_session_is_empty(self, client, db, headers, program):
        other_term = make_session(db)
        make_offering(db, session=other_term, program=program, is_published=True)

        response = client.get(f"/student/enrollments/available?session_id={other_term.id}", headers=headers)

        assert response.json() == {"offerings": []}

    def test_lists_published_offerings_open_to_program(self, client, db, headers, program, term):
        direct = make_offering(db, session=term, program=program, is_published=True)
        linked = make_offering(db, session=term, program=make_program(db), linked_programs=[program], is_published=True)
        make_offering(db, session=term, program=program, is_published=False)
        make_offering(db, session=term, program=make_program(db), is_published=True)
        lecturer = make_staff(db, first_name="Uche", last_name="Okafor")
        assign(db, direct, lecturer)

        response = client.get(f"/student/enrollments/available?session_id={term.id}", headers=headers)

        offerings = {o["id"]: o for o in response.json()["offerings"]}
        assert set(offerings) == {direct.id, linked.id}
        assert offerings[direct.id]["lecturers"] == [{"id": lecturer.id, "name": "Uche Okafor"}]
        assert offerings[direct.id]["session"]["id"] == term.id
        assert offerings[linked.id]["lecturers"] == []

    def test_student_without_program(self, client, db, term):
        student = make_student(db, session=term)

        response = client.get(
            f"/student/enrollments/available?session_id={term.id}",
            headers=bearer(db, student.profile.user)
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid student context"}


@pytest.mark.integration
class TestSelfEnrollment:

    def test_enroll_and_repeat(self, client, db, enrolled_student, headers, program, term):
        offering = make_offering(db, session=term, program=program, is_published=True)

        first = client.post(f"/student/enrollments/{offering.id}", headers=headers)
        second = client.post(f"/student/enrollments/{offering.id}", headers=headers)

        assert first.json() == {"ok": True}
        assert second.json() == {"ok": True, "already_enrolled": True}
        assert db.query(Enrollment).filter_by(student_id=enrolled_student.id).count() == 1

    def test_enroll_through_linked_program(self, client, db, headers, program, term):
        offering = make_offering(db, session=term, program=make_program(db), linked_programs=[program], is_published=True)

        response = client.post(f"/student/enrollments/{offering.id}", headers=headers)

        assert response.json() == {"ok": True}

    def test_missing_offering(self, client, headers):
        response = client.post("/student/enrollments/does-not-exist", headers=headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Course offering not found"}

    def test_unpublished_offering(self, client, db, headers, program, term):
        offering = make_offering(db, session=term, program=program, is_published=False)

        response = client.post(f"/student/enrollments/{offering.id}", headers=headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Course offering is not published"}

    def test_not_registered_for_session(self, client, db, headers, program):
        offering = make_offering(db, session=make_session(db), program=program, is_published=True)

        response = client.post(f"/student/enrollments/{offering.id}", headers=headers)

        assert response.status_code == 403
        assert response.json() == {"error": "You are not registered for this session."}

    def test_other_program(self, client, db, headers, term):
        offering = make_offering(db, session=term, program=make_program(db), is_published=True)

        response = client.post(f"/student/enrollments/{offering.id}", headers=headers)

        assert response.status_code == 403
        assert response.json() == {"error": "You are not eligible for this course offering."}

    def test_student_without_program(self, client, db, term):
        student = make_student(db, session=term)
        offering = make_offering(db, session=term, is_published=True)

        response = client.post(f"/student/enrollments/{offering.id}", headers=bearer(db, student.profile.user))

        assert response.status_code == 400
        assert response.json() == {"error": "Student is missing program_id"}

    def test_withdraw_is_idempotent(self, client, db, enrolled_student, headers, program, term):
        offering = make_offering(db, session=term, program=program, is_published=True)
        db.add(Enrollment(student_id=enrolled_student.id, course_offering_id=offering.id))
        db.commit()

        first = client.delete(f"/student/enrollments/{offering.id}", headers=headers)
        second = client.delete(f"/student/enrollments/{offering.id}", headers=headers)

        assert first.json() == {"ok": True}
        assert second.json() == {"ok": True}
        db.expire_all()
        assert db.query(Enrollment).count() == 0

    def test_admin_cannot_use_student_surface(self, client, admin_headers):
        response = client.get("/student/enrollments", headers=admin_headers)
        assert response.status_code == 403


@pytest.mark.integration
class TestPrograms:

    def test_programs_are_listed_by_name(self, client, db):
        science = make_program(db, "Science Laboratory Technology")
        accounting = make_program(db, "Accountancy")

        response = client.get("/programs")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["programs"]] == [accounting.id, science.id]
