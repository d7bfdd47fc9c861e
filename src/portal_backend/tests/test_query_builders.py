import pytest
from datetime import datetime, timedelta, timezone

from portal_backend.permissions.principal import Principal
from portal_backend.permissions.query_builders import OfferingVisibilityQueryBuilder

from .fixtures import StatementRecorder, assign, make_offering, make_staff


def academic(staff) -> Principal:
    return Principal(user_id=staff.profile_id, main_role="academic_staff")


@pytest.mark.integration
class TestOfferingVisibilityQueryBuilder:

    def test_unrestricted_roles_see_published_newest_first(self, db):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        older = make_offering(db, is_published=True, created_at=base)
        newer = make_offering(db, is_published=True, created_at=base + timedelta(days=1))
        make_offering(db, is_published=False)

        builder = OfferingVisibilityQueryBuilder(db)

        for principal in (
            Principal(user_id="admin-1", main_role="admin"),
            Principal(user_id="exams-1", main_role="non_academic_staff", unit="exams")
        ):
            assert builder.authorized_offering_ids(principal) is None
            assert [o.id for o in builder.list_visible(principal)] == [newer.id, older.id]

    def test_academic_staff_sees_only_assigned(self, db):
        staff = make_staff(db)
        assigned = make_offering(db, is_published=True)
        make_offering(db, is_published=True)
        assign(db, assigned, staff)

        builder = OfferingVisibilityQueryBuilder(db)

        assert builder.authorized_offering_ids(academic(staff)) == {assigned.id}
        assert [o.id for o in builder.list_visible(academic(staff))] == [assigned.id]

    def test_assignment_is_matched_through_staff_profile(self, db):
        # assignments reference the staff row id, the principal carries the profile id
        staff = make_staff(db)
        offering = make_offering(db, is_published=True)
        assign(db, offering, staff)

        assert staff.id != staff.profile_id
        assert OfferingVisibilityQueryBuilder(db).can_view(academic(staff), offering.id)

    def test_assigned_but_unpublished_is_not_listed(self, db):
        staff = make_staff(db)
        offering = make_offering(db, is_published=False)
        assign(db, offering, staff)

        assert OfferingVisibilityQueryBuilder(db).list_visible(academic(staff)) == []

    def test_empty_assignment_set_skips_offering_query(self, app, db):
        staff = make_staff(db)
        make_offering(db, is_published=True)
        builder = OfferingVisibilityQueryBuilder(db)

        with StatementRecorder(app.state.engine) as recorder:
            assert builder.build(academic(staff)) is None
            assert builder.list_visible(academic(staff)) == []

        assert recorder.selecting_from("course_offering_staff")
        assert recorder.selecting_from("course_offering") == []

    def test_can_view(self, db):
        staff = make_staff(db)
        mine = make_offering(db, is_published=True)
        other = make_offering(db, is_published=True)
        assign(db, mine, staff)

        builder = OfferingVisibilityQueryBuilder(db)

        assert builder.can_view(academic(staff), mine.id)
        assert not builder.can_view(academic(staff), other.id)
        assert builder.can_view(Principal(user_id="admin-1", main_role="admin"), other.id)
