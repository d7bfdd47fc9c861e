from typing import List, Optional, Set
from sqlalchemy.orm import Session, Query, joinedload
from portal_backend.model.academics import CourseOffering, CourseOfferingStaff
from portal_backend.model.people import Staff
from portal_backend.permissions.principal import Principal


class OfferingVisibilityQueryBuilder:
    """
    Builds the least-privileged course offering queries for a principal.

    Academic staff only see offerings they are assigned to. The assignment
    id set is fetched first; an empty set means nothing is visible and the
    offerings query is never issued.
    """

    def __init__(self, db: Session):
        self.db = db

    def authorized_offering_ids(self, principal: Principal) -> Optional[Set[str]]:
        """Offering ids the caller may see, or None when unrestricted"""
        if not principal.is_academic_staff:
            return None

        rows = (
            self.db.query(CourseOfferingStaff.course_offering_id)
            .join(Staff, Staff.id == CourseOfferingStaff.staff_id)
            .filter(Staff.profile_id == principal.get_user_id_or_throw())
            .all()
        )
        return {row.course_offering_id for row in rows}

    def base_query(self) -> Query:
        return (
            self.db.query(CourseOffering)
            .options(joinedload(CourseOffering.course), joinedload(CourseOffering.session))
            .filter(CourseOffering.is_published.is_(True))
            .order_by(CourseOffering.created_at.desc())
        )

    def build(self, principal: Principal) -> Optional[Query]:
        """The visible-offerings query, or None when nothing can be visible"""
        offering_ids = self.authorized_offering_ids(principal)

        if offering_ids is None:
            return self.base_query()

        if not offering_ids:
            return None

        return self.base_query().filter(CourseOffering.id.in_(offering_ids))

    def list_visible(self, principal: Principal) -> List[CourseOffering]:
        query = self.build(principal)
        return [] if query is None else query.all()

    def can_view(self, principal: Principal, offering_id: str) -> bool:
        offering_ids = self.authorized_offering_ids(principal)
        return offering_ids is None or offering_id in offering_ids
