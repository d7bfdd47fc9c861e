"""
Repositories for accounts, profiles and their staff/student specializations.
"""

import logging
from typing import List, Optional
from cryptography.fernet import InvalidToken
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from .base import BaseRepository, raw_message
from ..interface.profiles import ProfileRole
from ..interface.tokens import decrypt_secret, encrypt_secret
from ..model.auth import User
from ..model.people import Profile, Staff, Student
from ..model.academics import CourseOffering, CourseOfferingProgram, Enrollment, StudentRegistration

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User accounts; passwords are Fernet-encrypted with ``secret_key``."""

    def __init__(self, db: Session, secret_key: str):
        super().__init__(db, User)
        self.secret_key = secret_key

    def find_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )

    def verify_credentials(self, email: str, password: str) -> Optional[User]:
        """
        Check an email/password pair.

        Returns:
            The user when the stored password decrypts to ``password``,
            None otherwise.
        """
        user = self.find_by_email(email)

        if user is None or user.password is None:
            return None

        try:
            if decrypt_secret(user.password, self.secret_key) != password:
                return None
        except (InvalidToken, ValueError):
            logger.warning(f"Stored password for user {user.id} could not be decrypted")
            return None

        return user

    def create_account(self, email: str, password: str) -> User:
        return self.create(User(email=email, password=encrypt_secret(password, self.secret_key)))

    def set_password(self, user: User, password: str) -> User:
        return self.apply(user, {"password": encrypt_secret(password, self.secret_key)})


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile rows; a profile id always equals its user id."""

    def __init__(self, db: Session):
        super().__init__(db, Profile)

    def find_role(self, user_id: str) -> Optional[ProfileRole]:
        """
        Fetch only the role record of a principal.

        A missing row and a failing lookup are both reported as None so
        guards can treat the caller as not provisioned.
        """
        try:
            row = (
                self.db.query(Profile.id, Profile.main_role, Profile.unit)
                .filter(Profile.id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Profile lookup failed for {user_id}: {raw_message(e)}")
            return None

        if row is None:
            return None

        return ProfileRole(id=row.id, main_role=row.main_role, unit=row.unit)

    def complete_onboarding(self, profile: Profile) -> Profile:
        return self.apply(profile, {"onboarding_status": "active"})


class StaffRepository(BaseRepository[Staff]):
    """Repository for Staff rows."""

    def __init__(self, db: Session):
        super().__init__(db, Staff)

    def find_eligible_academic(self, staff_ids: Optional[List[str]] = None) -> List[Staff]:
        """Active staff whose profile is academic staff, ordered by staff code."""
        query = (
            self.db.query(Staff)
            .join(Profile, Profile.id == Staff.profile_id)
            .options(joinedload(Staff.profile))
            .filter(Staff.status == "active", Profile.main_role == "academic_staff")
        )

        if staff_ids is not None:
            query = query.filter(Staff.id.in_(staff_ids))

        return query.order_by(Staff.staff_code.asc()).all()

    def profile_of(self, staff_id: str) -> Optional[Profile]:
        """Resolve the profile behind a staff row, or None when the staff row is missing."""
        profile_id = (
            self.db.query(Staff.profile_id)
            .filter(Staff.id == staff_id)
            .scalar()
        )
        if profile_id is None:
            return None
        return self.db.query(Profile).filter(Profile.id == profile_id).first()


class StudentRepository(BaseRepository[Student]):
    """Repository for Student rows."""

    def __init__(self, db: Session):
        super().__init__(db, Student)

    def find_by_profile(self, profile_id: str) -> Optional[Student]:
        return self.find_one_by(profile_id=profile_id)

    def profile_of(self, student_id: str) -> Optional[Profile]:
        profile_id = (
            self.db.query(Student.profile_id)
            .filter(Student.id == student_id)
            .scalar()
        )
        if profile_id is None:
            return None
        return self.db.query(Profile).filter(Profile.id == profile_id).first()

    def is_registered(self, student_id: str, session_id: str) -> bool:
        return self.db.query(StudentRegistration.id).filter(
            StudentRegistration.student_id == student_id,
            StudentRegistration.session_id == session_id,
            StudentRegistration.status == "registered"
        ).first() is not None

    def find_eligible_for_offering(self, offering: CourseOffering) -> List[Student]:
        """
        Active students an offering can still take: same program (direct or
        linked), same session, same level when the offering has one, and not
        yet enrolled.
        """
        linked_programs = select(CourseOfferingProgram.program_id).where(
            CourseOfferingProgram.course_offering_id == offering.id
        )
        enrolled = select(Enrollment.student_id).where(
            Enrollment.course_offering_id == offering.id
        )
        program_match = Student.program_id.in_(linked_programs)
        if offering.program_id is not None:
            program_match = or_(Student.program_id == offering.program_id, program_match)

        query = (
            self.db.query(Student)
            .options(joinedload(Student.profile))
            .filter(
                program_match,
                Student.course_session_id == offering.session_id,
                Student.status == "active",
                ~Student.id.in_(enrolled)
            )
        )

        if offering.level is not None:
            query = query.filter(Student.level == offering.level)

        return query.order_by(Student.matric_no.asc()).all()
