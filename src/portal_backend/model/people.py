from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base, generate_uuid, utcnow

MAIN_ROLES = ('admin', 'student', 'academic_staff', 'non_academic_staff')
UNITS = ('admissions', 'bursary', 'exams')


class Profile(Base):
    __tablename__ = 'profile'

    id = Column(ForeignKey('user.id', ondelete='CASCADE', onupdate='RESTRICT'), primary_key=True)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    first_name = Column(String(255))
    middle_name = Column(String(255))
    last_name = Column(String(255))
    email = Column(String(320))
    phone = Column(String(40))
    address = Column(String(500))
    gender = Column(String(32))
    date_of_birth = Column(Date)
    nin = Column(String(32))
    state_of_origin = Column(String(80))
    lga_of_origin = Column(String(80))
    religion = Column(String(80))
    main_role = Column(Enum(*MAIN_ROLES, name='main_role'), nullable=False)
    unit = Column(Enum(*UNITS, name='staff_unit'))
    onboarding_status = Column(String(32), nullable=False, default='pending')

    # Relationships
    user = relationship('User', back_populates='profile')
    student = relationship('Student', back_populates='profile', uselist=False, lazy="select")
    staff = relationship('Staff', back_populates='profile', uselist=False, lazy="select")

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)


class Staff(Base):
    __tablename__ = 'staff'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    staff_code = Column(String(64), nullable=False, unique=True)
    profile_id = Column(ForeignKey('profile.id', ondelete='CASCADE', onupdate='RESTRICT'), nullable=False, unique=True)
    designation = Column(String(255))
    status = Column(String(32), nullable=False, default='active')

    # Relationships
    profile = relationship('Profile', back_populates='staff')
    course_offering_assignments = relationship('CourseOfferingStaff', back_populates='staff', uselist=True)


class Student(Base):
    __tablename__ = 'student'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    profile_id = Column(ForeignKey('profile.id', ondelete='CASCADE', onupdate='RESTRICT'), nullable=False, unique=True)
    matric_no = Column(String(64), unique=True)
    program_id = Column(ForeignKey('program.id', ondelete='SET NULL'), index=True)
    department_id = Column(ForeignKey('department.id', ondelete='SET NULL'))
    level = Column(String(32))
    course_session_id = Column(ForeignKey('academic_session.id', ondelete='SET NULL'), index=True)
    status = Column(String(32), default='active')
    guardian_first_name = Column(String(255))
    guardian_last_name = Column(String(255))
    guardian_phone = Column(String(40))
    guardian_status = Column(String(64))

    # Relationships
    profile = relationship('Profile', back_populates='student')
    program = relationship('Program')
    enrollments = relationship('Enrollment', back_populates='student', uselist=True)
