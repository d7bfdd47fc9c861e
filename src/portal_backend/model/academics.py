from sqlalchemy import (
    Boolean, Column, Date, DateTime, Float,
    ForeignKey, Integer, String, UniqueConstraint
)
from sqlalchemy.orm import relationship

from .base import Base, generate_uuid, utcnow


class Program(Base):
    __tablename__ = 'program'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)


class Department(Base):
    __tablename__ = 'department'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)


class AcademicSession(Base):
    __tablename__ = 'academic_session'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)
    start_date = Column(Date)
    end_date = Column(Date)


class Course(Base):
    __tablename__ = 'course'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    code = Column(String(32), nullable=False, unique=True)
    title = Column(String(255), nullable=False)
    description = Column(String(4096))
    credits = Column(Integer)


class CourseOffering(Base):
    __tablename__ = 'course_offering'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    course_id = Column(ForeignKey('course.id', ondelete='CASCADE', onupdate='RESTRICT'), nullable=False, index=True)
    session_id = Column(ForeignKey('academic_session.id', ondelete='CASCADE', onupdate='RESTRICT'), nullable=False, index=True)
    program_id = Column(ForeignKey('program.id', ondelete='SET NULL'))
    semester = Column(String(32), nullable=False)
    level = Column(String(32))
    is_published = Column(Boolean, nullable=False, default=False)

    # Relationships
    course = relationship('Course', lazy="select")
    session = relationship('AcademicSession', lazy="select")
    programs = relationship('CourseOfferingProgram', back_populates='course_offering', uselist=True)
    staff_assignments = relationship('CourseOfferingStaff', back_populates='course_offering', uselist=True)
    enrollments = relationship('Enrollment', back_populates='course_offering', uselist=True)


class CourseOfferingProgram(Base):
    __tablename__ = 'course_offering_program'
    __table_args__ = (
        UniqueConstraint('course_offering_id', 'program_id', name='course_offering_program_key'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    course_offering_id = Column(ForeignKey('course_offering.id', ondelete='CASCADE'), nullable=False, index=True)
    program_id = Column(ForeignKey('program.id', ondelete='CASCADE'), nullable=False, index=True)

    course_offering = relationship('CourseOffering', back_populates='programs')
    program = relationship('Program')


class CourseOfferingStaff(Base):
    __tablename__ = 'course_offering_staff'
    __table_args__ = (
        UniqueConstraint('course_offering_id', 'staff_id', name='course_offering_staff_key'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    course_offering_id = Column(ForeignKey('course_offering.id', ondelete='CASCADE'), nullable=False, index=True)
    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False, index=True)

    course_offering = relationship('CourseOffering', back_populates='staff_assignments')
    staff = relationship('Staff', back_populates='course_offering_assignments')


class StudentRegistration(Base):
    __tablename__ = 'student_registration'
    __table_args__ = (
        UniqueConstraint('student_id', 'session_id', name='student_registration_key'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    student_id = Column(ForeignKey('student.id', ondelete='CASCADE'), nullable=False, index=True)
    session_id = Column(ForeignKey('academic_session.id', ondelete='CASCADE'), nullable=False)
    status = Column(String(32), nullable=False, default='registered')


class Enrollment(Base):
    __tablename__ = 'enrollment'
    __table_args__ = (
        UniqueConstraint('student_id', 'course_offering_id', name='enrollment_student_offering_key'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    student_id = Column(ForeignKey('student.id', ondelete='CASCADE'), nullable=False, index=True)
    course_offering_id = Column(ForeignKey('course_offering.id', ondelete='CASCADE'), nullable=False, index=True)
    enrolled_at = Column(DateTime(True), nullable=False, default=utcnow)

    student = relationship('Student', back_populates='enrollments')
    course_offering = relationship('CourseOffering', back_populates='enrollments')


class Result(Base):
    __tablename__ = 'result'
    __table_args__ = (
        UniqueConstraint('student_id', 'course_offering_id', name='result_student_offering_key'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    student_id = Column(ForeignKey('student.id', ondelete='CASCADE'), nullable=False, index=True)
    course_offering_id = Column(ForeignKey('course_offering.id', ondelete='CASCADE'), nullable=False, index=True)
    ca_score = Column(Float)
    exam_score = Column(Float)
    total_score = Column(Float)
    grade_letter = Column(String(4))
    grade_points = Column(Float)
    remark = Column(String(255))
    entered_by = Column(ForeignKey('user.id', ondelete='SET NULL'))
