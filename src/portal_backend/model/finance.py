from sqlalchemy import Column, Date, DateTime, Enum, Float, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base, generate_uuid, utcnow

FEE_TYPES = (
    'school_fees',
    'acceptance_fee',
    'registration_fee',
    'departmental_fee',
    'examination_fee',
    'accommodation_fee',
    'id_card_fee',
    'other',
)
RECEIPT_STATUSES = ('pending', 'approved', 'rejected')
SEMESTERS = ('first', 'second')


class PaymentReceipt(Base):
    __tablename__ = 'payment_receipt'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    student_id = Column(ForeignKey('student.id', ondelete='CASCADE'), nullable=False, index=True)
    session_id = Column(ForeignKey('academic_session.id', ondelete='SET NULL'))
    semester = Column(Enum(*SEMESTERS, name='semester'))
    payment_type = Column(Enum(*FEE_TYPES, name='fee_type'), nullable=False)
    amount_paid = Column(Float, nullable=False)
    approved_amount = Column(Float)
    payment_date = Column(Date, nullable=False)
    transaction_reference = Column(String(255))
    status = Column(Enum(*RECEIPT_STATUSES, name='receipt_status'), nullable=False, default='pending')
    remarks = Column(String(1024))
    verified_by = Column(ForeignKey('user.id', ondelete='SET NULL'))
    verified_at = Column(DateTime(True))
    rejected_by = Column(ForeignKey('user.id', ondelete='SET NULL'))
    rejected_at = Column(DateTime(True))

    student = relationship('Student')
    session = relationship('AcademicSession')
