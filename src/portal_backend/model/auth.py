from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base, generate_uuid, utcnow


class User(Base):
    __tablename__ = 'user'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    email = Column(String(320), unique=True, nullable=False)
    password = Column(String(1024))

    # Relationships
    profile = relationship("Profile", back_populates="user", uselist=False, lazy="select")
    sessions = relationship("AuthSession", back_populates="user", uselist=True, lazy="select")


class AuthSession(Base):
    __tablename__ = 'auth_session'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    user_id = Column(ForeignKey('user.id', ondelete='CASCADE', onupdate='RESTRICT'), nullable=False, index=True)
    token = Column(String(255), nullable=False, unique=True)
    expires_at = Column(DateTime(True), nullable=False)
    logout_time = Column(DateTime(True))

    user = relationship('User', back_populates='sessions')
