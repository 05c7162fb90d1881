from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from app.database import Base
from app.models._types import JSONType, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False)  # job_seeker | recruiter
    profile = Column(JSONType, nullable=False, default=dict)  # phone, location, bio, company
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    jobs = relationship("Job", back_populates="poster", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="applicant", cascade="all, delete-orphan")
