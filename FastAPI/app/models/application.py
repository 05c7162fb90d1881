from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base
from app.models._types import JSONType, utcnow


class Application(Base):
    """A job seeker's application to one job. One row per (job, applicant)."""

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("job_id", "applicant_id", name="uq_application_job_applicant"),)

    id = Column(String, primary_key=True, index=True)
    job_id = Column(String, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String, nullable=False, default="pending")
    cover_letter = Column(String(2000), nullable=True)
    resume = Column(JSONType, nullable=True)  # {"url": str, "file_name": str}
    applied_at = Column(DateTime(timezone=True), default=utcnow)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    job = relationship("Job", back_populates="applications")
    applicant = relationship("User", back_populates="applications")
