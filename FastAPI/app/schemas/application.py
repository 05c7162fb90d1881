from datetime import datetime

from pydantic import BaseModel, Field, HttpUrl

from app.models.enums import ApplicationStatus
from app.schemas.job import JobSummary
from app.schemas.user import UserSummary


class ResumeRef(BaseModel):
    url: HttpUrl | None = None
    file_name: str | None = Field(default=None, max_length=255)


class ApplicationCreate(BaseModel):
    job_id: str = Field(min_length=1)
    cover_letter: str | None = Field(default=None, max_length=2000)
    resume: ResumeRef | None = None

    class Config:
        str_strip_whitespace = True


class ApplicationUpdate(BaseModel):
    status: ApplicationStatus | None = None
    notes: str | None = None

    class Config:
        str_strip_whitespace = True
        use_enum_values = True


class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    applicant_id: str
    status: str
    cover_letter: str | None = None
    resume: dict | None = None
    applied_at: datetime | None = None
    reviewed_at: datetime | None = None
    notes: str | None = None
    job: JobSummary | None = None
    applicant: UserSummary | None = None

    class Config:
        from_attributes = True


class ApplicationList(BaseModel):
    count: int
    applications: list[ApplicationResponse]
