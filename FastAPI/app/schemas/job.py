from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.enums import JobStatus, JobType


class Salary(BaseModel):
    min: float | None = Field(default=None, ge=0)
    max: float | None = Field(default=None, ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def min_not_above_max(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("Salary min cannot exceed salary max")
        return self


class Requirements(BaseModel):
    experience: str | None = None  # e.g. "2-5 years"
    education: str | None = None  # e.g. "Bachelor's degree"
    skills: list[str] = Field(default_factory=list)

    @field_validator("skills")
    @classmethod
    def distinct_skills(cls, v: list[str]) -> list[str]:
        # A set of skills, case-insensitively, keeping first spelling and order
        seen = set()
        out = []
        for skill in v:
            skill = skill.strip()
            if skill and skill.lower() not in seen:
                seen.add(skill.lower())
                out.append(skill)
        return out


class JobCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: str = Field(min_length=1)
    type: JobType
    salary: Salary | None = None
    requirements: Requirements | None = None
    status: JobStatus = JobStatus.ACTIVE
    application_deadline: datetime | None = None

    class Config:
        str_strip_whitespace = True
        use_enum_values = True


class JobUpdate(BaseModel):
    """Partial update. Only fields sent by the client are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1)
    company: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, min_length=1)
    type: JobType | None = None
    salary: Salary | None = None
    requirements: Requirements | None = None
    status: JobStatus | None = None
    application_deadline: datetime | None = None

    class Config:
        str_strip_whitespace = True
        use_enum_values = True

    @model_validator(mode="after")
    def required_fields_not_cleared(self):
        for name in ("title", "description", "company", "location", "type", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class JobSearchFilters(BaseModel):
    text: str | None = None
    type: JobType | None = None
    location: str | None = None
    status: JobStatus = JobStatus.ACTIVE
    sort: str = Field(default="newest", pattern="^(newest|relevance)$")

    class Config:
        str_strip_whitespace = True
        use_enum_values = True


class PosterSummary(BaseModel):
    id: str
    name: str
    email: str
    company: str | None = None


class JobResponse(BaseModel):
    id: str
    title: str
    description: str
    company: str
    location: str
    type: str
    salary: Salary | None = None
    requirements: Requirements | None = None
    posted_by: str
    poster: PosterSummary | None = None
    status: str
    application_deadline: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class JobSummary(BaseModel):
    """The job as shown on an application."""

    id: str
    title: str
    company: str
    location: str
    type: str
    status: str

    class Config:
        from_attributes = True


class JobPage(BaseModel):
    count: int
    total: int
    page: int
    pages: int
    jobs: list[JobResponse]


class JobList(BaseModel):
    count: int
    jobs: list[JobResponse]
