from datetime import datetime

from pydantic import BaseModel, Field


class Profile(BaseModel):
    phone: str | None = Field(default=None, max_length=30)
    location: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=1000)
    company: str | None = Field(default=None, max_length=100)

    class Config:
        str_strip_whitespace = True


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    profile: Profile = Field(default_factory=Profile)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """The applicant as a recruiter sees them on an application."""

    id: str
    name: str
    email: str
    profile: Profile = Field(default_factory=Profile)

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    profile: Profile | None = None

    class Config:
        str_strip_whitespace = True


class UserList(BaseModel):
    count: int
    users: list[UserResponse]
