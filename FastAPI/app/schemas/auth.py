from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.enums import Role
from app.schemas.user import UserResponse


class UserRegister(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str
    role: Role

    class Config:
        str_strip_whitespace = True
        use_enum_values = True

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
