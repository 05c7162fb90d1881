from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Every response body: ``{success, message?, data?}``."""

    success: bool = True
    message: str | None = None
    data: T | None = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    errors: list[dict[str, Any]] | None = None
