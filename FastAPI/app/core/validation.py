from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError

M = TypeVar("M", bound=BaseModel)


def field_errors(errors: Sequence[Mapping[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic error dicts to ``[{"field": "salary.min", "message": "..."}]``."""
    out = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        message = str(err.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        out.append({"field": ".".join(loc) or "__root__", "message": message})
    return out


def parse(schema: type[M], data: M | Mapping[str, Any]) -> M:
    """Return ``data`` as a ``schema`` instance, raising our ValidationError on bad input."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError("Validation failed", errors=field_errors(e.errors())) from e
