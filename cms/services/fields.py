from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from cms.core.errors import ValidationError

PERSONAL_FIELDS = ("firstname", "lastname", "mobile", "date_of_birth", "email")

# Same limits as the request schemas.
TEXT_FIELD_MAX_LENGTH = {"firstname": 100, "lastname": 100, "mobile": 32}

_email_adapter = TypeAdapter(EmailStr)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_email(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError("email must be a string")
    try:
        email = _email_adapter.validate_python(value.strip())
    except PydanticValidationError:
        raise ValidationError(f"Invalid email address: {value!r}") from None
    return normalize_email(email)


def _coerce_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError("date_of_birth must be an ISO date (YYYY-MM-DD)") from None


def _clean_text(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    value = value.strip()
    max_length = TEXT_FIELD_MAX_LENGTH[key]
    if len(value) > max_length:
        raise ValidationError(f"{key} must be at most {max_length} characters")
    return value


def _clean(key: str, value: Any) -> Any:
    if key == "date_of_birth":
        return _coerce_date(value)
    if key == "email":
        return validate_email(value)
    if key in TEXT_FIELD_MAX_LENGTH:
        return _clean_text(key, value)
    if isinstance(value, str):
        return value.strip()
    return value


def require_fields(data: Mapping[str, Any], required: Iterable[str] = PERSONAL_FIELDS) -> dict[str, Any]:
    """Return the cleaned required fields, raising ValidationError if any is missing or blank."""
    missing = [k for k in required if data.get(k) is None or (isinstance(data.get(k), str) and not data[k].strip())]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    return {k: _clean(k, data[k]) for k in required}


def partial_updates(data: Mapping[str, Any], mutable: Iterable[str]) -> dict[str, Any]:
    """Keep the provided (non-None) fields of a partial update.

    Raises ValidationError for an empty update or a field that may not change.
    """
    allowed = set(mutable)
    provided = {k: v for k, v in data.items() if v is not None}
    forbidden = sorted(set(provided) - allowed)
    if forbidden:
        raise ValidationError(f"Fields cannot be updated: {', '.join(forbidden)}")
    if not provided:
        raise ValidationError("No fields to update")
    for k, v in provided.items():
        if isinstance(v, str) and not v.strip():
            raise ValidationError(f"{k} must not be blank")
    return {k: _clean(k, v) for k, v in provided.items()}
