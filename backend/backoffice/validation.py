from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta


class ValidationError(ValueError):
    """400-level input problem."""


class NotFoundError(LookupError):
    """404-level missing entity."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate phone number)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Which columns of a model a client may write.

    - writable_fields: allowlist; anything else in the payload is rejected
    - required_on_create: must be present and non-null when partial=False
      (POST and full-replace PUT)
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)


def _parse_int(key: str, value: Any) -> int:
    # bool is an int subclass; "true" is not a product id
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be an integer")

    text = value.strip()
    if not text:
        raise ValidationError(f"{key} must be an integer")
    if "e" in text.lower() or "." in text:
        raise ValidationError(f"{key} must be a plain integer")
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"{key} must be an integer")


def _parse_text(col, value: Any) -> str | None:
    if isinstance(value, (dict, list)):
        raise ValidationError(f"{col.key} must be a string")
    text = str(value).strip()

    if text == "":
        if not col.nullable:
            raise ValidationError(f"{col.key} cannot be blank")
        # Optional text: blank means "not provided"
        return None

    max_len = getattr(col.type, "length", None)
    if max_len and len(text) > max_len:
        raise ValidationError(f"{col.key} exceeds max length {max_len}")
    return text


def _normalize(col, value: Any):
    if value is None:
        if not col.nullable:
            raise ValidationError(f"{col.key} cannot be null")
        return None

    coltype = col.type
    if isinstance(coltype, Integer):
        return _parse_int(col.key, value)
    if isinstance(coltype, Boolean):
        return value if isinstance(value, bool) else bool(value)
    if isinstance(coltype, (String, Text)):
        return _parse_text(col, value)
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validate a JSON body against the model's column metadata and a policy.

    Returns a patch dict holding only writable fields, with strings
    stripped, integers parsed, and blank optional strings turned into None.

    partial=False: create/replace semantics (required_on_create enforced)
    partial=True: patch semantics (only provided keys are checked)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(name for name in policy.required_on_create if payload.get(name) is None)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    columns = {c.key: c for c in model.__mapper__.columns}

    patch: dict = {}
    for key, raw in payload.items():
        if key not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {key}")
        if key not in columns:
            raise ValidationError(f"Unknown field: {key}")
        patch[key] = _normalize(columns[key], raw)

    return patch


def parse_optional_int(value: Any, field_name: str) -> int | None:
    """Query-string helper: "" / None -> None, digits -> int, else ValidationError."""
    if value is None:
        return None
    text = str(value).strip()
    if text == "" or text.lower() == "null":
        return None
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer")
