# Overview: Request payload coercion and model field validation.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta
from werkzeug.routing import IntegerConverter

from .errors import ValidationFailed
from .money import decimal_to_cents


# Maximum price: 9,999,999.99 (999,999,999 cents)
# This prevents database overflow issues and nonsensical prices
MAX_PRICE_CENTS = 999_999_999

# Ids and counts are stored as signed 64-bit integers
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary), by API name
    - required_on_create: fields required for POST
    - field_map: API name -> column key where they differ (camelCase payloads)
    - money_fields: API names carrying decimal amounts that are stored as integer cents
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore
    field_map: dict[str, str] | None = None
    money_fields: set[str] | None = None


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def coerce_int(field: str, value: Any) -> int:
    number = _parse_int(field, value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValidationFailed(f"{field} is out of range")
    return number


def _parse_int(field: str, value: Any) -> int:
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # String input - must be plain digits (with optional leading minus)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationFailed(f"{field} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if 'e' in stripped.lower():
            raise ValidationFailed(f"{field} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if '.' in stripped:
            raise ValidationFailed(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationFailed(f"{field} must be an integer")
    # Reject floats explicitly
    if isinstance(value, float):
        raise ValidationFailed(f"{field} must be an integer, not a decimal")
    raise ValidationFailed(f"{field} must be an integer")


def coerce_money(field: str, value: Any) -> int:
    try:
        cents = decimal_to_cents(value)
    except ValueError as exc:
        raise ValidationFailed(f"{field}: {exc}")
    if cents < 0:
        raise ValidationFailed(f"{field} must be >= 0")
    if cents > MAX_PRICE_CENTS:
        raise ValidationFailed(f"{field} cannot exceed {MAX_PRICE_CENTS / 100:,.2f}")
    return cents


def _coerce_value(field: str, col, value: Any):
    coltype = col.type

    if value is None:
        return None

    if isinstance(coltype, Integer):
        return coerce_int(field, value)

    # Booleans
    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        raise ValidationFailed(f"{field} must be true or false")

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    # Default: leave as-is
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict keyed by column, with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationFailed("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if f not in payload)
        if missing:
            raise ValidationFailed(f"Missing required fields: {', '.join(missing)}")

    field_map = policy.field_map or {}
    money_fields = policy.money_fields or set()
    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationFailed(f"Field not allowed: {k}")
        if field_map.get(k, k) not in cols:
            raise ValidationFailed(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        key = field_map.get(k, k)
        col = cols[key]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationFailed(f"{k} cannot be null")
            patch[key] = None
            continue

        if k in money_fields:
            patch[key] = coerce_money(k, raw)
            continue

        val = _coerce_value(k, col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationFailed(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationFailed(f"{k} exceeds max length {col.type.length}")

        patch[key] = val

    return patch


def enforce_rules_inventory(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    for key, label in (("quantity", "quantity"), ("low_stock_threshold", "lowStockThreshold")):
        if key in patch and patch[key] is not None and patch[key] < 0:
            raise ValidationFailed(f"{label} must be >= 0")


def require_text(
    payload: dict,
    field: str,
    *,
    min_length: int = 1,
    max_length: int | None = None,
    message: str | None = None,
) -> str:
    value = payload.get(field)
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationFailed(message or f"{field} is required")
    value = value.strip()
    if len(value) < min_length or (max_length is not None and len(value) > max_length):
        if max_length is not None:
            raise ValidationFailed(f"{field} must be between {min_length} and {max_length} characters")
        raise ValidationFailed(f"{field} must be at least {min_length} characters long")
    return value


def optional_text(payload: dict, field: str, *, max_length: int | None = None) -> str | None:
    value = payload.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationFailed(f"{field} must be a string")
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationFailed(f"{field} exceeds max length {max_length}")
    return value


def validate_email(email: str) -> str:
    if not EMAIL_PATTERN.match(email):
        raise ValidationFailed("Please provide a valid email")
    return email


class IdConverter(IntegerConverter):
    """``<id:...>`` path segment: a non-negative id that fits a 64-bit column."""

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault("max", INT64_MAX)
        super().__init__(map, *args, **kwargs)
