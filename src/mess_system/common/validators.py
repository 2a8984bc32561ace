from __future__ import annotations

from typing import Mapping

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email_domain(value: str, domain: str) -> str:
    email = require_non_empty(value, "Email").lower()
    local, _, host = email.partition("@")
    if not local or host != domain.lower():
        raise ValidationError(f"Please use your {domain} email address")
    return email


def require_digits(value: str, field_name: str, length: int) -> str:
    v = (value or "").strip()
    if len(v) != length or not v.isdigit():
        raise ValidationError(f"Please enter a valid {length}-digit {field_name}")
    return v


def require_option(value: str, field_name: str, options: Mapping[str, str]) -> str:
    v = require_non_empty(value, field_name)
    if v not in options:
        raise ValidationError(f"{field_name} is not a valid option")
    return v
