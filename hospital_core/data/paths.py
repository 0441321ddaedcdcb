# =============================================================================
# hospital_core/data/paths.py
# Realtime Database paths used by the hospital binding
# =============================================================================

from __future__ import annotations
from typing import Any

from hospital_core.errors import HospitalValidationError


ROOT_PATH = "hospitals"

# Characters Firebase refuses inside a single key
FORBIDDEN_KEY_CHARS = set("/.#$[]")


def validate_key(value: Any, field: str) -> str:
    """
    Check that ``value`` can be used as one path segment.

    Numbers are accepted and converted (years are often typed as ints).

    Raises:
        HospitalValidationError: for empty values or forbidden characters
    """
    if isinstance(value, bool) or value is None:
        raise HospitalValidationError(f"{field} is required", field=field, value=value)

    if isinstance(value, int):
        value = str(value)

    if not isinstance(value, str) or not value.strip():
        raise HospitalValidationError(
            f"{field} must be a non-empty string",
            field=field,
            value=value,
        )

    bad = sorted(FORBIDDEN_KEY_CHARS.intersection(value))
    if bad:
        raise HospitalValidationError(
            f"{field} contains characters not allowed in a database key: {''.join(bad)}",
            field=field,
            value=value,
        )

    return value


def year_path(year: Any) -> str:
    """Path of one year partition, e.g. ``hospitals/2024``."""
    return f"{ROOT_PATH}/{validate_key(year, 'YEAR')}"


def hospital_path(hospital_id: Any, year: Any) -> str:
    """Path of one hospital record, e.g. ``hospitals/2024/-Nx1``."""
    return f"{year_path(year)}/{validate_key(hospital_id, 'id')}"
