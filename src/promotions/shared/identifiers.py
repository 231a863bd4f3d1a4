"""Identifier format checks.

Aggregates in this domain are identified by UUID strings; anything else
coming in from a request is rejected before a repository lookup is tried.
"""

import uuid

from protean.exceptions import ValidationError


def is_valid_id(value) -> bool:
    if value is None:
        return False
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def ensure_valid_id(value, field: str, message: str) -> str:
    """Return ``value`` as a string, or raise ValidationError under ``field``."""
    if not is_valid_id(value):
        raise ValidationError({field: [message]})
    return str(value)
