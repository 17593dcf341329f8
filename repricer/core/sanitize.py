"""
Numeric sanitization for values leaving the engine.

The document store behind the approval workflow rejects NaN and Infinity,
so every number placed in a result or proposal goes through here.
"""

import math


def sanitize_number(value: float | int | None) -> float | int:
    """Return ``value`` unchanged if finite, otherwise 0."""
    if value is None:
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return value
