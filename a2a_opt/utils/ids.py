"""Identifier and timestamp helpers for hierarchy records."""

import string
import time
import uuid
from datetime import datetime, timezone

_BASE36_DIGITS = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def generate_id(prefix: str = "") -> str:
    """Generate a unique id, optionally namespaced with a prefix.

    The id is a base36 millisecond clock followed by a random suffix, so ids
    created later tend to sort later. Ids are not security tokens.

    Args:
        prefix: Optional namespace such as "obj", "plan" or "task"

    Returns:
        "<prefix>-<opaque>" when a prefix is given, otherwise "<opaque>"
    """
    opaque = f"{_to_base36(time.time_ns() // 1_000_000)}{uuid.uuid4().hex[:8]}"
    return f"{prefix}-{opaque}" if prefix else opaque


def timestamp() -> str:
    """Current UTC time as ISO 8601 with millisecond precision.

    Always formatted as YYYY-MM-DDTHH:MM:SS.mmmZ, so string order equals
    chronological order.
    """
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
