"""Small shared helpers."""

from a2a_opt.utils.ids import generate_id, timestamp

__all__ = ["generate_id", "timestamp"]
