"""HTTP binding of the OPT handler."""

from a2a_opt.server.app import configure_logging, create_app

__all__ = ["configure_logging", "create_app"]
