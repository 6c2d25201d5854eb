"""Configuration for the OPT extension service."""

from a2a_opt.core.settings.settings import OPTSettings, load_settings

__all__ = ["OPTSettings", "load_settings"]
