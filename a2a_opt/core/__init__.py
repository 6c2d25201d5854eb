"""Core framework pieces: base models, errors and settings."""
