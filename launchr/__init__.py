"""Launchr -- interactive frontend/backend project scaffolder."""

__version__ = "0.1.0"
