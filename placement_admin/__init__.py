"""Admin console backend for the campus placement platform."""

__version__ = "1.0.0"
