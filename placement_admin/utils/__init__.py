"""Upload helpers."""
