"""Browser automation drivers and helpers."""
