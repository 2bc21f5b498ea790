"""Cross-cutting utilities: configuration, logging and time helpers."""
