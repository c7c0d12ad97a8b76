"""Data access layer: engine, sessions and ORM models."""
