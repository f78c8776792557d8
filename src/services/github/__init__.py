"""GitHub service."""
