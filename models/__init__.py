"""Data models for credentials and repositories."""
