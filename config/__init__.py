"""Configuration and credential resolution."""
