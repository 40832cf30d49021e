"""Command-line interface for gitcleaner."""
