"""Command-line helpers for the prompt library."""
