"""Shared helpers: logging and JSON."""
