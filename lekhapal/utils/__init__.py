"""Logging and error helpers."""
