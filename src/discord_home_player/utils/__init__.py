"""Shared helpers for logging and reply formatting."""
