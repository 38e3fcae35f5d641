"""Shared kernel used by every part of the domain."""
