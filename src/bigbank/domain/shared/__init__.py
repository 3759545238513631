"""Shared kernel used by all domain packages."""
