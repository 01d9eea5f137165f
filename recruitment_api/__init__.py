"""Recruitment platform API: registration, login and profile management."""
