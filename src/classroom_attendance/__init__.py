"""Classroom attendance REST API (Flask + MySQL)."""

__version__ = "1.0.0"
