"""Data access services used by the route handlers."""

from app.services import club_records

__all__ = ["club_records"]
