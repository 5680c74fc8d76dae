"""API endpoint modules."""

from albook.api.endpoints import dashboard, exercises

__all__ = ["dashboard", "exercises"]
