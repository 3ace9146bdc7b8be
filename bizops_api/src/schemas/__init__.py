"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Source record read models live in inventory, sales and procurement; the derived
dashboard views live in analytics.
"""

from .common import MessageResponse  # noqa: F401
