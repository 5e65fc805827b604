"""
HTTP boundary - FastAPI application, routes and request validation.
"""

from .main import build_service, create_app

__all__ = ["build_service", "create_app"]
