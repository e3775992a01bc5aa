"""
API Interface - FastAPI REST API.

Exposes translation, the model registry and health checks over HTTP.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
