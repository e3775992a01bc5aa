"""
API Routes.
"""

from . import health, translate

__all__ = ["health", "translate"]
