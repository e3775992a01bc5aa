"""
Coze Adapter - Submit/poll chat backend.

This is the ONLY place that calls the Coze API.
"""

from .client import CozeClient

__all__ = ["CozeClient"]
