"""
CLI Interface - Command-line tools for Bitext.

Provides commands for:
- Translating text or files
- Listing supported models
- Running the API server
"""

from .main import app, main

__all__ = ["app", "main"]
