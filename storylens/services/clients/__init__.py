"""
Story generation clients.

This package provides the base class for upstream generation API clients.
"""
from .base_client import BaseGenerationClient

__all__ = ["BaseGenerationClient"]
