"""
git-for-me-dear-ai Configuration Package.

Provides Pydantic Settings loaded from environment variables and JSON config files.
"""

from gitai_config.settings import Settings

__all__ = ["Settings"]
