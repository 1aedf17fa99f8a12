"""
git-for-me-dear-ai Applications Package.

Contains:
- mcp_server: Model Context Protocol server over stdio
- core_api: FastAPI application exposing the same tools over HTTP
- cli: command line entry point
"""

__version__ = "0.1.0"
