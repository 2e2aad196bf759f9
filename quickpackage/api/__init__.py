"""
QuickPackage - API layer.

FastAPI application exposing package-name suggestion, package builds
and package downloads.
"""

from .app import app, create_app

__all__ = [
    "app",
    "create_app",
]
