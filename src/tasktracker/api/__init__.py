"""HTTP API for the task store."""

from .server import create_app

__all__ = ["create_app"]
