"""kitforge HTTP API."""

from kitforge.api.app import create_app

__all__ = ["create_app"]
