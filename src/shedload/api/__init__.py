"""HTTP routes package."""

from shedload.api.routes import router

__all__ = ["router"]
