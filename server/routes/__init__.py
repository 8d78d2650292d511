"""API routes package."""

from server.routes.file_routes import router as file_router
from server.routes.package_routes import router as package_router

__all__ = ["file_router", "package_router"]
