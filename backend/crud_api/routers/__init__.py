"""
API routers.

- admin: /admin/<entity> CRUD routes
- device: /device/api/v1/<entity> CRUD routes
- system: /api/health and /api/registry
- entity: the generated per-entity router
"""

from .admin import router as admin_router
from .device import router as device_router
from .system import router as system_router
from .entity import EntityRoute, build_entity_router

__all__ = [
    "admin_router",
    "device_router",
    "system_router",
    "EntityRoute",
    "build_entity_router",
]
