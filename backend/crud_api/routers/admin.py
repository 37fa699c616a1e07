"""
Admin route group: entities managed from the back office.

All routes are prefixed with /admin/<entity>.
"""

from fastapi import APIRouter

from crud_api.routers.entity import EntityRoute, build_entity_router
from shared.config.constants import RoutePrefix


ADMIN_ENTITIES = (
    "Blog",
    "Chat_group",
    "Customer",
    "ToDo",
    "departments",
    "medication",
)


router = APIRouter()

for _entity in ADMIN_ENTITIES:
    router.include_router(build_entity_router(EntityRoute(_entity, RoutePrefix.ADMIN)))


__all__ = ["router", "ADMIN_ENTITIES"]
