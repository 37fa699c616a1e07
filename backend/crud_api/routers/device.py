"""
Device route group: entities used by the mobile and device clients.

All routes are prefixed with /device/api/v1/<entity>.
"""

from fastapi import APIRouter

from crud_api.routers.entity import EntityRoute, build_entity_router
from shared.config.constants import RoutePrefix


DEVICE_ENTITIES = (
    "Appointment_schedule",
    "Appointment_slot",
    "Chat_message",
    "Comment",
    "Event",
    "Master",
    "Plan",
    "Task",
    "encounter",
    "enterprise",
    "note",
    "order",
    "orderItem",
    "patient",
)


router = APIRouter()

for _entity in DEVICE_ENTITIES:
    router.include_router(build_entity_router(EntityRoute(_entity, RoutePrefix.DEVICE)))


__all__ = ["router", "DEVICE_ENTITIES"]
