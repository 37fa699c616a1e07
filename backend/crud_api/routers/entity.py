"""
Generated CRUD router.

`build_entity_router` produces the same twelve actions for every entity,
bound to that entity's schemas:

    POST   /create                  PUT /update/{id}
    POST   /addBulk                 PUT /partial-update/{id}
    POST   /list                    PUT /updateBulk
    POST   /count                   PUT /softDelete/{id}
    GET    /{id}                    PUT /softDeleteMany
    DELETE /delete/{id}             POST /deleteMany

Delete and soft delete actions accept `is_warning`: the response then lists
what the action would take along and nothing is changed.
"""

from dataclasses import dataclass
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from crud_api.routers._common import get_actor_id, require_actor_id
from crud_api.services.entity_service import EntityService
from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    BulkInsertRequest,
    BulkUpdateRequest,
    CascadeOutput,
    CountRequest,
    ENTITY_SCHEMAS,
    IdsRequest,
    ListRequest,
)


@dataclass(frozen=True)
class EntityRoute:
    """One entity exposed under a route group prefix."""

    entity: str
    group: str

    @property
    def prefix(self) -> str:
        return f"{self.group}/{self.entity.lower()}"


def build_entity_router(route: EntityRoute) -> APIRouter:
    """Build the CRUD router of one entity."""
    entity = route.entity
    schemas = ENTITY_SCHEMAS[entity]
    CreateBody = schemas.create
    UpdateBody = schemas.update
    Output = schemas.output

    router = APIRouter(prefix=route.prefix, tags=[entity])

    def get_service(db: Session = Depends(get_db)) -> EntityService:
        return EntityService(db, entity)

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    @router.post("/create", response_model=Output, status_code=status.HTTP_201_CREATED)
    def create(
        body: CreateBody,
        service: EntityService = Depends(get_service),
        actor_id: int = Depends(require_actor_id),
    ):
        return service.create(body, actor_id)

    @router.post("/addBulk")
    def add_bulk(
        body: BulkInsertRequest,
        service: EntityService = Depends(get_service),
        actor_id: int = Depends(require_actor_id),
    ) -> dict[str, Any]:
        created = service.create_many(body.data, actor_id)
        return {"count": len(created), "data": [item.model_dump() for item in created]}

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    @router.post("/list")
    def list_records(
        body: ListRequest,
        service: EntityService = Depends(get_service),
    ) -> dict[str, Any]:
        if body.is_count_only:
            return {"total_records": service.count(body.query)}
        return service.find_many(body.query, body.options)

    @router.post("/count")
    def count(
        body: CountRequest,
        service: EntityService = Depends(get_service),
    ) -> dict[str, int]:
        return {"total_records": service.count(body.where)}

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    @router.put("/update/{entity_id}", response_model=Output)
    def update(
        entity_id: int,
        body: CreateBody,
        service: EntityService = Depends(get_service),
        actor_id: int = Depends(require_actor_id),
    ):
        return service.update(entity_id, body, actor_id)

    @router.put("/partial-update/{entity_id}", response_model=Output)
    def partial_update(
        entity_id: int,
        body: UpdateBody,
        service: EntityService = Depends(get_service),
        actor_id: int = Depends(require_actor_id),
    ):
        return service.update(entity_id, body, actor_id, partial=True)

    @router.put("/updateBulk")
    def update_bulk(
        body: BulkUpdateRequest,
        service: EntityService = Depends(get_service),
        actor_id: int = Depends(require_actor_id),
    ) -> dict[str, int]:
        return {"updated": service.update_many(body.filter, body.data, actor_id)}

    # -------------------------------------------------------------------------
    # Soft delete
    # -------------------------------------------------------------------------

    @router.put("/softDelete/{entity_id}", response_model=CascadeOutput)
    def soft_delete(
        entity_id: int,
        is_warning: bool = Query(default=False),
        service: EntityService = Depends(get_service),
        actor_id: Optional[int] = Depends(get_actor_id),
    ):
        if is_warning:
            return service.warn([entity_id]).to_dict()
        return service.soft_delete([entity_id], require_actor_id(actor_id)).to_dict()

    @router.put("/softDeleteMany", response_model=CascadeOutput)
    def soft_delete_many(
        body: IdsRequest,
        service: EntityService = Depends(get_service),
        actor_id: Optional[int] = Depends(get_actor_id),
    ):
        if body.is_warning:
            return service.warn(body.ids).to_dict()
        return service.soft_delete(body.ids, require_actor_id(actor_id)).to_dict()

    # -------------------------------------------------------------------------
    # Hard delete
    # -------------------------------------------------------------------------

    @router.delete("/delete/{entity_id}", response_model=CascadeOutput)
    def delete(
        entity_id: int,
        is_warning: bool = Query(default=False),
        service: EntityService = Depends(get_service),
        actor_id: Optional[int] = Depends(get_actor_id),
    ):
        if is_warning:
            return service.warn([entity_id]).to_dict()
        require_actor_id(actor_id)
        return service.delete([entity_id]).to_dict()

    @router.post("/deleteMany", response_model=CascadeOutput)
    def delete_many(
        body: IdsRequest,
        service: EntityService = Depends(get_service),
        actor_id: Optional[int] = Depends(get_actor_id),
    ):
        if body.is_warning:
            return service.warn(body.ids).to_dict()
        require_actor_id(actor_id)
        return service.delete(body.ids).to_dict()

    # Registered last so the static paths above take precedence
    @router.get("/{entity_id}", response_model=Output)
    def get_by_id(
        entity_id: int,
        service: EntityService = Depends(get_service),
    ):
        return service.get(entity_id)

    return router
