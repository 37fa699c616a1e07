"""
Generic entity service behind the generated CRUD routers.

Architecture:
    Router (thin) -> EntityService (validation, audit fields, transactions)
                  -> EntityRepository / CascadeService -> Model

One instance serves one entity. Deletions of entities that other entities
depend on are delegated to the cascade engine; leaf entities are deleted
through the repository directly.

Usage:
    service = EntityService(db, "Chat_group")
    warning = service.warn([7])            # nothing is changed
    service.delete([7])                    # group + its messages
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud_api.models import AuditMixin, MODEL_MAP
from crud_api.services.cascade import CascadeError, CascadeResult, CascadeService
from crud_api.services.registry import UnknownEntityError
from crud_api.services.repository import EntityRepository, FilterError, FindOptions
from shared.config.constants import AuditFields, CascadeOperation
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import DatabaseError, NotFoundError, ValidationError
from shared.utils.schemas import ENTITY_SCHEMAS, EntitySchemas, ListOptions

logger = get_logger(__name__)


@contextmanager
def _client_filter() -> Iterator[None]:
    """Report malformed client filters as 400 instead of 500."""
    try:
        yield
    except FilterError as exc:
        raise ValidationError(str(exc)) from exc


class EntityService:
    """
    CRUD operations for one registered entity.

    Args:
        db: Database session
        entity: Entity name as used by the relationship registry
        cascade: Cascade engine (one bound to `db` is created when omitted)
    """

    def __init__(self, db: Session, entity: str, cascade: CascadeService | None = None):
        model = MODEL_MAP.get(entity)
        if model is None:
            raise UnknownEntityError(entity)
        self._db = db
        self._entity = entity
        self._model: type[AuditMixin] = model
        self._schemas: EntitySchemas = ENTITY_SCHEMAS[entity]
        self._repo = EntityRepository(model, db)
        self._cascade = cascade or CascadeService(db)

    @property
    def entity(self) -> str:
        return self._entity

    @property
    def schemas(self) -> EntitySchemas:
        return self._schemas

    @property
    def cascades(self) -> bool:
        """Whether deleting this entity reaches other records."""
        return self._cascade.has_dependents(self._entity)

    def to_output(self, obj: Any) -> BaseModel:
        return self._schemas.output.model_validate(obj)

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, entity_id: int) -> BaseModel:
        obj = self._repo.find_by_id(entity_id)
        if obj is None:
            raise NotFoundError(self._entity, entity_id)
        return self.to_output(obj)

    def find_many(self, query: Mapping[str, Any], options: ListOptions) -> dict[str, Any]:
        find_options = FindOptions(
            page=options.page,
            limit=options.limit or settings.default_page_size,
            sort=options.sort,
            select=options.select,
            paginate=options.pagination,
        )
        with _client_filter():
            page = self._repo.find_many(query, find_options)
        if not find_options.select:
            page.items = [self.to_output(obj).model_dump() for obj in page.items]
        return page.to_dict()

    def count(self, where: Mapping[str, Any] | None) -> int:
        with _client_filter():
            return self._repo.count(where or None)

    # =========================================================================
    # Writes
    # =========================================================================

    def create(self, body: BaseModel, actor_id: int) -> BaseModel:
        data = body.model_dump()
        data[AuditFields.ADDED_BY] = actor_id
        with self._transaction("create"):
            obj = self._repo.create_one(data)
        self._db.refresh(obj)
        logger.info("Entity created", entity=self._entity, entity_id=obj.id, actor_id=actor_id)
        return self.to_output(obj)

    def create_many(self, rows: Sequence[Mapping[str, Any]], actor_id: int) -> list[BaseModel]:
        if not rows:
            raise ValidationError("data must contain at least one item")
        validated = []
        for index, row in enumerate(rows):
            try:
                item = self._schemas.create.model_validate(row)
            except SchemaValidationError as exc:
                raise ValidationError(f"Invalid item at index {index}: {exc.errors()[0]['msg']}") from exc
            validated.append({**item.model_dump(), AuditFields.ADDED_BY: actor_id})

        with self._transaction("bulk insert"):
            objs = self._repo.create_many(validated)
        for obj in objs:
            self._db.refresh(obj)
        logger.info("Entities created", entity=self._entity, count=len(objs), actor_id=actor_id)
        return [self.to_output(obj) for obj in objs]

    def update(self, entity_id: int, body: BaseModel, actor_id: int, *, partial: bool = False) -> BaseModel:
        obj = self._repo.find_by_id(entity_id)
        if obj is None:
            raise NotFoundError(self._entity, entity_id)

        with self._transaction("update"):
            for key, value in body.model_dump(exclude_unset=partial).items():
                setattr(obj, key, value)
            obj.updated_by = actor_id
        self._db.refresh(obj)
        logger.info("Entity updated", entity=self._entity, entity_id=entity_id, partial=partial)
        return self.to_output(obj)

    def update_many(self, filter: Mapping[str, Any], data: Mapping[str, Any], actor_id: int) -> int:
        try:
            body = self._schemas.update.model_validate(data)
        except SchemaValidationError as exc:
            raise ValidationError(f"Invalid update data: {exc.errors()[0]['msg']}") from exc

        values = body.model_dump(exclude_unset=True)
        values[AuditFields.UPDATED_BY] = actor_id
        with _client_filter(), self._transaction("bulk update"):
            updated = self._repo.update_many(filter or None, values)
        self._db.expire_all()
        logger.info("Entities updated", entity=self._entity, count=updated, actor_id=actor_id)
        return updated

    # =========================================================================
    # Deletes
    # =========================================================================

    def warn(self, ids: Sequence[int]) -> CascadeResult:
        """Records a delete of `ids` would take along. Never mutates."""
        id_filter = {"id": list(ids)}
        if self.cascades:
            result = self._run_cascade(lambda: self._cascade.count(self._entity, id_filter))
        else:
            found = self._repo.count(id_filter) > 0
            result = CascadeResult(CascadeOperation.COUNT, self._entity, found, {self._entity: 0})
        return self._require_found(result)

    def delete(self, ids: Sequence[int]) -> CascadeResult:
        id_filter = {"id": list(ids)}
        if self.cascades:
            result = self._run_cascade(lambda: self._cascade.hard_delete(self._entity, id_filter))
        else:
            with self._transaction("delete"):
                deleted = self._repo.delete_many(id_filter)
            result = self._leaf_result(CascadeOperation.HARD_DELETE, deleted)
        self._db.expire_all()
        return self._require_found(result)

    def soft_delete(self, ids: Sequence[int], actor_id: int) -> CascadeResult:
        id_filter = {"id": list(ids)}
        values = {AuditFields.IS_DELETED: True, AuditFields.UPDATED_BY: actor_id}
        if self.cascades:
            result = self._run_cascade(
                lambda: self._cascade.soft_delete(self._entity, id_filter, values)
            )
        else:
            with self._transaction("soft delete"):
                updated = self._repo.update_many(id_filter, values)
            result = self._leaf_result(CascadeOperation.SOFT_DELETE, updated)
        self._db.expire_all()
        return self._require_found(result)

    # =========================================================================
    # Internals
    # =========================================================================

    def _leaf_result(self, operation: CascadeOperation, affected: int) -> CascadeResult:
        counts = {self._entity: affected} if affected else {}
        trace = [self._entity] if affected else []
        return CascadeResult(operation, self._entity, affected > 0, counts, trace)

    def _run_cascade(self, run) -> CascadeResult:
        try:
            return run()
        except CascadeError as exc:
            raise DatabaseError(
                exc.operation.value,
                exc.message,
                entity=self._entity,
                completed=exc.completed,
                committed=exc.committed,
            ) from exc

    def _require_found(self, result: CascadeResult) -> CascadeResult:
        if not result.found:
            raise NotFoundError(self._entity, detail=result.message)
        return result

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Commit the block's writes; roll back and report storage failures."""
        try:
            yield
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise DatabaseError(operation, str(getattr(exc, "orig", None) or exc), entity=self._entity) from exc


def get_entity_service(db: Session, entity: str) -> EntityService:
    """Factory used by routers and the CLI."""
    return EntityService(db, entity)
