"""
Cascade dependency resolution engine.

Counts, hard-deletes or soft-deletes a root set of records together with
every record that references them, transitively, as declared by the
relationship registry.

All three operations share one depth-first traversal and differ only in the
terminal action applied to each visited node, so for a given root entity
and filter they always visit the same entities in the same order:

    1. resolve the ids matching the node filter (ids already visited in this
       cascade are skipped, which also stops reference cycles)
    2. for every dependent source entity, recurse with
       `source.fk1 IN ids OR source.fk2 IN ids ...`
    3. apply the action to the node's ids (children before parents)

Usage:
    from crud_api.services.cascade import CascadeService

    service = CascadeService(db)
    warning = service.count("Chat_group", {"id": 7})       # {"Chat_message": 2}
    service.soft_delete("Comment", {"id": 1}, {"is_deleted": True, "updated_by": 5})
    service.hard_delete("Comment", {"id": 1})
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud_api.models import AuditMixin, MODEL_MAP
from crud_api.services.registry import REGISTRY, RelationshipRegistry, UnknownEntityError
from crud_api.services.repository import EntityRepository, FilterLike
from shared.config.constants import CascadeOperation
from shared.config.logging import cascade_logger as logger
from shared.config.settings import settings


class CascadeError(Exception):
    """
    A storage call failed in the middle of a cascade.

    Attributes:
        operation: The cascade operation that was running
        entity: Root entity of the cascade
        completed: Rows affected per entity before the failure
        committed: Whether `completed` is persisted (non-atomic mode) or was
            rolled back together with the failing step
    """

    def __init__(
        self,
        message: str,
        *,
        operation: CascadeOperation,
        entity: str,
        completed: dict[str, int] | None = None,
        committed: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.entity = entity
        self.completed = completed or {}
        self.committed = committed


@dataclass
class CascadeResult:
    """
    Outcome of one cascade.

    For COUNT, `counts` holds dependents only (the root's own rows are not
    part of the warning). For the delete operations it includes the root.
    `trace` lists visited entity names in visit order.
    """

    operation: CascadeOperation
    entity: str
    found: bool
    counts: dict[str, int] = field(default_factory=dict)
    trace: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def message(self) -> str:
        if not self.found:
            return f"No {self.entity} found."
        if self.operation == CascadeOperation.COUNT:
            return f"{self.total} dependent record(s) of {self.entity} will be affected."
        if self.operation == CascadeOperation.SOFT_DELETE:
            return f"Soft deleted {self.total} record(s)."
        return f"Deleted {self.total} record(s)."

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation.value,
            "entity": self.entity,
            "found": self.found,
            "counts": dict(self.counts),
            "total": self.total,
            "message": self.message,
        }


# =============================================================================
# Terminal actions
# =============================================================================


class CascadeAction(ABC):
    """What happens to the rows of a visited node."""

    operation: CascadeOperation
    mutates: bool = True

    @abstractmethod
    def apply(self, repo: EntityRepository, ids: list[int]) -> int:
        """Apply the action to `ids` and return the number of affected rows."""


class CountAction(CascadeAction):
    operation = CascadeOperation.COUNT
    mutates = False

    def apply(self, repo: EntityRepository, ids: list[int]) -> int:
        return len(ids)


class HardDeleteAction(CascadeAction):
    operation = CascadeOperation.HARD_DELETE

    def apply(self, repo: EntityRepository, ids: list[int]) -> int:
        return repo.delete_many(repo.model.id.in_(ids))


class SoftDeleteAction(CascadeAction):
    operation = CascadeOperation.SOFT_DELETE

    def __init__(self, values: Mapping[str, Any]):
        self.values = dict(values)

    def apply(self, repo: EntityRepository, ids: list[int]) -> int:
        return repo.update_many(repo.model.id.in_(ids), self.values)


# =============================================================================
# Traversal
# =============================================================================


@dataclass
class _CascadeState:
    """Bookkeeping of one running cascade."""

    visited: dict[str, set[int]] = field(default_factory=dict)
    counts: dict[str, int] = field(default_factory=dict)
    root_affected: int = 0
    trace: list[str] = field(default_factory=list)

    def record(self, entity: str, affected: int) -> None:
        self.counts[entity] = self.counts.get(entity, 0) + affected

    def completed(self, root: str) -> dict[str, int]:
        done = dict(self.counts)
        if self.root_affected:
            done[root] = done.get(root, 0) + self.root_affected
        return done


class CascadeService:
    """
    Registry-driven cascade over arbitrary entities.

    Args:
        db: Database session
        registry: Relationship table to walk
        model_map: Entity name -> model class
        atomic: Commit once at the end (True) or after every entity step
            (False). Defaults to `settings.cascade_atomic`.
    """

    def __init__(
        self,
        db: Session,
        registry: RelationshipRegistry = REGISTRY,
        model_map: Mapping[str, type[AuditMixin]] = MODEL_MAP,
        atomic: bool | None = None,
    ):
        self._db = db
        self._registry = registry
        self._model_map = model_map
        self._atomic = settings.cascade_atomic if atomic is None else atomic

    @property
    def registry(self) -> RelationshipRegistry:
        return self._registry

    def has_dependents(self, entity: str) -> bool:
        return self._registry.has_dependents(entity)

    def repository(self, entity: str) -> EntityRepository:
        model = self._model_map.get(entity)
        if model is None:
            raise UnknownEntityError(entity)
        return EntityRepository(model, self._db)

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    def count(self, entity: str, filter: FilterLike) -> CascadeResult:
        """
        Count the records that deleting `filter` rows of `entity` would take
        along. Never mutates.

        Returns `{entity: 0}` when nothing matches or nothing depends on the
        matched rows; otherwise one entry per reached dependent entity, with
        zero entries for direct dependents that hold no rows.
        """
        state, found = self._run(entity, filter, CountAction())
        if not found:
            return CascadeResult(CascadeOperation.COUNT, entity, False, {entity: 0}, state.trace)

        counts = {group.source: 0 for group in self._registry.dependents_of(entity)}
        for name, affected in state.counts.items():
            counts[name] = counts.get(name, 0) + affected
        if not counts:
            counts = {entity: 0}
        return CascadeResult(CascadeOperation.COUNT, entity, True, counts, state.trace)

    def hard_delete(self, entity: str, filter: FilterLike) -> CascadeResult:
        """Physically delete matching rows and everything referencing them, children first."""
        state, found = self._run(entity, filter, HardDeleteAction())
        return self._mutation_result(CascadeOperation.HARD_DELETE, entity, state, found)

    def soft_delete(
        self,
        entity: str,
        filter: FilterLike,
        update_body: Mapping[str, Any],
        default_values: Mapping[str, Any] | None = None,
    ) -> CascadeResult:
        """
        Apply `update_body` (typically `{"is_deleted": True, "updated_by": actor}`)
        to matching rows and everything referencing them. `default_values`
        only fills fields the caller did not set.
        """
        values = {**(default_values or {}), **update_body}
        state, found = self._run(entity, filter, SoftDeleteAction(values))
        return self._mutation_result(CascadeOperation.SOFT_DELETE, entity, state, found)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _mutation_result(
        self,
        operation: CascadeOperation,
        entity: str,
        state: _CascadeState,
        found: bool,
    ) -> CascadeResult:
        if not found:
            return CascadeResult(operation, entity, False, {}, state.trace)
        return CascadeResult(operation, entity, True, state.completed(entity), state.trace)

    def _run(
        self,
        entity: str,
        filter: FilterLike,
        action: CascadeAction,
    ) -> tuple[_CascadeState, bool]:
        self._registry.edges_of(entity)  # unknown names fail before touching storage
        state = _CascadeState()

        try:
            state.root_affected = self._walk(entity, filter, action, state, depth=0)
            found = bool(state.trace)
            if action.mutates and found:
                self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            committed = action.mutates and not self._atomic
            completed = state.completed(entity)
            reason = str(getattr(exc, "orig", None) or exc)
            logger.error(
                "Cascade failed",
                operation=action.operation.value,
                entity=entity,
                completed=completed,
                committed=committed,
                error=reason,
            )
            raise CascadeError(
                reason,
                operation=action.operation,
                entity=entity,
                completed=completed,
                committed=committed,
            ) from exc

        if found:
            logger.info(
                "Cascade finished",
                operation=action.operation.value,
                entity=entity,
                affected=state.completed(entity),
            )
        else:
            logger.info("Cascade found no records", operation=action.operation.value, entity=entity)
        return state, found

    def _walk(
        self,
        entity: str,
        filter: FilterLike,
        action: CascadeAction,
        state: _CascadeState,
        depth: int,
    ) -> int:
        repo = self.repository(entity)
        seen = state.visited.setdefault(entity, set())
        ids = [i for i in repo.find_identifiers(filter) if i not in seen]
        if not ids:
            return 0

        seen.update(ids)
        state.trace.append(entity)
        logger.debug("Cascade visit", entity=entity, depth=depth, rows=len(ids))

        for group in self._registry.dependents_of(entity):
            source = self.repository(group.source).model
            derived = or_(*(getattr(source, name).in_(ids) for name in group.fields))
            affected = self._walk(group.source, derived, action, state, depth + 1)
            if affected:
                state.record(group.source, affected)

        affected = action.apply(repo, ids)
        if action.mutates and not self._atomic:
            self._db.commit()
        return affected
