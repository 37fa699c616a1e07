"""
Entity Relationship Registry.

Static table of reference edges: for every entity, which (entity, field)
pairs hold ids pointing at it and therefore have to follow it when it is
counted, deleted or soft deleted. Self references (a comment replying to a
comment, a master value nested under another) are ordinary edges whose
source equals the key.

The table is data, not code: the cascade engine walks it generically, and
`validate()` checks it against the ORM models so a misspelled field fails
loudly. An edge that is missing altogether cannot be detected here; the
cascade would simply not reach those rows.

Usage:
    from crud_api.services.registry import REGISTRY

    REGISTRY.has_dependents("Chat_group")         # True
    for group in REGISTRY.dependents_of("user"):  # grouped per source entity
        print(group.source, group.fields)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from shared.config.constants import AuditFields


class UnknownEntityError(KeyError):
    """Raised for entity names that are not part of the registry."""

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(entity)

    def __str__(self) -> str:
        return f"Unknown entity '{self.entity}'"


@dataclass(frozen=True)
class Edge:
    """Rows of `source` reference the owning entity through `field`."""

    source: str
    field: str


@dataclass(frozen=True)
class DependentGroup:
    """All edges of one source entity into the same target, OR-ed together."""

    source: str
    fields: tuple[str, ...]


class RelationshipRegistry:
    """Read-only view over the edge table."""

    def __init__(self, relationships: Mapping[str, Sequence[Edge]]):
        self._edges: dict[str, tuple[Edge, ...]] = {
            entity: tuple(edges) for entity, edges in relationships.items()
        }
        for entity, edges in self._edges.items():
            for edge in edges:
                if edge.source not in self._edges:
                    raise UnknownEntityError(edge.source)
        self._groups: dict[str, tuple[DependentGroup, ...]] = {
            entity: _group_edges(edges) for entity, edges in self._edges.items()
        }

    def __contains__(self, entity: object) -> bool:
        return entity in self._edges

    def entities(self) -> list[str]:
        """Registered entity names in declaration order."""
        return list(self._edges)

    def edges_of(self, entity: str) -> tuple[Edge, ...]:
        self._require(entity)
        return self._edges[entity]

    def dependents_of(self, entity: str) -> tuple[DependentGroup, ...]:
        """Edges into `entity` grouped per source, in declaration order."""
        self._require(entity)
        return self._groups[entity]

    def has_dependents(self, entity: str) -> bool:
        return bool(self.edges_of(entity))

    def is_self_referencing(self, entity: str) -> bool:
        return any(edge.source == entity for edge in self.edges_of(entity))

    def validate(self, model_map: Mapping[str, type]) -> list[str]:
        """
        Check the table against the ORM models.

        Returns a list of problems: entities without a model, models without
        a registry entry, and edge fields that are not columns of the source
        model. Empty list means the table is consistent.
        """
        errors: list[str] = []
        for entity in self._edges:
            if entity not in model_map:
                errors.append(f"{entity}: no model registered")
        for entity in model_map:
            if entity not in self._edges:
                errors.append(f"{entity}: model has no registry entry")
        for entity, edges in self._edges.items():
            for edge in edges:
                model = model_map.get(edge.source)
                if model is None:
                    continue
                if edge.field not in model.__table__.columns:
                    errors.append(
                        f"{entity} <- {edge.source}.{edge.field}: no such column on {model.__name__}"
                    )
        return errors

    def describe(self) -> list[tuple[str, str, str]]:
        """Flat (target, source, field) rows, for listings."""
        return [
            (entity, edge.source, edge.field)
            for entity, edges in self._edges.items()
            for edge in edges
        ]

    def _require(self, entity: str) -> None:
        if entity not in self._edges:
            raise UnknownEntityError(entity)


def _group_edges(edges: Iterable[Edge]) -> tuple[DependentGroup, ...]:
    grouped: dict[str, list[str]] = {}
    for edge in edges:
        grouped.setdefault(edge.source, []).append(edge.field)
    return tuple(DependentGroup(source, tuple(fields)) for source, fields in grouped.items())


def _by_user(source: str, *fields: str) -> list[Edge]:
    """Edges from `source` into user: the given fields plus the audit actor columns."""
    return [
        Edge(source, field)
        for field in (*fields, AuditFields.ADDED_BY, AuditFields.UPDATED_BY)
    ]


# =============================================================================
# The relationship table
# =============================================================================

RELATIONSHIPS: dict[str, list[Edge]] = {
    "encounter": [],
    "departments": [],
    "enterprise": [
        Edge("departments", "enterprises"),
        Edge("note", "encounter_id"),
    ],
    "note": [],
    "medication": [],
    "orderItem": [],
    "order": [],
    "patient": [],
    "Customer": [],
    "Plan": [],
    "Task": [],
    "Chat_message": [],
    "Comment": [
        Edge("Comment", "parent_item"),
    ],
    "Chat_group": [
        Edge("Chat_message", "group_id"),
    ],
    "ToDo": [],
    "Appointment_schedule": [],
    "Appointment_slot": [
        Edge("Appointment_schedule", "slot"),
    ],
    "Event": [],
    "Master": [
        Edge("Master", "parent_id"),
    ],
    "Blog": [],
    "user": [
        *_by_user("encounter"),
        *_by_user("departments"),
        *_by_user("enterprise"),
        *_by_user("note", "provider"),
        *_by_user("medication"),
        *_by_user("orderItem"),
        *_by_user("order", "order_by"),
        *_by_user("patient"),
        *_by_user("Customer"),
        *_by_user("Plan"),
        *_by_user("Task", "completed_by"),
        *_by_user("Chat_message"),
        *_by_user("Comment"),
        *_by_user("Chat_group"),
        *_by_user("ToDo"),
        *_by_user("Appointment_schedule", "host"),
        *_by_user("Appointment_slot", "user_id"),
        *_by_user("Event"),
        *_by_user("Master"),
        *_by_user("Blog"),
        *_by_user("user"),
        *_by_user("userAuthSettings", "user_id"),
        *_by_user("userToken", "user_id"),
        Edge("userRole", "user_id"),
    ],
    "userAuthSettings": [],
    "userToken": [],
    "role": [
        Edge("routeRole", "role_id"),
        Edge("userRole", "role_id"),
    ],
    "projectRoute": [
        Edge("routeRole", "route_id"),
    ],
    "routeRole": [],
    "userRole": [],
}


REGISTRY = RelationshipRegistry(RELATIONSHIPS)
