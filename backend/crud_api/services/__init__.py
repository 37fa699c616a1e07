"""
Services module.

- registry: static relationship table (who references whom)
- repository: generic filtered data access for any entity
- cascade: count / hard delete / soft delete across dependents
- entity_service: CRUD orchestration used by the routers and the CLI

Usage:
    from crud_api.services import CascadeService, EntityService

    CascadeService(db).count("Comment", {"id": 1})
    EntityService(db, "Blog").get(3)
"""

from .registry import (
    REGISTRY,
    RELATIONSHIPS,
    DependentGroup,
    Edge,
    RelationshipRegistry,
    UnknownEntityError,
)
from .repository import EntityRepository, FilterError, FindOptions, Page, build_where
from .cascade import (
    CascadeAction,
    CascadeError,
    CascadeResult,
    CascadeService,
    CountAction,
    HardDeleteAction,
    SoftDeleteAction,
)
from .entity_service import EntityService, get_entity_service

__all__ = [
    # registry
    "REGISTRY",
    "RELATIONSHIPS",
    "DependentGroup",
    "Edge",
    "RelationshipRegistry",
    "UnknownEntityError",
    # repository
    "EntityRepository",
    "FilterError",
    "FindOptions",
    "Page",
    "build_where",
    # cascade
    "CascadeAction",
    "CascadeError",
    "CascadeResult",
    "CascadeService",
    "CountAction",
    "HardDeleteAction",
    "SoftDeleteAction",
    # entity service
    "EntityService",
    "get_entity_service",
]
