"""
Generic data access layer.

One repository class serves every entity: it takes the model and a session
and executes filtered count / find / update / delete statements. Filters are
either SQLAlchemy boolean clauses or JSON-style mappings as sent by API
clients:

    {"title": "Hello"}                       # equality
    {"id": [1, 2, 3]}                        # IN
    {"upvotes": {"$gte": 10, "$lt": 100}}    # operators
    {"$or": [{"parent_item": None}, {"id": 4}]}

Writes flush but never commit: the caller (router or cascade engine) owns
the transaction.

Usage:
    repo = EntityRepository(Comment, db)
    ids = repo.find_identifiers({"parent_item": [1, 2]})
    repo.update_many({"id": ids}, {"is_deleted": True})
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar, Union

from sqlalchemy import ColumnElement, and_, delete, func, or_, select, true, update
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from crud_api.models import Base
from shared.config.settings import settings

ModelT = TypeVar("ModelT", bound=Base)

FilterLike = Union[Mapping[str, Any], ColumnElement[bool], None]


class FilterError(ValueError):
    """A JSON filter references an unknown field or operator."""


# =============================================================================
# Filter parsing
# =============================================================================

def _as_list(op: str, operand: Any) -> list:
    if not isinstance(operand, (list, tuple, set, frozenset)):
        raise FilterError(f"Operator '{op}' expects a list")
    return list(operand)


_OPERATORS: dict[str, Callable[[Any, Any], ColumnElement[bool]]] = {
    "$eq": lambda c, v: c.is_(None) if v is None else c == v,
    "$ne": lambda c, v: c.is_not(None) if v is None else c != v,
    "$gt": lambda c, v: c > v,
    "$gte": lambda c, v: c >= v,
    "$lt": lambda c, v: c < v,
    "$lte": lambda c, v: c <= v,
    "$in": lambda c, v: c.in_(_as_list("$in", v)),
    "$nin": lambda c, v: c.not_in(_as_list("$nin", v)),
    "$like": lambda c, v: c.like(v),
    "$null": lambda c, v: c.is_(None) if v else c.is_not(None),
}


def _column(model: type[Base], name: str) -> Any:
    if name not in model.__table__.columns:
        raise FilterError(f"Unknown field '{name}' for {model.__name__}")
    return getattr(model, name)


def _field_clause(column: Any, value: Any) -> ColumnElement[bool]:
    if isinstance(value, Mapping):
        clauses = []
        for op, operand in value.items():
            handler = _OPERATORS.get(op)
            if handler is None:
                raise FilterError(f"Unknown operator '{op}'")
            clauses.append(handler(column, operand))
        if not clauses:
            return true()
        return and_(*clauses)
    if isinstance(value, (list, tuple, set, frozenset)):
        return column.in_(list(value))
    if value is None:
        return column.is_(None)
    return column == value


def build_where(model: type[Base], query: FilterLike) -> ColumnElement[bool] | None:
    """
    Turn a filter into a WHERE clause for `model`.

    Returns None for an empty filter (match everything). SQLAlchemy clauses
    are passed through untouched.
    """
    if query is None:
        return None
    if isinstance(query, ColumnElement):
        return query
    if not isinstance(query, Mapping):
        raise FilterError("Filter must be an object")

    clauses: list[ColumnElement[bool]] = []
    for key, value in query.items():
        if key in ("$and", "$or"):
            if not isinstance(value, (list, tuple)) or not all(
                isinstance(part, Mapping) for part in value
            ):
                raise FilterError(f"'{key}' expects a list of filters")
            parts = [build_where(model, part) for part in value]
            parts = [p if p is not None else true() for p in parts]
            if not parts:
                continue
            clauses.append(and_(*parts) if key == "$and" else or_(*parts))
        else:
            clauses.append(_field_clause(_column(model, key), value))

    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return and_(*clauses)


# =============================================================================
# Listing options
# =============================================================================


@dataclass
class FindOptions:
    """Pagination, sort and projection for find_many."""

    page: int = 1
    limit: int = field(default_factory=lambda: settings.default_page_size)
    sort: dict[str, int] | None = None
    select: list[str] | None = None
    paginate: bool = True

    def __post_init__(self):
        self.page = max(1, self.page)
        self.limit = min(max(1, self.limit), settings.max_page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page:
    """One page of results plus pagination metadata."""

    items: list[Any]
    total: int
    page: int
    limit: int

    @property
    def page_count(self) -> int:
        return max(1, math.ceil(self.total / self.limit)) if self.limit else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.items,
            "paginator": {
                "item_count": self.total,
                "per_page": self.limit,
                "page_count": self.page_count,
                "current_page": self.page,
                "has_prev_page": self.page > 1,
                "has_next_page": self.page < self.page_count,
            },
        }


# =============================================================================
# Repository
# =============================================================================


class EntityRepository(Generic[ModelT]):
    """
    Data access for one entity type.

    Soft-deleted rows are NOT hidden: callers that want live rows filter on
    `is_deleted` explicitly, and the cascade engine must see every row.
    """

    def __init__(self, model: type[ModelT], session: Session):
        self._model = model
        self._session = session

    @property
    def model(self) -> type[ModelT]:
        """The SQLAlchemy model class."""
        return self._model

    @property
    def session(self) -> Session:
        """The database session."""
        return self._session

    def where(self, filter: FilterLike) -> ColumnElement[bool] | None:
        return build_where(self._model, filter)

    def _apply_filter(self, query: Select, filter: FilterLike) -> Select:
        clause = self.where(filter)
        if clause is not None:
            query = query.where(clause)
        return query

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def count(self, filter: FilterLike = None) -> int:
        query = self._apply_filter(select(func.count()).select_from(self._model), filter)
        return self._session.scalar(query) or 0

    def find_identifiers(self, filter: FilterLike) -> list[int]:
        """Ids of the rows matching `filter`, ordered by id."""
        query = self._apply_filter(select(self._model.id), filter).order_by(self._model.id)
        return list(self._session.scalars(query).all())

    def find_by_id(self, entity_id: int) -> ModelT | None:
        # Bulk statements skip the identity map, so always reload from the database
        return self._session.get(self._model, entity_id, populate_existing=True)

    def find_many(self, filter: FilterLike = None, options: FindOptions | None = None) -> Page:
        """
        Filtered listing with sort, projection and pagination.

        With `options.select` the items are dicts holding only the selected
        fields (plus id); otherwise they are model instances.
        """
        options = options or FindOptions()

        if options.select:
            names = ["id", *(n for n in options.select if n != "id")]
            columns = [_column(self._model, name) for name in names]
            query = select(*columns)
        else:
            names = []
            query = select(self._model).execution_options(populate_existing=True)
        query = self._apply_filter(query, filter)

        for name, direction in (options.sort or {}).items():
            column = _column(self._model, name)
            query = query.order_by(column.desc() if direction < 0 else column.asc())
        if not options.sort:
            query = query.order_by(self._model.id)

        total = self.count(filter)
        if options.paginate:
            query = query.offset(options.offset).limit(options.limit)

        if names:
            items = [dict(zip(names, row)) for row in self._session.execute(query).all()]
        else:
            items = list(self._session.scalars(query).all())

        limit = options.limit if options.paginate else max(total, 1)
        page = options.page if options.paginate else 1
        return Page(items=items, total=total, page=page, limit=limit)

    # -------------------------------------------------------------------------
    # Writes (flush only)
    # -------------------------------------------------------------------------

    def create_one(self, data: Mapping[str, Any]) -> ModelT:
        entity = self._model(**data)
        self._session.add(entity)
        self._session.flush()
        return entity

    def create_many(self, rows: Sequence[Mapping[str, Any]]) -> list[ModelT]:
        entities = [self._model(**row) for row in rows]
        self._session.add_all(entities)
        self._session.flush()
        return entities

    def update_many(self, filter: FilterLike, values: Mapping[str, Any]) -> int:
        """Set `values` on every matching row. Returns rows affected."""
        for name in values:
            _column(self._model, name)
        stmt = update(self._model).values(**values).execution_options(synchronize_session=False)
        clause = self.where(filter)
        if clause is not None:
            stmt = stmt.where(clause)
        result = self._session.execute(stmt)
        return result.rowcount or 0

    def delete_many(self, filter: FilterLike) -> int:
        """Physically delete every matching row. Returns rows deleted."""
        stmt = delete(self._model).execution_options(synchronize_session=False)
        clause = self.where(filter)
        if clause is not None:
            stmt = stmt.where(clause)
        result = self._session.execute(stmt)
        return result.rowcount or 0
