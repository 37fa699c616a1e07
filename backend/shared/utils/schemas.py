"""
Shared Pydantic schemas used across the application.

Every entity gets three models:
- <Entity>Create: request body of create / addBulk
- <Entity>Update: same fields, all optional (update / partial-update / updateBulk)
- <Entity>Output: response model, read straight from ORM instances

ENTITY_SCHEMAS binds the entity names of the relationship registry to them.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, create_model

from shared.config.constants import Limits


# =============================================================================
# Helpers
# =============================================================================


class EntityBase(BaseModel):
    """Fields every writable entity accepts."""

    model_config = ConfigDict(extra="forbid")

    is_active: bool = True


class AuditOutput(BaseModel):
    """Server-managed columns present on every response."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: int
    is_active: bool
    is_deleted: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    added_by: Optional[int] = None
    updated_by: Optional[int] = None


def partial_model(model: type[BaseModel], name: str) -> type[BaseModel]:
    """Copy of `model` where every field is optional and defaults to None."""
    fields = {
        field_name: (Optional[info.annotation], Field(default=None, **_constraints(info)))
        for field_name, info in model.model_fields.items()
    }
    return create_model(name, __config__=ConfigDict(extra="forbid"), **fields)


def _constraints(info: Any) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for meta in info.metadata:
        for key in ("min_length", "max_length", "ge", "le", "gt", "lt"):
            value = getattr(meta, key, None)
            if value is not None:
                kwargs[key] = value
    return kwargs


def _name() -> Any:
    return Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)


def _code() -> Any:
    return Field(default=None, max_length=Limits.MAX_CODE_LENGTH)


def _text() -> Any:
    return Field(default=None, max_length=Limits.MAX_TEXT_LENGTH)


# =============================================================================
# Clinical
# =============================================================================


class EnterpriseCreate(EntityBase):
    name: str = _name()
    code: Optional[str] = _code()
    type: Optional[str] = Field(default=None, max_length=100)


class DepartmentsCreate(EntityBase):
    name: str = _name()
    code: Optional[str] = _code()
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    enterprises: Optional[int] = None


class EncounterCreate(EntityBase):
    status: Optional[str] = Field(default=None, max_length=50)
    encounter_class: Optional[str] = Field(default=None, max_length=50)
    reason: Optional[str] = _text()
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None


class NoteCreate(EntityBase):
    title: Optional[str] = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    content: Optional[str] = _text()
    provider: Optional[int] = None
    encounter_id: Optional[int] = None


class MedicationCreate(EntityBase):
    name: str = _name()
    code: Optional[str] = _code()
    dosage_form: Optional[str] = Field(default=None, max_length=100)
    strength: Optional[str] = Field(default=None, max_length=100)


class PatientCreate(EntityBase):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    gender: Optional[str] = Field(default=None, max_length=20)
    birth_date: Optional[date] = None
    phone: Optional[str] = Field(default=None, max_length=50)


# =============================================================================
# Commerce
# =============================================================================


class OrderCreate(EntityBase):
    order_by: Optional[int] = None
    order_date: Optional[datetime] = None
    status: Optional[str] = Field(default=None, max_length=50)
    total: Optional[float] = Field(default=None, ge=0)


class OrderItemCreate(EntityBase):
    name: str = _name()
    quantity: int = Field(default=1, ge=1)
    unit_price: Optional[float] = Field(default=None, ge=0)


class CustomerCreate(EntityBase):
    name: str = _name()
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = _text()


class PlanCreate(EntityBase):
    name: str = _name()
    description: Optional[str] = _text()
    price: Optional[float] = Field(default=None, ge=0)
    duration_days: Optional[int] = Field(default=None, ge=0)


# =============================================================================
# Collaboration
# =============================================================================


class TaskCreate(EntityBase):
    title: str = _name()
    description: Optional[str] = _text()
    completed_by: Optional[int] = None
    is_completed: bool = False
    due_date: Optional[datetime] = None


class ToDoCreate(EntityBase):
    title: str = _name()
    description: Optional[str] = _text()
    is_completed: bool = False
    due_date: Optional[datetime] = None


class ChatGroupCreate(EntityBase):
    name: str = _name()
    code: Optional[str] = _code()


class ChatMessageCreate(EntityBase):
    group_id: Optional[int] = None
    message: str = Field(min_length=1, max_length=Limits.MAX_TEXT_LENGTH)
    sender: Optional[str] = Field(default=None, max_length=100)


class CommentCreate(EntityBase):
    comment: str = Field(min_length=1, max_length=Limits.MAX_TEXT_LENGTH)
    parent_item: Optional[int] = None
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)
    comment_time: Optional[datetime] = None


class BlogCreate(EntityBase):
    title: str = _name()
    alternative_headline: Optional[str] = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    image: Optional[str] = Field(default=None, max_length=Limits.MAX_URL_LENGTH)
    publish_date: Optional[datetime] = None
    author_name: Optional[str] = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    body: Optional[str] = None


class EventCreate(EntityBase):
    name: str = _name()
    description: Optional[str] = _text()
    address: Optional[str] = _text()
    start_date_time: Optional[datetime] = None
    end_date_time: Optional[datetime] = None


class MasterCreate(EntityBase):
    name: str = _name()
    slug: Optional[str] = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    code: Optional[str] = _code()
    group: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = _text()
    parent_id: Optional[int] = None
    sequence: Optional[int] = None


# =============================================================================
# Scheduling
# =============================================================================


class AppointmentSlotCreate(EntityBase):
    user_id: Optional[int] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    slot_length: Optional[int] = Field(default=None, ge=1)  # minutes


class AppointmentScheduleCreate(EntityBase):
    slot: Optional[int] = None
    host: Optional[int] = None
    participant: Optional[str] = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: Optional[str] = Field(default=None, max_length=50)


# =============================================================================
# Users and permissions
# =============================================================================


class UserCreate(EntityBase):
    username: str = Field(min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    name: Optional[str] = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    user_type: int = 1


class UserAuthSettingsCreate(EntityBase):
    user_id: int
    login_otp: Optional[str] = Field(default=None, max_length=20)
    login_retry_limit: int = Field(default=0, ge=0)
    login_reactive_time: Optional[datetime] = None
    reset_password_code: Optional[str] = Field(default=None, max_length=100)


class UserTokenCreate(EntityBase):
    user_id: int
    token: str = Field(min_length=1)
    token_expired_time: Optional[datetime] = None
    is_token_expired: bool = False


class RoleCreate(EntityBase):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=1, max_length=Limits.MAX_CODE_LENGTH)
    weight: int = 1


class ProjectRouteCreate(EntityBase):
    route_name: str = _name()
    method: str = Field(min_length=1, max_length=10)
    uri: str = Field(min_length=1, max_length=500)


class RouteRoleCreate(EntityBase):
    route_id: int
    role_id: int


class UserRoleCreate(EntityBase):
    user_id: int
    role_id: int


# =============================================================================
# Registry of per-entity schemas
# =============================================================================


class EntitySchemas(NamedTuple):
    create: type[BaseModel]
    update: type[BaseModel]
    output: type[BaseModel]


def _schemas(create: type[BaseModel]) -> EntitySchemas:
    stem = create.__name__.removesuffix("Create")
    update = partial_model(create, f"{stem}Update")
    # AuditOutput last so its config wins over the create model's extra="forbid"
    output = create_model(f"{stem}Output", __base__=(create, AuditOutput))
    return EntitySchemas(create, update, output)


ENTITY_SCHEMAS: dict[str, EntitySchemas] = {
    "encounter": _schemas(EncounterCreate),
    "departments": _schemas(DepartmentsCreate),
    "enterprise": _schemas(EnterpriseCreate),
    "note": _schemas(NoteCreate),
    "medication": _schemas(MedicationCreate),
    "orderItem": _schemas(OrderItemCreate),
    "order": _schemas(OrderCreate),
    "patient": _schemas(PatientCreate),
    "Customer": _schemas(CustomerCreate),
    "Plan": _schemas(PlanCreate),
    "Task": _schemas(TaskCreate),
    "Chat_message": _schemas(ChatMessageCreate),
    "Comment": _schemas(CommentCreate),
    "Chat_group": _schemas(ChatGroupCreate),
    "ToDo": _schemas(ToDoCreate),
    "Appointment_schedule": _schemas(AppointmentScheduleCreate),
    "Appointment_slot": _schemas(AppointmentSlotCreate),
    "Event": _schemas(EventCreate),
    "Master": _schemas(MasterCreate),
    "Blog": _schemas(BlogCreate),
    "user": _schemas(UserCreate),
    "userAuthSettings": _schemas(UserAuthSettingsCreate),
    "userToken": _schemas(UserTokenCreate),
    "role": _schemas(RoleCreate),
    "projectRoute": _schemas(ProjectRouteCreate),
    "routeRole": _schemas(RouteRoleCreate),
    "userRole": _schemas(UserRoleCreate),
}


# =============================================================================
# Request bodies shared by all entity routers
# =============================================================================


class ListOptions(BaseModel):
    """Pagination, sort and projection of a list request."""

    page: int = Field(default=1, ge=1)
    limit: Optional[int] = Field(default=None, ge=1)
    sort: Optional[dict[str, int]] = None
    select: Optional[list[str]] = None
    pagination: bool = True


class ListRequest(BaseModel):
    query: dict[str, Any] = Field(default_factory=dict)
    options: ListOptions = Field(default_factory=ListOptions)
    is_count_only: bool = False


class CountRequest(BaseModel):
    where: dict[str, Any] = Field(default_factory=dict)


class BulkInsertRequest(BaseModel):
    data: list[dict[str, Any]] = Field(default_factory=list, max_length=Limits.MAX_BULK_ITEMS)


class BulkUpdateRequest(BaseModel):
    filter: dict[str, Any] = Field(default_factory=dict)
    data: dict[str, Any] = Field(min_length=1)


class IdsRequest(BaseModel):
    ids: list[int] = Field(min_length=1)
    is_warning: bool = False


class CascadeOutput(BaseModel):
    """Result of a count / delete / soft delete cascade."""

    operation: str
    entity: str
    found: bool
    counts: dict[str, int]
    total: int
    message: str
