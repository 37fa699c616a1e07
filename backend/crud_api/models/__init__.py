"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class and AuditMixin
- user: User, UserAuthSettings, UserToken, Role, ProjectRoute, RouteRole, UserRole
- clinical: Enterprise, Departments, Encounter, Note, Medication, Patient
- commerce: Order, OrderItem, Customer, Plan
- collaboration: Task, ToDo, ChatGroup, ChatMessage, Comment, Blog, Event, Master
- scheduling: AppointmentSlot, AppointmentSchedule

MODEL_MAP binds the entity names used by the relationship registry, the
cascade engine and the API to their model classes.
"""

from .base import Base, AuditMixin

from .user import User, UserAuthSettings, UserToken, Role, ProjectRoute, RouteRole, UserRole

from .clinical import Enterprise, Departments, Encounter, Note, Medication, Patient

from .commerce import Order, OrderItem, Customer, Plan

from .collaboration import Task, ToDo, ChatGroup, ChatMessage, Comment, Blog, Event, Master

from .scheduling import AppointmentSlot, AppointmentSchedule


MODEL_MAP: dict[str, type[AuditMixin]] = {
    "encounter": Encounter,
    "departments": Departments,
    "enterprise": Enterprise,
    "note": Note,
    "medication": Medication,
    "orderItem": OrderItem,
    "order": Order,
    "patient": Patient,
    "Customer": Customer,
    "Plan": Plan,
    "Task": Task,
    "Chat_message": ChatMessage,
    "Comment": Comment,
    "Chat_group": ChatGroup,
    "ToDo": ToDo,
    "Appointment_schedule": AppointmentSchedule,
    "Appointment_slot": AppointmentSlot,
    "Event": Event,
    "Master": Master,
    "Blog": Blog,
    "user": User,
    "userAuthSettings": UserAuthSettings,
    "userToken": UserToken,
    "role": Role,
    "projectRoute": ProjectRoute,
    "routeRole": RouteRole,
    "userRole": UserRole,
}


__all__ = [
    "Base",
    "AuditMixin",
    "MODEL_MAP",
    # user
    "User",
    "UserAuthSettings",
    "UserToken",
    "Role",
    "ProjectRoute",
    "RouteRole",
    "UserRole",
    # clinical
    "Enterprise",
    "Departments",
    "Encounter",
    "Note",
    "Medication",
    "Patient",
    # commerce
    "Order",
    "OrderItem",
    "Customer",
    "Plan",
    # collaboration
    "Task",
    "ToDo",
    "ChatGroup",
    "ChatMessage",
    "Comment",
    "Blog",
    "Event",
    "Master",
    # scheduling
    "AppointmentSlot",
    "AppointmentSchedule",
]
