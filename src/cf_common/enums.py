"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class MovementType(str, Enum):
    ENTRY = "ENTRY"
    EXIT = "EXIT"


class UserRole(str, Enum):
    USER = "USER"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class AuditAction(str, Enum):
    MOVEMENT_CREATED = "MOVEMENT_CREATED"
    MOVEMENT_UPDATED = "MOVEMENT_UPDATED"
    MOVEMENT_DELETED = "MOVEMENT_DELETED"
    INVENTORY_CREATED = "INVENTORY_CREATED"
