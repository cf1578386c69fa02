"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Caller
  2xxx: Coffre access
  3xxx: Movement
  9xxx: System

Infrastructure failures (SQLAlchemy, Redis) are never wrapped here; they
propagate to the caller unchanged.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Caller ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Administrator role required", 403)


# --- 2xxx: Coffre access ---

class CoffreAccessDeniedError(AppError):
    def __init__(self, coffre_id: str) -> None:
        super().__init__(2001, f"Access denied to coffre {coffre_id}", 403)


class CoffreNotFoundError(AppError):
    def __init__(self, coffre_id: str) -> None:
        super().__init__(2002, f"Coffre not found: {coffre_id}", 404)


# --- 3xxx: Movement ---

class MovementNotFoundError(AppError):
    def __init__(self, movement_id: str) -> None:
        super().__init__(3001, f"Movement not found: {movement_id}", 404)


class MovementAlreadyDeletedError(AppError):
    def __init__(self, movement_id: str) -> None:
        super().__init__(3002, f"Movement already deleted: {movement_id}", 409)


class InvalidDenominationError(AppError):
    def __init__(self, denomination: str) -> None:
        super().__init__(3003, f"Unknown denomination: {denomination}", 422)


class EmptyCountError(AppError):
    def __init__(self) -> None:
        super().__init__(3004, "Count must total more than zero", 422)


class CountTooLargeError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3005, f"Count too large: {detail}", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
