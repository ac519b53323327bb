from sqlalchemy.exc import IntegrityError


class TimeTrackerError(Exception):
    """Base class."""


class DatabaseError(TimeTrackerError):
    pass


class ConstraintViolationError(DatabaseError):
    pass


class UniqueViolationError(ConstraintViolationError):
    pass


class ForeignKeyViolationError(ConstraintViolationError):
    pass


class NotNullViolationError(ConstraintViolationError):
    pass


class NotFoundError(TimeTrackerError):
    pass


class MigrationError(TimeTrackerError):
    pass


def from_integrity_error(e: IntegrityError, context: str) -> DatabaseError:
    """Maps an SQLite integrity failure onto the matching constraint error."""
    msg = str(e.orig) if e.orig is not None else str(e)
    if "UNIQUE constraint failed" in msg:
        return UniqueViolationError(f"{context}: {msg}")
    if "FOREIGN KEY constraint failed" in msg:
        return ForeignKeyViolationError(f"{context}: {msg}")
    if "NOT NULL constraint failed" in msg:
        return NotNullViolationError(f"{context}: {msg}")
    return ConstraintViolationError(f"{context}: {msg}")
