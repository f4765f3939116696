"""Errors raised by the ledger storage layer."""


class DbNodeError(Exception):
    """Base class for every error raised by this package."""

    default_message = "Database node error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class LockError(DbNodeError):
    """A lock could not be acquired."""

    default_message = "Failed to acquire lock"


class HashOnCurveError(DbNodeError):
    """Computing ``y`` with hash_on_curve failed."""

    default_message = "Failed to compute y by running hash_on_curve"


class InvalidUnitError(DbNodeError):
    """A unit stored in the database is not understood by the caller."""

    def __init__(self, unit: str) -> None:
        self.unit = unit
        super().__init__(
            "Failed to convert the unit db record to the passed generic "
            f'Unit type: "{unit}"'
        )


class DbToRuntimeConversionError(DbNodeError):
    """A stored value does not fit the type the program expects."""

    default_message = "Failed to convert the db type into the runtime type"


class RuntimeToDbConversionError(DbNodeError):
    """A program value cannot be represented in the database column."""

    default_message = "Failed to convert the runtime type into the db type"