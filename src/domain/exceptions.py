"""Base exception classes for the Stack Keeper domain layer."""


class FacilitationError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class, usually
    through one of the four category bases in ``src.domain.errors``:
    ValidationError, ConflictError, PermissionDeniedError, NotFoundError.
    Callers at the transport edge map those categories to their own
    response codes.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
