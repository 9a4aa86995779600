class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced class, student or teacher does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class InvalidTransitionError(ValidationError):
    """Raised when an enrollment status change is not in the transition table."""


class DataQualityWarning(UserWarning):
    """Non-fatal audit finding surfaced for admin review.

    Emitted with `warnings.warn`; never blocks the triggering read or write.
    """
