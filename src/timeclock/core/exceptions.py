class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced user or request does not exist."""


class InvalidCodeError(DomainError):
    """Raised when no user owns the submitted secret code."""


class IllegalActionError(DomainError):
    """Raised when the requested action is not legal for the current state."""


class NoValidActionError(DomainError):
    """Raised when no transition at all is legal from the current state."""


class InvalidTimeError(ValidationError):
    """Raised when a remediation time is not after the open event or out of bounds."""


class DuplicateSubmissionError(DomainError):
    """Raised when a punch repeats the previous one within the duplicate window."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class StoreUnavailableError(Exception):
    """Raised when the backing store cannot be read or written. Retryable."""


class StaleReadError(StoreUnavailableError):
    """Raised when a read-back right after a write does not find the record."""
