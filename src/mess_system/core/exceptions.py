class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class StudentNotFoundError(DomainError):
    """No approved roster entry exists for the scanned email."""


class DataMismatchError(DomainError):
    """Scanned credential fields disagree with the roster entry."""


class InvalidPayloadError(DomainError):
    """Decoded QR text is not a well-formed student credential."""


class DecodeError(DomainError):
    """An image could not be decoded into QR text."""


class StorageError(Exception):
    """Persistence read/write failed."""


class DuplicateKeyError(StorageError):
    """A write collided with a unique key already in the store."""
