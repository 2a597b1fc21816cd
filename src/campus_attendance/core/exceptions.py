class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class NotFoundError(DomainError):
    """Raised when a referenced student or record does not exist."""


class ConfigurationError(DomainError):
    """Raised at startup when settings (timetable, geofence, thresholds) are unusable."""


class StorageError(Exception):
    """Raised by repositories when the database cannot complete an operation."""
