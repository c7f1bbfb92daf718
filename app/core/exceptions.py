from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class _TypedServiceError(ServiceError):
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message, self.default_status)


class ValidationError(_TypedServiceError):
    """Malformed or missing input."""

    default_status = status.HTTP_400_BAD_REQUEST


class AuthError(_TypedServiceError):
    """Shared secret or bearer token missing or invalid."""

    default_status = status.HTTP_401_UNAUTHORIZED


class SecretNotConfiguredError(AuthError):
    """No webhook secret configured anywhere: fail closed, reported as a configuration fault."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR


class ForbiddenError(_TypedServiceError):
    default_status = status.HTTP_403_FORBIDDEN


class InactiveAmbassadorError(ForbiddenError):
    pass


class NotFoundError(_TypedServiceError):
    default_status = status.HTTP_404_NOT_FOUND


class UnknownReferralCodeError(NotFoundError):
    pass


class ConflictError(_TypedServiceError):
    default_status = status.HTTP_409_CONFLICT


class DuplicateReferralError(ConflictError):
    pass


class StateError(_TypedServiceError):
    """Operation not allowed in the current ledger state."""

    default_status = status.HTTP_400_BAD_REQUEST


class InsufficientBalanceError(StateError):
    pass


class InvalidTransitionError(StateError):
    pass


class SystemInactiveError(_TypedServiceError):
    """Operator kill switch engaged; retrying later is valid."""

    default_status = status.HTTP_503_SERVICE_UNAVAILABLE


class InternalError(_TypedServiceError):
    """Store unavailable or configuration missing."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
