class CabinshareException(Exception):
    """Base exception for the access-control service"""

    pass


class UnauthorizedException(CabinshareException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(CabinshareException):
    """Raised when resource not found"""

    pass


class ForbiddenException(CabinshareException):
    """Raised when the caller lacks the capability for an action"""

    pass


class ValidationException(CabinshareException):
    """Raised for business logic validation errors"""

    pass


class RoleFetchFailed(CabinshareException):
    """
    Raised when a role record cannot be read from the role store.

    Covers store/network errors, timeouts and malformed stored data.
    Callers must treat this as a denial, never as a default grant.
    """

    def __init__(self, user_id: str, reason: str):
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"Failed to load roles for user {user_id}: {reason}")


class InvalidRoleValue(RoleFetchFailed):
    """Raised when a stored role string is not a known role"""

    def __init__(self, user_id: str, value: str, field: str):
        self.value = value
        self.field = field
        super().__init__(user_id, f"invalid {field} value {value!r}")
