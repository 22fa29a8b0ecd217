"""Custom exceptions and error codes for the BOPP management core.

Storage-layer problems are exceptions; domain failures (unknown user, bad
credentials, expired OTP, ...) are never raised and travel back to callers as
result objects tagged with an ``ErrorCode``.
"""

from enum import Enum


class BoppError(Exception):
    """Base exception for all BOPP core errors."""


class StorageError(BoppError):
    """Raised when stored records cannot be read, decoded, or written."""


class BackendNotConnected(StorageError):
    """Raised when a connection-based backend is used before connect()."""


class ErrorCode(str, Enum):
    """Machine-readable reason attached to a failed result."""

    USER_NOT_FOUND = "user_not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNSUPPORTED_LOGIN_METHOD = "unsupported_login_method"
    NO_ACTIVE_OTP = "no_active_otp"
    OTP_EXPIRED = "otp_expired"
    INVALID_OTP = "invalid_otp"
    NOT_AN_EMPLOYEE = "not_an_employee"
    DUPLICATE_USER = "duplicate_user"
    PROTECTED_USER = "protected_user"
    ADMIN_NOT_FOUND = "admin_not_found"
    INVALID_ROLE = "invalid_role"
