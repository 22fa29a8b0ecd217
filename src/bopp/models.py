"""Shared data models for the BOPP management core.

CRITICAL: All rate values use Decimal. Never use float for prices or rates.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from bopp.exceptions import ErrorCode

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """User role."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


@dataclass(frozen=True)
class Rate:
    """A named pricing parameter. ``key`` is the identity for merges."""

    id: int
    key: str
    value: Decimal


@dataclass(frozen=True)
class RateHistoryEntry:
    """Point-in-time copy of the full rate set taken before a change."""

    id: int
    changed_at: datetime
    changed_by_id: str
    changed_by_name: str
    rates_snapshot: tuple[Rate, ...] = ()

    def snapshot_value(self, key: str) -> Decimal | None:
        """Value of ``key`` in the snapshot, or None if it was not present."""
        for rate in self.rates_snapshot:
            if rate.key == key:
                return rate.value
        return None


@dataclass(frozen=True)
class UserProfile:
    """Public view of a user, safe to hand to the presentation layer."""

    id: str
    name: str
    role: Role


@dataclass
class AdminUser:
    """Administrator. Authenticates with a password."""

    id: str
    name: str
    password_hash: str | None = None

    @property
    def role(self) -> Role:
        return Role.ADMIN

    def public(self) -> UserProfile:
        return UserProfile(id=self.id, name=self.name, role=self.role)


@dataclass
class EmployeeUser:
    """Employee. Authenticates with one-time codes only, never a password.

    ``otp`` and ``otp_created_at`` are always set and cleared together.
    """

    id: str
    name: str
    otp: str | None = None
    otp_created_at: datetime | None = None

    @property
    def role(self) -> Role:
        return Role.EMPLOYEE

    @property
    def has_active_otp(self) -> bool:
        return self.otp is not None and self.otp_created_at is not None

    def set_otp(self, otp: str, created_at: datetime) -> None:
        self.otp = otp
        self.otp_created_at = created_at

    def clear_otp(self) -> None:
        self.otp = None
        self.otp_created_at = None

    def public(self) -> UserProfile:
        return UserProfile(id=self.id, name=self.name, role=self.role)


User = AdminUser | EmployeeUser


# ──────────────────────────────────────────────
# Result objects (domain failures are returned, never raised)
# ──────────────────────────────────────────────


@dataclass
class OperationResult:
    """Outcome of an administrative mutation."""

    success: bool
    message: str | None = None
    error: str | None = None
    code: ErrorCode | None = None

    @classmethod
    def ok(cls, message: str) -> "OperationResult":
        return cls(success=True, message=message)

    @classmethod
    def fail(cls, code: ErrorCode, error: str) -> "OperationResult":
        return cls(success=False, error=error, code=code)


@dataclass
class AuthResult:
    """Outcome of a login or OTP verification attempt."""

    success: bool
    user: UserProfile | None = None
    error: str | None = None
    code: ErrorCode | None = None

    @classmethod
    def fail(cls, code: ErrorCode, error: str) -> "AuthResult":
        return cls(success=False, error=error, code=code)


@dataclass
class UserDetailsResult:
    """Outcome of a user directory lookup."""

    success: bool
    user: UserProfile | None = None
    error: str | None = None
    code: ErrorCode | None = None


@dataclass
class OTPResult:
    """Outcome of OTP issuance. ``otp`` is only set on success."""

    success: bool
    otp: str | None = None
    message: str | None = None
    error: str | None = None
    code: ErrorCode | None = None
    expires_at: datetime | None = None


@dataclass
class RateUpdate:
    """Incoming rate change. ``id`` is only honoured for brand-new keys."""

    key: str
    value: Decimal
    id: int | None = None
