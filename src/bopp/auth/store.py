"""User directory, admin password login, and employee OTP lifecycle.

Admins and employees are distinct variants (AdminUser / EmployeeUser) and
every role-specific operation dispatches on the variant:

  - Admins log in with a password (login_user) and can be edited with
    update_admin_details.
  - Employees log in with one-time codes: generate_and_store_otp issues one,
    verify_otp checks it, revoke_otp withdraws it.

OTP state per employee: NoOTP -> Active -> {Active after a successful verify,
Expired, Revoked -> NoOTP}. Active vs Expired is decided from the code's age
when it is verified. A verified code is not cleared unless
AuthSettings.clear_otp_on_success is set, so it can be reused inside its
window.

Domain failures are returned as result objects carrying an ErrorCode; they
are never raised.
"""

import asyncio
import hmac
from collections.abc import Callable
from datetime import timedelta

from bopp.auth.defaults import default_users
from bopp.auth.otp import generate_otp, otp_age, otp_expired, otp_matches
from bopp.auth.passwords import hash_password, verify_password
from bopp.config import AuthSettings
from bopp.exceptions import ErrorCode, StorageError
from bopp.logging import get_logger
from bopp.models import (
    AdminUser,
    AuthResult,
    Clock,
    EmployeeUser,
    OperationResult,
    OTPResult,
    Role,
    User,
    UserDetailsResult,
    utcnow,
)
from bopp.storage.backend import Entity, StorageBackend
from bopp.storage.codec import user_from_record, user_to_record

logger = get_logger(__name__)


def _find(users: list[User], user_id: str) -> User | None:
    for user in users:
        if user.id == user_id:
            return user
    return None


def _find_ci(users: list[User], user_id: str) -> User | None:
    wanted = user_id.lower()
    for user in users:
        if user.id.lower() == wanted:
            return user
    return None


class UserStore:
    """Persistence-backed user directory with login and OTP operations.

    Every operation performs a full read-modify-write of the users record set.

    Args:
        backend: Record-set storage for users.
        settings: OTP lifetime, default admin credential, pacing delay.
        clock: Returns the current UTC time. Injected for tests.
        otp_generator: Produces new codes. Injected for tests.
    """

    def __init__(
        self,
        backend: StorageBackend,
        settings: AuthSettings | None = None,
        clock: Clock = utcnow,
        otp_generator: Callable[[], str] = generate_otp,
    ) -> None:
        self._backend = backend
        self._settings = settings or AuthSettings()
        self._clock = clock
        self._otp_generator = otp_generator
        self._otp_ttl = timedelta(seconds=self._settings.otp_ttl_seconds)

    # ──────────────────────────────────────────────
    # Internals
    # ──────────────────────────────────────────────

    async def _pause(self) -> None:
        """Cosmetic pacing for the UI; not a scheduling concern."""
        if self._settings.response_delay_seconds > 0:
            await asyncio.sleep(self._settings.response_delay_seconds)

    def _hash(self, password: str) -> str:
        return hash_password(password, self._settings.password_hash_iterations)

    async def _load_users(self) -> list[User]:
        try:
            records = await self._backend.load(Entity.USERS)
        except StorageError as e:
            logger.error("users_read_failed", error=str(e), fallback="defaults")
            return default_users()

        if records is None:
            users = default_users()
            await self._save_users(users)
            logger.info("users_seeded", count=len(users))
            return users

        try:
            return [user_from_record(r, self._hash) for r in records]
        except StorageError as e:
            logger.error("users_decode_failed", error=str(e), fallback="defaults")
            return default_users()

    async def _save_users(self, users: list[User]) -> None:
        await self._backend.save(Entity.USERS, [user_to_record(u) for u in users])

    def _is_default_admin_credential(self, user: AdminUser, password: str | None) -> bool:
        if password is None or user.id != self._settings.default_admin_id:
            return False
        expected = self._settings.default_admin_password.get_secret_value()
        return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))

    def _is_protected(self, user_id: str) -> bool:
        return user_id.lower() in {p.lower() for p in self._settings.protected_user_ids}

    # ──────────────────────────────────────────────
    # Directory lookups
    # ──────────────────────────────────────────────

    async def fetch_user_details(self, user_id: str) -> UserDetailsResult:
        """Public profile for ``user_id``, matched case-insensitively."""
        await self._pause()
        user = _find_ci(await self._load_users(), user_id)
        if user is None:
            return UserDetailsResult(
                success=False, error="User not found", code=ErrorCode.USER_NOT_FOUND
            )
        return UserDetailsResult(success=True, user=user.public())

    async def get_all_users(self) -> list[User]:
        await self._pause()
        return await self._load_users()

    # ──────────────────────────────────────────────
    # Authentication
    # ──────────────────────────────────────────────

    async def login_user(self, user_id: str, password: str | None = None) -> AuthResult:
        """Password login, admins only.

        The default admin account accepts the well-known credential from
        settings; any admin also accepts its own stored password.
        """
        await self._pause()
        user = _find(await self._load_users(), user_id)

        match user:
            case None:
                logger.info("login_failed", user_id=user_id, reason="user_not_found")
                return AuthResult.fail(ErrorCode.USER_NOT_FOUND, "User not found")
            case AdminUser():
                if self._is_default_admin_credential(user, password) or (
                    password is not None
                    and user.password_hash is not None
                    and verify_password(password, user.password_hash)
                ):
                    logger.info("login_succeeded", user_id=user.id, role=user.role.value)
                    return AuthResult(success=True, user=user.public())
                logger.info("login_failed", user_id=user_id, reason="invalid_credentials")
                return AuthResult.fail(
                    ErrorCode.INVALID_CREDENTIALS,
                    "Invalid credentials for this admin user.",
                )
            case EmployeeUser():
                return AuthResult.fail(
                    ErrorCode.UNSUPPORTED_LOGIN_METHOD,
                    "Login method not applicable for this user type here.",
                )
        raise TypeError(f"Unknown user type: {type(user).__name__}")

    async def generate_and_store_otp(self, user_id: str) -> OTPResult:
        """Issue a fresh code for an employee, replacing any outstanding one."""
        await self._pause()
        users = await self._load_users()
        user = _find(users, user_id)

        if not isinstance(user, EmployeeUser):
            logger.info("otp_generation_rejected", user_id=user_id, found=user is not None)
            return OTPResult(
                success=False,
                error="Failed to generate OTP. User not found or not an employee.",
                code=ErrorCode.USER_NOT_FOUND if user is None else ErrorCode.NOT_AN_EMPLOYEE,
            )

        created_at = self._clock()
        otp = self._otp_generator()
        user.set_otp(otp, created_at)
        await self._save_users(users)

        logger.info("otp_generated", user_id=user.id, created_at=created_at.isoformat())
        return OTPResult(
            success=True,
            otp=otp,
            message="OTP generated successfully.",
            expires_at=created_at + self._otp_ttl,
        )

    async def verify_otp(self, user_id: str, otp: str) -> AuthResult:
        """Check an employee's submitted code.

        Expiry is checked first: a code strictly older than the TTL fails even
        if it matches.
        """
        await self._pause()
        users = await self._load_users()
        user = _find(users, user_id)

        match user:
            case None:
                logger.info("otp_verify_failed", user_id=user_id, reason="user_not_found")
                return AuthResult.fail(ErrorCode.USER_NOT_FOUND, "User not found")
            case AdminUser():
                return AuthResult.fail(
                    ErrorCode.NOT_AN_EMPLOYEE, "OTP login is only available for employees."
                )
            case EmployeeUser():
                return await self._check_otp(users, user, otp)
        raise TypeError(f"Unknown user type: {type(user).__name__}")

    async def _check_otp(self, users: list[User], user: EmployeeUser, otp: str) -> AuthResult:
        if user.otp is None or user.otp_created_at is None:
            logger.info("otp_verify_failed", user_id=user.id, reason="no_active_otp")
            return AuthResult.fail(
                ErrorCode.NO_ACTIVE_OTP,
                "No active OTP found for this user. Please generate one.",
            )

        now = self._clock()
        if otp_expired(user.otp_created_at, now, self._otp_ttl):
            logger.info(
                "otp_verify_failed",
                user_id=user.id,
                reason="expired",
                age_ms=int(otp_age(user.otp_created_at, now).total_seconds() * 1000),
            )
            return AuthResult.fail(
                ErrorCode.OTP_EXPIRED, "OTP has expired. Please generate a new one."
            )

        if not otp_matches(otp, user.otp):
            logger.info("otp_verify_failed", user_id=user.id, reason="mismatch")
            return AuthResult.fail(ErrorCode.INVALID_OTP, "Invalid OTP")

        if self._settings.clear_otp_on_success:
            user.clear_otp()
            await self._save_users(users)

        logger.info("otp_verified", user_id=user.id)
        return AuthResult(success=True, user=user.public())

    async def revoke_otp(self, user_id: str) -> OperationResult:
        """Withdraw an employee's outstanding code."""
        await self._pause()
        users = await self._load_users()
        user = _find(users, user_id)

        if not isinstance(user, EmployeeUser):
            return OperationResult.fail(
                ErrorCode.USER_NOT_FOUND if user is None else ErrorCode.NOT_AN_EMPLOYEE,
                "User not found or not an employee.",
            )

        user.clear_otp()
        await self._save_users(users)
        logger.info("otp_revoked", user_id=user.id)
        return OperationResult.ok(f"OTP for {user.name} has been revoked.")

    # ──────────────────────────────────────────────
    # Administration
    # ──────────────────────────────────────────────

    async def add_user(
        self,
        user_id: str,
        name: str,
        password: str | None,
        role: Role | str,
    ) -> OperationResult:
        """Create a user. Ids are unique case-insensitively.

        The password is hashed and stored for admins only; employees never
        carry one.
        """
        await self._pause()
        try:
            role = Role(role)
        except ValueError:
            logger.info("user_add_rejected", user_id=user_id, reason="invalid_role", role=str(role))
            return OperationResult.fail(ErrorCode.INVALID_ROLE, f"Invalid role: {role}.")
        users = await self._load_users()

        if _find_ci(users, user_id) is not None:
            return OperationResult.fail(
                ErrorCode.DUPLICATE_USER, "User with this ID already exists."
            )

        new_user: User
        if role is Role.ADMIN:
            new_user = AdminUser(
                id=user_id,
                name=name,
                password_hash=self._hash(password) if password else None,
            )
        else:
            new_user = EmployeeUser(id=user_id, name=name)

        users.append(new_user)
        await self._save_users(users)
        logger.info("user_added", user_id=user_id, role=role.value)
        return OperationResult.ok(f"User {name} added successfully.")

    async def delete_user(self, user_id: str) -> OperationResult:
        """Remove a user by exact id. Protected accounts are never removed."""
        await self._pause()
        if self._is_protected(user_id):
            logger.warning("protected_user_delete_rejected", user_id=user_id)
            return OperationResult.fail(
                ErrorCode.PROTECTED_USER,
                f"The default '{user_id}' account cannot be deleted.",
            )

        users = await self._load_users()
        remaining = [u for u in users if u.id != user_id]
        if len(remaining) == len(users):
            return OperationResult.fail(ErrorCode.USER_NOT_FOUND, "User not found.")

        await self._save_users(remaining)
        logger.info("user_deleted", user_id=user_id)
        return OperationResult.ok("User deleted successfully.")

    async def update_admin_details(
        self,
        admin_id: str,
        name: str | None = None,
        new_password: str | None = None,
    ) -> OperationResult:
        """Partially update an admin: name and password are each optional."""
        await self._pause()
        users = await self._load_users()
        admin = _find(users, admin_id)

        if not isinstance(admin, AdminUser):
            return OperationResult.fail(ErrorCode.ADMIN_NOT_FOUND, "Admin user not found.")

        if name:
            admin.name = name
        if new_password:
            admin.password_hash = self._hash(new_password)
            logger.info("admin_password_updated", user_id=admin_id)

        await self._save_users(users)
        return OperationResult.ok("Admin details updated successfully.")
