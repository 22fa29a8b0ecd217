"""Conversion between domain models and stored JSON records.

Rate values are written as decimal strings so no precision is lost through
JSON floats; on read both strings and plain JSON numbers are accepted.
Timestamps are ISO-8601 strings, always UTC.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from bopp.exceptions import StorageError
from bopp.models import AdminUser, EmployeeUser, Rate, RateHistoryEntry, Role, User


def decode_decimal(value: Any) -> Decimal:
    """Decimal from a stored number or string, avoiding float artifacts."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise StorageError(f"Invalid decimal value: {value!r}") from e


def encode_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def decode_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed); naive values are UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError as e:
            raise StorageError(f"Invalid timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ──────────────────────────────────────────────
# Rates
# ──────────────────────────────────────────────


def rate_to_record(rate: Rate) -> dict:
    return {"id": rate.id, "key": rate.key, "value": str(rate.value)}


def rate_from_record(record: dict) -> Rate:
    try:
        return Rate(
            id=int(record["id"]),
            key=str(record["key"]),
            value=decode_decimal(record["value"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"Malformed rate record: {record!r}") from e


def history_to_record(entry: RateHistoryEntry) -> dict:
    return {
        "id": entry.id,
        "changed_at": encode_timestamp(entry.changed_at),
        "changed_by_id": entry.changed_by_id,
        "changed_by_name": entry.changed_by_name,
        "rates_snapshot": [rate_to_record(r) for r in entry.rates_snapshot],
    }


def history_from_record(record: dict) -> RateHistoryEntry:
    if not isinstance(record, dict):
        raise StorageError(f"Malformed history record: {record!r}")
    snapshot = record.get("rates_snapshot")
    try:
        return RateHistoryEntry(
            id=int(record["id"]),
            changed_at=decode_timestamp(record["changed_at"]),
            changed_by_id=str(record["changed_by_id"]),
            changed_by_name=str(record["changed_by_name"]),
            rates_snapshot=tuple(
                rate_from_record(r) for r in snapshot
            ) if isinstance(snapshot, list) else (),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"Malformed history record: {record!r}") from e


# ──────────────────────────────────────────────
# Users
# ──────────────────────────────────────────────


def user_to_record(user: User) -> dict:
    match user:
        case AdminUser():
            record: dict = {"id": user.id, "name": user.name, "role": Role.ADMIN.value}
            if user.password_hash is not None:
                record["password_hash"] = user.password_hash
            return record
        case EmployeeUser():
            return {
                "id": user.id,
                "name": user.name,
                "role": Role.EMPLOYEE.value,
                "otp": user.otp,
                "otp_created_at": (
                    encode_timestamp(user.otp_created_at)
                    if user.otp_created_at is not None
                    else None
                ),
            }
    raise TypeError(f"Unknown user type: {type(user).__name__}")


def user_from_record(record: dict, hash_password: Callable[[str], str]) -> User:
    """Decode a stored user.

    A legacy plaintext ``password`` on an admin record is hashed here, so it
    is never written back in clear text.
    """
    if not isinstance(record, dict):
        raise StorageError(f"Malformed user record: {record!r}")
    try:
        user_id = str(record["id"])
        name = str(record["name"])
        role = Role(record["role"])
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"Malformed user record: {record!r}") from e

    if role is Role.ADMIN:
        password_hash = record.get("password_hash")
        if password_hash is None and record.get("password"):
            password_hash = hash_password(str(record["password"]))
        return AdminUser(id=user_id, name=name, password_hash=password_hash)

    otp = record.get("otp")
    created_raw = record.get("otp_created_at")
    return EmployeeUser(
        id=user_id,
        name=name,
        otp=str(otp) if otp is not None else None,
        otp_created_at=decode_timestamp(created_raw) if created_raw else None,
    )
