"""JSON-safe conversion of domain objects for API responses."""

from dataclasses import asdict, is_dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from bopp.models import AdminUser, EmployeeUser, User


def to_jsonable(obj: Any) -> Any:
    """Recursively convert dataclasses, Decimals, datetimes and enums.

    Decimals become strings so no precision is lost.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(item) for item in obj]
    return obj


def user_view(user: User) -> dict:
    """Directory entry for admin screens. Password hashes never leave the store."""
    view: dict[str, Any] = {"id": user.id, "name": user.name, "role": user.role.value}
    match user:
        case AdminUser():
            view["has_password"] = user.password_hash is not None
        case EmployeeUser():
            view["otp"] = user.otp
            view["otp_created_at"] = (
                user.otp_created_at.isoformat() if user.otp_created_at else None
            )
    return view
