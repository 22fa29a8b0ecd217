"""One-time passcodes for employee login.

Codes are six decimal digits. Whether a code is still usable is decided
lazily from wall-clock age at verification time; no expiry flag is stored.
"""

import hmac
import secrets
from datetime import datetime, timedelta

OTP_MIN = 100_000
OTP_MAX = 999_999


def generate_otp() -> str:
    """Random code in [100000, 999999] from the OS CSPRNG."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def otp_age(created_at: datetime, now: datetime) -> timedelta:
    return now - created_at


def otp_expired(created_at: datetime, now: datetime, ttl: timedelta) -> bool:
    """True once the code is strictly older than ``ttl``."""
    return otp_age(created_at, now) > ttl


def otp_matches(submitted: str, stored: str) -> bool:
    """Exact string equality, compared in constant time."""
    return hmac.compare_digest(submitted.encode("utf-8"), stored.encode("utf-8"))
