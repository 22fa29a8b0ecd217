"""User directory and authentication -- admin passwords and employee OTPs."""

from bopp.auth.defaults import default_users
from bopp.auth.store import UserStore

__all__ = ["UserStore", "default_users"]
