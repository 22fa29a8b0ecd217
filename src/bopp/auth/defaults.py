"""Seed user directory, written through when no users were ever stored."""

from bopp.models import AdminUser, EmployeeUser, User


def default_users() -> list[User]:
    """Fresh copies of the built-in accounts.

    ``admin`` logs in with the well-known credential from AuthSettings;
    ``admin`` and ``employee`` are protected from deletion.
    """
    return [
        AdminUser(id="admin", name="Administrator"),
        EmployeeUser(id="employee", name="Default Employee"),
        EmployeeUser(id="emp001", name="Alice Smith"),
        AdminUser(id="adm001", name="Bob Johnson (Admin)"),
    ]
