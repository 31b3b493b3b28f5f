"""Shared role constants and helpers."""

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLE_PROJECT_OWNER = "project_owner"

ROLE_CHOICES = (
    ROLE_USER,
    ROLE_ADMIN,
    ROLE_PROJECT_OWNER,
)


def normalize_role(value: str | None) -> str:
    """Return a lowercase role name, rejecting unknown values."""

    role = (value or "").strip().lower()
    if role not in ROLE_CHOICES:
        raise ValueError(f"unknown role: {value!r}")
    return role


__all__ = [
    "ROLE_ADMIN",
    "ROLE_CHOICES",
    "ROLE_PROJECT_OWNER",
    "ROLE_USER",
    "normalize_role",
]
