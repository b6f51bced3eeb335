"""User roles for role-based access control."""

import enum


class Role(str, enum.Enum):
    """Closed set of roles a user can hold."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    CLIENT = "client"


# Roles allowed to own and manage services.
SERVICE_MANAGER_ROLES = frozenset({Role.ADMIN, Role.SUPERADMIN})
