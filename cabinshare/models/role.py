"""Role enums for role-based access control."""

from enum import Enum as PyEnum


class SystemRole(str, PyEnum):
    """
    Global role, exactly one per user.

    - SUPER_ADMIN: Universal override, satisfies every capability
    - SUPPORT_ADMIN: Read-only support staff (view all houses, analytics)
    - REGULAR_USER: No system-level capabilities; default for unknown users
    """

    SUPER_ADMIN = "super_admin"
    SUPPORT_ADMIN = "support_admin"
    REGULAR_USER = "regular_user"


class HouseRole(str, PyEnum):
    """
    Per-house roles with hierarchical privilege.

    Role Hierarchy (highest to lowest):
    1. OWNER - Full control, can delete house, transfer ownership, manage invoices
    2. ADMIN - Edit settings, invite members, manage bookings/tasks/budget
    3. MEMBER - Create and edit bookings, create tasks, view finances
    4. VIEWER - Read-only presence in the house
    """

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"

    @property
    def level(self) -> int:
        """Position in the hierarchy, VIEWER (1) up to OWNER (4)"""
        return HOUSE_ROLE_HIERARCHY[self]


HOUSE_ROLE_HIERARCHY = {
    HouseRole.OWNER: 4,
    HouseRole.ADMIN: 3,
    HouseRole.MEMBER: 2,
    HouseRole.VIEWER: 1,
}
