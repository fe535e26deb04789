"""
Permission tables and resolution.

Two typed lookups, one per role kind, combined by disjunction:

    granted(capability) = system role grants it
                          OR house role (for the requested house) grants it

Everything here is pure: no I/O, no logging, no exceptions for
well-formed input. Unknown role strings are rejected by the role store
before they can reach this module.
"""

from cabinshare.models.permission import Capability, PermissionSet, PERMISSION_FIELDS
from cabinshare.models.role import SystemRole, HouseRole
from cabinshare.models.role_data import UserRoleData


SYSTEM_PERMISSIONS: dict[SystemRole, frozenset[Capability]] = {
    SystemRole.SUPER_ADMIN: frozenset(Capability),
    SystemRole.SUPPORT_ADMIN: frozenset([
        Capability.VIEW_ALL_HOUSES,
        Capability.VIEW_ANALYTICS,
    ]),
    SystemRole.REGULAR_USER: frozenset(),
}

HOUSE_PERMISSIONS: dict[HouseRole, frozenset[Capability]] = {
    HouseRole.OWNER: frozenset([
        Capability.MANAGE_HOUSE,
        Capability.DELETE_HOUSE,
        Capability.EDIT_SETTINGS,
        Capability.INVITE_MEMBERS,
        Capability.REMOVE_MEMBERS,
        Capability.TRANSFER_OWNERSHIP,
        Capability.CREATE_BOOKING,
        Capability.EDIT_BOOKING,
        Capability.DELETE_BOOKING,
        Capability.VIEW_FINANCES,
        Capability.EDIT_BUDGET,
        Capability.MANAGE_INVOICES,
        Capability.CREATE_TASK,
        Capability.DELETE_TASK,
    ]),
    HouseRole.ADMIN: frozenset([
        Capability.EDIT_SETTINGS,
        Capability.INVITE_MEMBERS,
        Capability.CREATE_BOOKING,
        Capability.EDIT_BOOKING,
        Capability.DELETE_BOOKING,
        Capability.VIEW_FINANCES,
        Capability.EDIT_BUDGET,
        Capability.CREATE_TASK,
        Capability.DELETE_TASK,
    ]),
    HouseRole.MEMBER: frozenset([
        Capability.CREATE_BOOKING,
        Capability.EDIT_BOOKING,
        Capability.VIEW_FINANCES,
        Capability.CREATE_TASK,
    ]),
    HouseRole.VIEWER: frozenset(),
}


def check_system_permission(role: SystemRole, capability: Capability) -> bool:
    """Check if a system role grants a capability on its own"""
    return capability in SYSTEM_PERMISSIONS[role]


def check_house_permission(role: HouseRole, capability: Capability) -> bool:
    """Check if a house role grants a capability in the static table"""
    return capability in HOUSE_PERMISSIONS[role]


def _house_grants(
    house_role: HouseRole | None, capability: Capability, hide_finances: bool
) -> bool:
    if house_role is None:
        return False

    # Any grant at all lets the holder edit tasks, viewers included.
    if capability is Capability.EDIT_TASK:
        return True

    # The privacy flag hides finances from plain members only.
    if capability is Capability.VIEW_FINANCES and house_role is HouseRole.MEMBER:
        return not hide_finances

    return check_house_permission(house_role, capability)


def resolve_permissions(
    role_data: UserRoleData,
    house_id: str | None = None,
    hide_finances: bool | None = False,
) -> PermissionSet:
    """
    Resolve the complete permission set for a user, optionally in a house.

    Args:
        role_data: Snapshot from the role store
        house_id: House to resolve house-scoped capabilities for; None for
            system-only checks
        hide_finances: The house's privacy flag; None is treated as False

    Returns:
        PermissionSet with every field computed
    """
    granted = {
        field_name: has_capability(role_data, capability, house_id, hide_finances)
        for field_name, capability in PERMISSION_FIELDS.items()
    }
    return PermissionSet(**granted)


def has_capability(
    role_data: UserRoleData,
    capability: Capability,
    house_id: str | None = None,
    hide_finances: bool | None = False,
) -> bool:
    """Single-capability form of resolve_permissions"""
    return check_system_permission(role_data.system_role, capability) or _house_grants(
        role_data.house_role(house_id), capability, bool(hide_finances)
    )


def has_role_level(user_role: HouseRole | None, minimum_role: HouseRole) -> bool:
    """
    Check if a house role meets or exceeds a minimum role.

    Role hierarchy: OWNER (4) > ADMIN (3) > MEMBER (2) > VIEWER (1).
    No role never meets any minimum.
    """
    if user_role is None:
        return False
    return user_role.level >= minimum_role.level


def is_super_admin(system_role: SystemRole) -> bool:
    return system_role is SystemRole.SUPER_ADMIN


def is_any_admin(system_role: SystemRole, house_role: HouseRole | None = None) -> bool:
    """Check if user is any kind of admin (system or house)"""
    return (
        system_role in (SystemRole.SUPER_ADMIN, SystemRole.SUPPORT_ADMIN)
        or house_role in (HouseRole.OWNER, HouseRole.ADMIN)
    )
