"""Capability names and the resolved permission set."""

from dataclasses import dataclass, asdict, fields
from enum import Enum as PyEnum


class Capability(str, PyEnum):
    """Every action the access-control tables know about."""

    # System
    ACCESS_SUPER_ADMIN = "access_super_admin"
    VIEW_ALL_HOUSES = "view_all_houses"
    IMPERSONATE_USERS = "impersonate_users"
    MANAGE_EMAIL_TEMPLATES = "manage_email_templates"
    VIEW_ANALYTICS = "view_analytics"

    # House management
    MANAGE_HOUSE = "manage_house"
    DELETE_HOUSE = "delete_house"
    EDIT_SETTINGS = "edit_settings"
    INVITE_MEMBERS = "invite_members"
    REMOVE_MEMBERS = "remove_members"
    TRANSFER_OWNERSHIP = "transfer_ownership"

    # Bookings
    CREATE_BOOKING = "create_booking"
    EDIT_BOOKING = "edit_booking"
    DELETE_BOOKING = "delete_booking"

    # Finances
    VIEW_FINANCES = "view_finances"
    EDIT_BUDGET = "edit_budget"
    MANAGE_INVOICES = "manage_invoices"

    # Tasks
    CREATE_TASK = "create_task"
    EDIT_TASK = "edit_task"
    DELETE_TASK = "delete_task"


@dataclass(frozen=True)
class PermissionSet:
    """
    Resolved yes/no answer for every capability a caller can hold.

    Always fully populated; the default instance denies everything.
    """

    # System
    can_access_super_admin: bool = False
    can_view_all_houses: bool = False
    can_impersonate_users: bool = False
    can_manage_email_templates: bool = False

    # House management
    can_manage_house: bool = False
    can_delete_house: bool = False
    can_edit_house_settings: bool = False
    can_invite_members: bool = False
    can_remove_members: bool = False
    can_transfer_ownership: bool = False

    # Bookings
    can_create_booking: bool = False
    can_edit_own_booking: bool = False
    can_delete_any_booking: bool = False

    # Finances
    can_view_finances: bool = False
    can_edit_budget: bool = False
    can_manage_invoices: bool = False

    # Tasks
    can_create_task: bool = False
    can_edit_own_task: bool = False
    can_delete_any_task: bool = False

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)

    def granted(self) -> list[str]:
        """Names of the fields that are True"""
        return [name for name, value in self.to_dict().items() if value]


# PermissionSet field -> capability it is resolved from
PERMISSION_FIELDS: dict[str, Capability] = {
    "can_access_super_admin": Capability.ACCESS_SUPER_ADMIN,
    "can_view_all_houses": Capability.VIEW_ALL_HOUSES,
    "can_impersonate_users": Capability.IMPERSONATE_USERS,
    "can_manage_email_templates": Capability.MANAGE_EMAIL_TEMPLATES,
    "can_manage_house": Capability.MANAGE_HOUSE,
    "can_delete_house": Capability.DELETE_HOUSE,
    "can_edit_house_settings": Capability.EDIT_SETTINGS,
    "can_invite_members": Capability.INVITE_MEMBERS,
    "can_remove_members": Capability.REMOVE_MEMBERS,
    "can_transfer_ownership": Capability.TRANSFER_OWNERSHIP,
    "can_create_booking": Capability.CREATE_BOOKING,
    "can_edit_own_booking": Capability.EDIT_BOOKING,
    "can_delete_any_booking": Capability.DELETE_BOOKING,
    "can_view_finances": Capability.VIEW_FINANCES,
    "can_edit_budget": Capability.EDIT_BUDGET,
    "can_manage_invoices": Capability.MANAGE_INVOICES,
    "can_create_task": Capability.CREATE_TASK,
    "can_edit_own_task": Capability.EDIT_TASK,
    "can_delete_any_task": Capability.DELETE_TASK,
}
