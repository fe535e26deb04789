from pydantic import BaseModel, Field
from datetime import datetime
from cabinshare.models.role import SystemRole, HouseRole


class RoleGrantResponse(BaseModel):
    """A single house grant"""

    role: HouseRole
    granted_at: datetime
    granted_by: str

    model_config = {"from_attributes": True}


class UserRolesResponse(BaseModel):
    """Role record for a user; users without a record get the defaults"""

    user_id: str
    email: str = ""
    system_role: SystemRole = SystemRole.REGULAR_USER
    house_roles: dict[str, RoleGrantResponse] = {}
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class PermissionSetResponse(BaseModel):
    """Resolved permissions, optionally scoped to a house"""

    house_id: str | None = None

    can_access_super_admin: bool
    can_view_all_houses: bool
    can_impersonate_users: bool
    can_manage_email_templates: bool

    can_manage_house: bool
    can_delete_house: bool
    can_edit_house_settings: bool
    can_invite_members: bool
    can_remove_members: bool
    can_transfer_ownership: bool

    can_create_booking: bool
    can_edit_own_booking: bool
    can_delete_any_booking: bool

    can_view_finances: bool
    can_edit_budget: bool
    can_manage_invoices: bool

    can_create_task: bool
    can_edit_own_task: bool
    can_delete_any_task: bool


class SystemRoleUpdate(BaseModel):
    """Set a user's system role (SUPER_ADMIN only)"""

    system_role: SystemRole = Field(..., description="New system role")
    email: str | None = Field(default=None, max_length=255)


class SystemRoleResponse(BaseModel):
    user_id: str
    email: str
    system_role: SystemRole
    updated_at: datetime

    model_config = {"from_attributes": True}
