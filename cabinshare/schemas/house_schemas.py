from pydantic import BaseModel, Field
from datetime import datetime
from cabinshare.models.role import HouseRole


class HouseCreate(BaseModel):
    """Create a house; the caller becomes OWNER"""

    name: str = Field(..., min_length=1, max_length=255)
    hide_finances: bool = False


class HouseResponse(BaseModel):
    """House details response"""

    id: str
    name: str
    hide_finances: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class HousePrivacyUpdate(BaseModel):
    """Toggle finance visibility for members (OWNER / ADMIN)"""

    hide_finances: bool


class HouseMemberResponse(BaseModel):
    """Current grant of one member"""

    user_id: str
    house_id: str
    role: HouseRole
    granted_at: datetime
    granted_by: str

    model_config = {"from_attributes": True}


class HouseInviteRequest(BaseModel):
    """Add a user to a house"""

    user_id: str = Field(..., description="Identity provider user ID to add", min_length=1)
    role: HouseRole = Field(
        default=HouseRole.MEMBER, description="Role to assign (default: MEMBER)"
    )
    email: str | None = Field(default=None, max_length=255)


class HouseRoleUpdate(BaseModel):
    """Update member's role (OWNER only)"""

    role: HouseRole = Field(..., description="New role to assign")


class HouseMemberRemoveResponse(BaseModel):
    """Response after removing member"""

    message: str
    removed_user_id: str
