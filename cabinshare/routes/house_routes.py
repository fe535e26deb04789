from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cabinshare.database import get_db
from cabinshare.dependencies import get_current_user, get_role_store
from cabinshare.models.current_user import CurrentUser
from cabinshare.repositories.user_roles_repository import UserRolesRepository
from cabinshare.services.house_service import HouseService
from cabinshare.schemas.house_schemas import (
    HouseCreate,
    HouseResponse,
    HousePrivacyUpdate,
    HouseMemberResponse,
    HouseInviteRequest,
    HouseRoleUpdate,
    HouseMemberRemoveResponse,
)

router = APIRouter()


@router.post("", response_model=HouseResponse, status_code=status.HTTP_201_CREATED)
async def create_house(
    data: HouseCreate,
    user: CurrentUser = Depends(get_current_user),
    role_store: UserRolesRepository = Depends(get_role_store),
    db: Session = Depends(get_db),
):
    """Create a house; the authenticated user becomes its owner"""
    service = HouseService(db, role_store)
    return service.create_house(data, user)


@router.get("/{house_id}", response_model=HouseResponse)
async def get_house(
    house_id: str,
    user: CurrentUser = Depends(get_current_user),
    role_store: UserRolesRepository = Depends(get_role_store),
    db: Session = Depends(get_db),
):
    """
    Get house details.

    Available to anyone holding a role in the house, and to system roles
    that can view all houses.
    """
    service = HouseService(db, role_store)
    return service.get_house(house_id, user)


@router.patch("/{house_id}/privacy", response_model=HouseResponse)
async def update_privacy(
    house_id: str,
    update: HousePrivacyUpdate,
    user: CurrentUser = Depends(get_current_user),
    role_store: UserRolesRepository = Depends(get_role_store),
    db: Session = Depends(get_db),
):
    """
    Hide or show finances for members.

    - **Requires can_edit_house_settings** (OWNER, ADMIN)
    - Owners and admins always see finances
    """
    service = HouseService(db, role_store)
    return service.update_privacy(house_id, update, user)


@router.get("/{house_id}/members", response_model=list[HouseMemberResponse])
async def list_members(
    house_id: str,
    user: CurrentUser = Depends(get_current_user),
    role_store: UserRolesRepository = Depends(get_role_store),
    db: Session = Depends(get_db),
):
    """List all members of a house with their current grants"""
    service = HouseService(db, role_store)
    return service.get_members(house_id, user)


@router.post(
    "/{house_id}/members",
    response_model=HouseMemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def invite_member(
    house_id: str,
    invite_request: HouseInviteRequest,
    user: CurrentUser = Depends(get_current_user),
    role_store: UserRolesRepository = Depends(get_role_store),
    db: Session = Depends(get_db),
):
    """
    Add a member to a house.

    - **Requires can_invite_members** (OWNER, ADMIN)
    - Default role: MEMBER
    - Only OWNER can add another OWNER
    """
    service = HouseService(db, role_store)
    return service.invite_member(house_id, invite_request, user)


@router.patch("/{house_id}/members/{user_id}/role", response_model=HouseMemberResponse)
async def update_member_role(
    house_id: str,
    user_id: str,
    role_update: HouseRoleUpdate,
    user: CurrentUser = Depends(get_current_user),
    role_store: UserRolesRepository = Depends(get_role_store),
    db: Session = Depends(get_db),
):
    """
    Update member's role.

    - **Requires OWNER permissions**
    - Cannot change your own role
    """
    service = HouseService(db, role_store)
    return service.update_member_role(house_id, user_id, role_update, user)


@router.delete(
    "/{house_id}/members/{user_id}",
    response_model=HouseMemberRemoveResponse,
    status_code=status.HTTP_200_OK,
)
async def remove_member(
    house_id: str,
    user_id: str,
    user: CurrentUser = Depends(get_current_user),
    role_store: UserRolesRepository = Depends(get_role_store),
    db: Session = Depends(get_db),
):
    """
    Remove member from house.

    - **Requires can_remove_members** (OWNER)
    - Cannot remove an OWNER
    - Cannot remove yourself
    """
    service = HouseService(db, role_store)
    service.remove_member(house_id, user_id, user)

    return {
        "message": "Member removed successfully",
        "removed_user_id": user_id,
    }
