from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cabinshare.database import get_db
from cabinshare.dependencies import get_current_user, get_role_store
from cabinshare.models.current_user import CurrentUser
from cabinshare.repositories.user_roles_repository import UserRolesRepository
from cabinshare.schemas.role_schemas import (
    UserRolesResponse,
    RoleGrantResponse,
    PermissionSetResponse,
)
from cabinshare.services.permission_service import PermissionService

router = APIRouter()


@router.get("/roles", response_model=UserRolesResponse)
async def get_my_roles(
    user: CurrentUser = Depends(get_current_user),
    role_store: UserRolesRepository = Depends(get_role_store),
):
    """
    Get the caller's system role and house grants.

    Users without a stored record get the defaults: REGULAR_USER, no houses.
    """
    record = role_store.get_user_roles(user.user_id)
    if record is None:
        return UserRolesResponse(user_id=user.user_id, email=user.email or "")

    return UserRolesResponse(
        user_id=record.user_id,
        email=record.email,
        system_role=record.system_role,
        house_roles={
            house_id: RoleGrantResponse(
                role=grant.role, granted_at=grant.granted_at, granted_by=grant.granted_by
            )
            for house_id, grant in record.house_roles.items()
        },
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


@router.get("/permissions", response_model=PermissionSetResponse)
async def get_my_permissions(
    house_id: str | None = Query(None, description="House to resolve permissions for"),
    user: CurrentUser = Depends(get_current_user),
    role_store: UserRolesRepository = Depends(get_role_store),
    db: Session = Depends(get_db),
):
    """
    Resolve the caller's permissions.

    - Without house_id only system-level capabilities can be granted
    - With house_id the caller's role in that house and the house's
      hide_finances flag are applied
    """
    service = PermissionService(db, role_store)
    permissions = service.get_permissions(user.user_id, house_id)
    return PermissionSetResponse(house_id=house_id, **permissions.to_dict())
