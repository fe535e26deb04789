from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cabinshare.database import get_db
from cabinshare.dependencies import get_current_user, get_role_store
from cabinshare.models.current_user import CurrentUser
from cabinshare.models.permission import Capability
from cabinshare.repositories.user_roles_repository import UserRolesRepository
from cabinshare.schemas.role_schemas import SystemRoleUpdate, SystemRoleResponse
from cabinshare.services.permission_service import PermissionService
from cabinshare.services.role_service import RoleService

router = APIRouter()


@router.put("/users/{user_id}/system-role", response_model=SystemRoleResponse)
async def set_system_role(
    user_id: str,
    update: SystemRoleUpdate,
    user: CurrentUser = Depends(get_current_user),
    role_store: UserRolesRepository = Depends(get_role_store),
    db: Session = Depends(get_db),
):
    """
    Set a user's system role.

    - **Requires can_access_super_admin** (SUPER_ADMIN)
    - House grants are kept
    """
    PermissionService(db, role_store).require(
        user.user_id, Capability.ACCESS_SUPER_ADMIN, message="Super admin access required"
    )
    return RoleService(db, role_store).set_system_role(user_id, update.system_role, update.email)
