from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cabinshare.core.exceptions import ForbiddenException, RoleFetchFailed
from cabinshare.core.logging_config import logger
from cabinshare.core.rbac import resolve_permissions, has_capability, check_system_permission
from cabinshare.models.permission import Capability, PermissionSet
from cabinshare.models.role_data import UserRoleData
from cabinshare.repositories.house_repository import HouseRepository
from cabinshare.repositories.user_roles_repository import UserRolesRepository


class PermissionService:
    """Loads role data and the house privacy flag, then resolves permissions"""

    def __init__(self, db: Session, role_store: UserRolesRepository):
        self.db = db
        self.role_store = role_store
        self.house_repo = HouseRepository(db)

    def get_role_data(self, user_id: str) -> UserRoleData:
        return self.role_store.get_role_record(user_id)

    def get_permissions(self, user_id: str, house_id: str | None = None) -> PermissionSet:
        """
        Resolve a user's permissions, optionally within a house.

        Args:
            user_id: Verified caller id
            house_id: House to resolve for; None for system-only checks

        Returns:
            Complete PermissionSet

        Raises:
            RoleFetchFailed: If roles or the house privacy flag cannot be read.
                The resolver is not invoked in that case.
        """
        role_data, hide_finances = self._load(user_id, house_id)
        return resolve_permissions(role_data, house_id, hide_finances)

    def require(
        self,
        user_id: str,
        capability: Capability,
        house_id: str | None = None,
        message: str | None = None,
    ) -> PermissionSet:
        """
        Require a capability to be granted.

        Args:
            user_id: Verified caller id
            capability: Capability to check, e.g. Capability.INVITE_MEMBERS
            house_id: House to resolve for
            message: Optional error message

        Returns:
            The resolved PermissionSet

        Raises:
            ForbiddenException: If the capability is not granted
        """
        role_data, hide_finances = self._load(user_id, house_id)
        if not has_capability(role_data, capability, house_id, hide_finances):
            raise ForbiddenException(
                message or f"Insufficient permissions: '{capability.value}' required"
            )
        return resolve_permissions(role_data, house_id, hide_finances)

    def has_house_access(self, user_id: str, house_id: str) -> bool:
        """True if the user holds any role in the house or may view all houses"""
        role_data = self.role_store.get_role_record(user_id)
        return role_data.house_role(house_id) is not None or check_system_permission(
            role_data.system_role, Capability.VIEW_ALL_HOUSES
        )

    def _load(self, user_id: str, house_id: str | None) -> tuple[UserRoleData, bool]:
        role_data = self.role_store.get_role_record(user_id)
        hide_finances = self._hide_finances(user_id, house_id) if house_id else False
        return role_data, hide_finances

    def _hide_finances(self, user_id: str, house_id: str) -> bool:
        try:
            return self.house_repo.get_hide_finances(house_id)
        except SQLAlchemyError as e:
            logger.error(f"Privacy flag lookup failed for house {house_id}: {e}")
            raise RoleFetchFailed(user_id, f"house {house_id} lookup failed") from e
