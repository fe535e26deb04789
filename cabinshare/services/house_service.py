from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cabinshare.core.exceptions import (
    NotFoundException,
    ForbiddenException,
    ValidationException,
)
from cabinshare.core.logging_config import logger
from cabinshare.models.current_user import CurrentUser
from cabinshare.models.permission import Capability
from cabinshare.models.house import House
from cabinshare.models.role import HouseRole
from cabinshare.models.user_roles import HouseRoleGrant
from cabinshare.repositories.house_repository import HouseRepository
from cabinshare.repositories.user_roles_repository import UserRolesRepository
from cabinshare.schemas.house_schemas import (
    HouseCreate,
    HousePrivacyUpdate,
    HouseInviteRequest,
    HouseRoleUpdate,
)
from cabinshare.services.permission_service import PermissionService
from cabinshare.services.role_service import RoleService


class HouseService:
    """Service layer for houses and their membership, gated by resolved permissions"""

    def __init__(self, db: Session, role_store: UserRolesRepository):
        self.db = db
        self.house_repo = HouseRepository(db)
        self.permissions = PermissionService(db, role_store)
        self.roles = RoleService(db, role_store)

    def create_house(self, data: HouseCreate, user: CurrentUser) -> House:
        """
        Create a house; the creator becomes its OWNER.

        The house row and the owner grant are committed together; if the
        grant cannot be written, neither is kept.

        Args:
            data: House name and privacy flag
            user: Authenticated caller

        Returns:
            Created house
        """
        house = House(name=data.name, hide_finances=data.hide_finances)
        house = self.house_repo.create_no_commit(house)
        try:
            self.roles.grant_house_role(
                user.user_id, house.id, HouseRole.OWNER, granted_by=user.user_id, email=user.email
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"House creation by user {user.user_id} rolled back: {e}")
            raise
        self.db.refresh(house)
        return house

    def get_house(self, house_id: str, user: CurrentUser) -> House:
        """
        Get house details.

        Raises:
            ForbiddenException: If the caller has no role in the house and
                cannot view all houses
            NotFoundException: If the house does not exist
        """
        if not self.permissions.has_house_access(user.user_id, house_id):
            raise ForbiddenException("You do not have access to this house")
        return self._get_or_404(house_id)

    def update_privacy(
        self, house_id: str, update: HousePrivacyUpdate, user: CurrentUser
    ) -> House:
        """
        Set the house's hide_finances flag (requires can_edit_house_settings).

        Raises:
            ForbiddenException: If the caller cannot edit house settings
            NotFoundException: If the house does not exist
        """
        self.permissions.require(
            user.user_id,
            Capability.EDIT_SETTINGS,
            house_id,
            "Only owners and admins can change house settings",
        )
        house = self._get_or_404(house_id)
        house.hide_finances = update.hide_finances
        return self.house_repo.update(house)

    def get_members(self, house_id: str, user: CurrentUser) -> list[HouseRoleGrant]:
        """List all current grants for a house"""
        if not self.permissions.has_house_access(user.user_id, house_id):
            raise ForbiddenException("You do not have access to this house")
        self._get_or_404(house_id)
        return self.roles.get_house_grants(house_id)

    def invite_member(
        self, house_id: str, invite_request: HouseInviteRequest, user: CurrentUser
    ) -> HouseRoleGrant:
        """
        Add a user to a house (requires can_invite_members).

        Args:
            house_id: House ID
            invite_request: Invitee id, role and optional email
            user: Authenticated caller

        Returns:
            Created grant

        Raises:
            ForbiddenException: If the caller cannot invite, or invites an
                OWNER without can_transfer_ownership
            ValidationException: If the user already holds a role in the house
        """
        permissions = self.permissions.require(
            user.user_id,
            Capability.INVITE_MEMBERS,
            house_id,
            "Only admins and owners can invite members",
        )
        self._get_or_404(house_id)

        # ADMINs cannot invite as OWNER
        if invite_request.role == HouseRole.OWNER and not permissions.can_transfer_ownership:
            raise ForbiddenException("Only owner can invite other owners")

        existing = self.roles.get_grant(invite_request.user_id, house_id)
        if existing:
            raise ValidationException(f"User {invite_request.user_id} is already a member")

        return self.roles.grant_house_role(
            invite_request.user_id,
            house_id,
            invite_request.role,
            granted_by=user.user_id,
            email=invite_request.email,
        )

    def update_member_role(
        self, house_id: str, member_id: str, role_update: HouseRoleUpdate, user: CurrentUser
    ) -> HouseRoleGrant:
        """
        Change a member's role (requires can_transfer_ownership).

        Raises:
            ForbiddenException: If caller is not an owner, changes their own role,
                or targets another owner
            NotFoundException: If the member holds no role in the house
        """
        self.permissions.require(
            user.user_id,
            Capability.TRANSFER_OWNERSHIP,
            house_id,
            "Only owner can change member roles",
        )

        existing = self.roles.get_grant(member_id, house_id)
        if not existing:
            raise NotFoundException("Member not found in this house")

        # Cannot modify self (check first for better error message)
        if member_id == user.user_id:
            raise ForbiddenException("Cannot change your own role")

        # Cannot change OWNER role
        if existing.role == HouseRole.OWNER.value:
            raise ForbiddenException("Cannot change owner's role")

        return self.roles.grant_house_role(
            member_id, house_id, role_update.role, granted_by=user.user_id
        )

    def remove_member(self, house_id: str, member_id: str, user: CurrentUser) -> None:
        """
        Remove a member from a house (requires can_remove_members).

        Raises:
            ForbiddenException: If the caller cannot remove members, removes
                themselves, or targets an owner
            NotFoundException: If the member holds no role in the house
        """
        self.permissions.require(
            user.user_id,
            Capability.REMOVE_MEMBERS,
            house_id,
            "Only owners can remove members",
        )

        existing = self.roles.get_grant(member_id, house_id)
        if not existing:
            raise NotFoundException("Member not found in this house")

        # Cannot remove self (check first for better error message)
        if member_id == user.user_id:
            raise ForbiddenException("Cannot remove yourself from house")

        if existing.role == HouseRole.OWNER.value:
            raise ForbiddenException("Cannot remove owner from house")

        self.roles.revoke_house_role(member_id, house_id)

    def _get_or_404(self, house_id: str) -> House:
        house = self.house_repo.get_by_id(house_id)
        if not house:
            raise NotFoundException("House not found")
        return house
