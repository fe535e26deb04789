from dataclasses import dataclass, field
from typing import Iterable

from sqlalchemy.orm import Session

from cabinshare.core.exceptions import NotFoundException
from cabinshare.core.logging_config import logger
from cabinshare.models.role import SystemRole, HouseRole
from cabinshare.models.user_roles import UserRoles, HouseRoleGrant
from cabinshare.repositories.role_grant_repository import RoleGrantRepository
from cabinshare.repositories.user_roles_repository import UserRolesRepository

SYSTEM_GRANTER = "system"


@dataclass
class LegacyHouse:
    """
    House ownership as stored before per-house roles existed.

    Attributes:
        id: House ID
        manager_id: User who managed the house; becomes OWNER
        owner_ids: Co-owners; every one except the manager becomes MEMBER
    """

    id: str
    manager_id: str | None = None
    owner_ids: list[str] = field(default_factory=list)


class RoleService:
    """
    Administrative role mutations.

    Callers are responsible for authorising the actor; this layer only
    writes and keeps the role store cache coherent.
    """

    def __init__(self, db: Session, role_store: UserRolesRepository):
        self.db = db
        self.role_store = role_store
        self.grant_repo = RoleGrantRepository(db)

    def grant_house_role(
        self,
        user_id: str,
        house_id: str,
        role: HouseRole,
        granted_by: str,
        email: str | None = None,
    ) -> HouseRoleGrant:
        """
        Grant (or replace) a user's role in a house.

        Args:
            user_id: User receiving the role
            house_id: House ID
            role: Role to grant
            granted_by: Granting user id, or "system"
            email: Stored on the role record if it has none yet

        Returns:
            The current grant
        """
        grant = self.grant_repo.upsert_grant(user_id, house_id, role, granted_by, email)
        self.role_store.invalidate(user_id)
        logger.info(
            f"Granted {role.value} on house {house_id} to user {user_id} (by {granted_by})"
        )
        return grant

    def revoke_house_role(self, user_id: str, house_id: str) -> None:
        """
        Remove a user's role in a house.

        Raises:
            NotFoundException: If the user holds no role in the house
        """
        if not self.grant_repo.delete_grant(user_id, house_id):
            raise NotFoundException("Member not found in this house")
        self.role_store.invalidate(user_id)
        logger.info(f"Revoked role on house {house_id} from user {user_id}")

    def set_system_role(
        self, user_id: str, system_role: SystemRole, email: str | None = None
    ) -> UserRoles:
        """Set a user's system role (e.g. promotion to SUPER_ADMIN)"""
        record = self.grant_repo.set_system_role(user_id, system_role, email)
        self.role_store.invalidate(user_id)
        logger.info(f"Set system role of user {user_id} to {system_role.value}")
        return record

    def get_grant(self, user_id: str, house_id: str) -> HouseRoleGrant | None:
        return self.grant_repo.get_grant(user_id, house_id)

    def get_house_grants(self, house_id: str) -> list[HouseRoleGrant]:
        return self.grant_repo.get_house_grants(house_id)

    def backfill_from_houses(self, houses: Iterable[LegacyHouse]) -> dict[str, int]:
        """
        Create house grants from legacy ownership lists.

        The manager of each house becomes OWNER (granted by "system"); every
        other listed owner becomes MEMBER, granted by the manager. Existing
        grants for the same house are replaced.

        Args:
            houses: Legacy house ownership data

        Returns:
            Counts of grants written: {"owners": n, "members": m}
        """
        owners = 0
        members = 0

        for house in houses:
            if house.manager_id:
                self.grant_house_role(house.manager_id, house.id, HouseRole.OWNER, SYSTEM_GRANTER)
                owners += 1

            for owner_id in house.owner_ids:
                if owner_id == house.manager_id:
                    continue
                self.grant_house_role(
                    owner_id,
                    house.id,
                    HouseRole.MEMBER,
                    house.manager_id or SYSTEM_GRANTER,
                )
                members += 1

        logger.info(f"Role backfill complete: {owners} owners, {members} members")
        return {"owners": owners, "members": members}
