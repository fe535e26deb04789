"""Repository for writing role records and house grants."""

from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cabinshare.models.base import utcnow
from cabinshare.models.role import SystemRole, HouseRole
from cabinshare.models.user_roles import UserRoles, HouseRoleGrant


class RoleGrantRepository:
    """
    Repository for role record mutations.

    House grants are written one row per (user_id, house_id), so a grant
    for one house never rewrites the user's other grants. Writes to the
    same pair are last-writer-wins.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_record(self, user_id: str) -> UserRoles | None:
        """Get the raw role record for a user"""
        return self.db.query(UserRoles).filter(UserRoles.user_id == user_id).first()

    def get_or_create_record(self, user_id: str, email: str | None = None) -> UserRoles:
        """
        Get the role record for a user, creating a REGULAR_USER record if missing.

        Args:
            user_id: Identity provider user id
            email: Email to store; only fills an empty value on existing records

        Returns:
            UserRoles row (flushed, not committed)
        """
        record = self.get_record(user_id)
        if record is None:
            record = UserRoles(
                user_id=user_id,
                email=email or "",
                system_role=SystemRole.REGULAR_USER.value,
            )
            self.db.add(record)
            self.db.flush()
        elif email and not record.email:
            record.email = email
        return record

    def get_grant(self, user_id: str, house_id: str) -> HouseRoleGrant | None:
        """Get the current grant for a user in a house"""
        return (
            self.db.query(HouseRoleGrant)
            .filter(
                HouseRoleGrant.user_id == user_id,
                HouseRoleGrant.house_id == house_id,
            )
            .first()
        )

    def get_house_grants(self, house_id: str) -> list[HouseRoleGrant]:
        """
        Get all grants for a house.

        Args:
            house_id: House ID

        Returns:
            List of HouseRoleGrant objects ordered by grant time
        """
        return (
            self.db.query(HouseRoleGrant)
            .filter(HouseRoleGrant.house_id == house_id)
            .order_by(HouseRoleGrant.granted_at)
            .all()
        )

    def upsert_grant(
        self,
        user_id: str,
        house_id: str,
        role: HouseRole,
        granted_by: str,
        email: str | None = None,
    ) -> HouseRoleGrant:
        """
        Set a user's role in a house, replacing any previous grant.

        Creates the user's role record if it does not exist yet.

        Args:
            user_id: User receiving the role
            house_id: House the role applies to
            role: Role to grant
            granted_by: User id of the granter ("system" for migrations)
            email: Optional email for a newly created record

        Returns:
            The committed HouseRoleGrant
        """
        try:
            with self.db.begin_nested():
                grant = self._stage_grant(user_id, house_id, role, granted_by, email)
        except IntegrityError:
            # Another writer created the record or grant first; only the
            # savepoint is undone, other pending work in the session is kept.
            grant = self._stage_grant(user_id, house_id, role, granted_by, email)

        self.db.commit()
        self.db.refresh(grant)
        return grant

    def _stage_grant(
        self,
        user_id: str,
        house_id: str,
        role: HouseRole,
        granted_by: str,
        email: str | None,
    ) -> HouseRoleGrant:
        now = utcnow()
        record = self.get_or_create_record(user_id, email)
        grant = self.get_grant(user_id, house_id)

        if grant is None:
            grant = HouseRoleGrant(
                user_id=user_id,
                house_id=house_id,
                role=role.value,
                granted_at=now,
                granted_by=granted_by,
            )
            self.db.add(grant)
        else:
            self._replace(grant, role, granted_by, now)
        record.updated_at = now

        self.db.flush()
        return grant

    def delete_grant(self, user_id: str, house_id: str) -> bool:
        """
        Remove a user's grant for a house.

        Returns:
            True if removed, False if no grant existed
        """
        grant = self.get_grant(user_id, house_id)
        if grant is None:
            return False

        self.db.delete(grant)
        record = self.get_record(user_id)
        if record is not None:
            record.updated_at = utcnow()
        self.db.commit()
        return True

    def set_system_role(
        self, user_id: str, system_role: SystemRole, email: str | None = None
    ) -> UserRoles:
        """
        Set a user's system role, keeping their house grants.

        Args:
            user_id: Identity provider user id
            system_role: New system role
            email: Optional email for a newly created record

        Returns:
            Updated UserRoles row
        """
        record = self.get_or_create_record(user_id, email)
        record.system_role = system_role.value
        record.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(record)
        return record

    @staticmethod
    def _replace(grant: HouseRoleGrant, role: HouseRole, granted_by: str, now: datetime) -> None:
        grant.role = role.value
        grant.granted_by = granted_by
        grant.granted_at = now
