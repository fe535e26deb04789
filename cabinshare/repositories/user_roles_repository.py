"""Read-only access to the user_roles store."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from cabinshare.core.cache import TTLCache
from cabinshare.core.exceptions import RoleFetchFailed, InvalidRoleValue, ValidationException
from cabinshare.core.logging_config import logger
from cabinshare.models.role import SystemRole, HouseRole
from cabinshare.models.role_data import RoleGrant, UserRoleData, UserRoleRecord
from cabinshare.models.user_roles import UserRoles


class UserRolesRepository:
    """
    Role store accessor.

    Loads a user's role record and hands the resolver a validated
    UserRoleData snapshot. Never writes; grants and revocations go
    through RoleGrantRepository, which must call invalidate() afterwards.

    Failure policy:
    - No record: default-deny snapshot (REGULAR_USER, no house roles)
    - Store error or timeout: RoleFetchFailed
    - Unknown stored role string: InvalidRoleValue
    """

    def __init__(self, db: Session, cache: TTLCache | None = None):
        self.db = db
        self.cache = cache

    def get_role_record(self, user_id: str) -> UserRoleData:
        """
        Get the role data the resolver needs for a user.

        Args:
            user_id: Verified identity provider user id

        Returns:
            UserRoleData; the default-deny snapshot if no record exists

        Raises:
            ValidationException: If user_id is empty
            RoleFetchFailed: If the store cannot be read
            InvalidRoleValue: If a stored role is not a known role
        """
        self._require_user_id(user_id)

        if self.cache is not None:
            cached = self.cache.get(self._cache_key(user_id))
            if cached is not None:
                logger.debug(f"Role cache hit: {user_id}")
                return cached

        record = self.get_user_roles(user_id)
        role_data = record.to_role_data() if record else UserRoleData()

        if self.cache is not None:
            self.cache.set(self._cache_key(user_id), role_data)
            logger.debug(f"Role cache miss, stored: {user_id}")

        return role_data

    def get_user_roles(self, user_id: str) -> UserRoleRecord | None:
        """
        Get the full role record with grant metadata.

        Args:
            user_id: Identity provider user id

        Returns:
            UserRoleRecord or None if the user has no record

        Raises:
            RoleFetchFailed: If the store cannot be read
            InvalidRoleValue: If a stored role is not a known role
        """
        self._require_user_id(user_id)

        try:
            row = (
                self.db.query(UserRoles)
                .options(selectinload(UserRoles.house_grants))
                .filter(UserRoles.user_id == user_id)
                .first()
            )
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Role fetch failed for user {user_id}: {e}")
            raise RoleFetchFailed(user_id, str(e)) from e

        if row is None:
            return None
        return self._to_record(row)

    def invalidate(self, user_id: str) -> None:
        """Drop any cached role data for a user"""
        if self.cache is not None:
            self.cache.delete(self._cache_key(user_id))

    def _to_record(self, row: UserRoles) -> UserRoleRecord:
        system_role = self._parse(row.user_id, SystemRole, row.system_role, "system_role")
        house_roles = {
            grant.house_id: RoleGrant(
                role=self._parse(row.user_id, HouseRole, grant.role, "house_role"),
                granted_at=grant.granted_at,
                granted_by=grant.granted_by,
            )
            for grant in row.house_grants
        }
        return UserRoleRecord(
            user_id=row.user_id,
            email=row.email or "",
            system_role=system_role,
            house_roles=house_roles,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _parse(user_id: str, enum_cls, value: str | None, field: str):
        # A missing system role is the same as no record: regular user.
        if field == "system_role" and not value:
            return SystemRole.REGULAR_USER
        try:
            return enum_cls(value)
        except ValueError:
            logger.error(
                f"Data integrity: user {user_id} has unknown {field} {value!r}; "
                "denying until corrected"
            )
            raise InvalidRoleValue(user_id, str(value), field)

    @staticmethod
    def _require_user_id(user_id: str) -> None:
        if not user_id or not user_id.strip():
            raise ValidationException("user_id is required")

    @staticmethod
    def _cache_key(user_id: str) -> str:
        return f"user_roles:{user_id}"
