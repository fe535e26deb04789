"""In-memory role snapshots handed from the role store to the resolver."""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from cabinshare.models.role import SystemRole, HouseRole


@dataclass(frozen=True)
class RoleGrant:
    """When and by whom a house role was assigned"""

    role: HouseRole
    granted_at: datetime
    granted_by: str


@dataclass(frozen=True)
class UserRoleRecord:
    """
    Full role record with grant metadata.

    Attributes:
        user_id: Identity provider user id
        email: Email captured at grant time (may be empty)
        system_role: Global role
        house_roles: house_id -> current RoleGrant
        created_at: When the record was first written
        updated_at: Last grant / revoke / system role change
    """

    user_id: str
    email: str
    system_role: SystemRole
    house_roles: Mapping[str, RoleGrant]
    created_at: datetime
    updated_at: datetime

    def to_role_data(self) -> "UserRoleData":
        """Strip grant metadata, keeping only the role per house"""
        return UserRoleData(
            system_role=self.system_role,
            house_roles={house_id: grant.role for house_id, grant in self.house_roles.items()},
        )


@dataclass(frozen=True)
class UserRoleData:
    """
    Role data consumed by the permission resolver.

    Treated as an immutable snapshot for the duration of one resolution.
    The default instance is the default-deny state for users without a
    stored record.
    """

    system_role: SystemRole = SystemRole.REGULAR_USER
    house_roles: Mapping[str, HouseRole] = field(default_factory=dict)

    def __post_init__(self):
        # Enum constructors raise ValueError for unknown role strings.
        object.__setattr__(self, "system_role", SystemRole(self.system_role))
        object.__setattr__(
            self,
            "house_roles",
            MappingProxyType(
                {house_id: HouseRole(role) for house_id, role in self.house_roles.items()}
            ),
        )

    def house_role(self, house_id: str | None) -> HouseRole | None:
        """Role for house_id, or None when no house is given or no grant exists"""
        if house_id is None:
            return None
        return self.house_roles.get(house_id)
