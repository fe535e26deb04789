"""Persisted role records: one user_roles row per user, one grant row per house."""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cabinshare.models.base import Base, TimestampMixin, utcnow
from cabinshare.models.role import SystemRole


class UserRoles(Base, TimestampMixin):
    """
    Role record for a single user, keyed by the identity provider's user id.

    Roles are stored as plain strings and validated when read, so a
    corrupted value surfaces as InvalidRoleValue instead of being coerced.

    A user without a row is a REGULAR_USER with no house roles.
    """

    __tablename__ = "user_roles"

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    system_role: Mapped[str] = mapped_column(
        String(32), nullable=False, default=SystemRole.REGULAR_USER.value
    )

    # Relationships
    house_grants: Mapped[list["HouseRoleGrant"]] = relationship(
        "HouseRoleGrant",
        back_populates="user_roles",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<UserRoles(user_id={self.user_id}, system_role={self.system_role})>"


class HouseRoleGrant(Base):
    """
    Current role of a user in one house.

    Grants are rows rather than a serialized map so that concurrent grants
    to different houses for the same user never overwrite each other.

    Constraints:
    - Unique(user_id, house_id) - at most one current grant per house
    """

    __tablename__ = "house_role_grants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("user_roles.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    house_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    granted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    granted_by: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    user_roles: Mapped["UserRoles"] = relationship("UserRoles", back_populates="house_grants")

    __table_args__ = (
        UniqueConstraint("user_id", "house_id", name="uq_user_house_grant"),
    )

    def __repr__(self) -> str:
        return (
            f"<HouseRoleGrant(user_id={self.user_id}, house_id={self.house_id}, "
            f"role={self.role})>"
        )
