"""House model: the resource that house roles are scoped to."""

import uuid

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from cabinshare.models.base import Base, TimestampMixin


class House(Base, TimestampMixin):
    """
    A shared vacation home.

    Only the fields the access-control layer reads are modelled here.
    Bookings, tasks and finances live in their own services.

    hide_finances is the house's privacy flag: when set, plain members
    lose finance visibility. Owners and admins are unaffected.
    """

    __tablename__ = "houses"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    hide_finances: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<House(id={self.id}, name='{self.name}')>"
