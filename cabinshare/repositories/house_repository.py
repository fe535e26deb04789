"""Repository for House model operations."""

from sqlalchemy.orm import Session
from cabinshare.models.house import House


class HouseRepository:
    """Repository for House model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, house_id: str) -> House | None:
        """
        Get house by ID.

        Args:
            house_id: House ID

        Returns:
            House object or None if not found
        """
        return self.db.query(House).filter(House.id == house_id).first()

    def get_hide_finances(self, house_id: str) -> bool:
        """Privacy flag for a house; unknown houses read as False"""
        house = self.get_by_id(house_id)
        return bool(house and house.hide_finances)

    def create_no_commit(self, house: House) -> House:
        """Create house without committing (for atomic ops)"""
        self.db.add(house)
        self.db.flush()
        return house

    def update(self, house: House) -> House:
        """
        Update an existing house.

        Args:
            house: House object with updated fields

        Returns:
            Updated House object
        """
        self.db.commit()
        self.db.refresh(house)
        return house
