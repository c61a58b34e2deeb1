"""Engineer repository."""

from typing import List, Optional

from ..models import Engineer
from ..base_repository import BaseRepository
from utils.names import find_by_name


class EngineerRepository(BaseRepository[Engineer]):
    """Repository for Engineer operations."""

    model = Engineer

    def create(self, name: str, lead_user_id: Optional[int] = None) -> Engineer:
        return super().create(name=name, lead_user_id=lead_user_id)

    def get_all(self) -> List[Engineer]:
        return self.session.query(Engineer).order_by(Engineer.name).all()

    def find_by_name(self, name: str) -> Optional[Engineer]:
        """Case-insensitive name lookup across all engineers (active or not)."""
        return find_by_name(self.get_all(), name)

    def get_by_lead(self, lead_user_id: int) -> List[Engineer]:
        return (
            self.session.query(Engineer)
            .filter(Engineer.lead_user_id == lead_user_id)
            .order_by(Engineer.name)
            .all()
        )
