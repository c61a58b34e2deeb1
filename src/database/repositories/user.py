"""User repository."""

from typing import List, Optional

from ..models import User
from ..base_repository import BaseRepository
from utils.names import find_by_name


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User

    def create(
        self,
        name: str,
        email: Optional[str] = None,
        is_admin: bool = False,
        is_coach: bool = False,
        is_lead: bool = False,
        is_manager: bool = False,
    ) -> User:
        return super().create(
            name=name,
            email=email,
            is_admin=is_admin,
            is_coach=is_coach,
            is_lead=is_lead,
            is_manager=is_manager,
        )

    def get_active(self) -> List[User]:
        """All users that are not soft-deleted, oldest first."""
        return (
            self.session.query(User)
            .filter(User.deleted_at.is_(None))
            .order_by(User.id)
            .all()
        )

    def get_active_coaches(self) -> List[User]:
        return [user for user in self.get_active() if user.is_coach]

    def find_coach_by_name(self, name: Optional[str]) -> Optional[User]:
        """Case-insensitive lookup among active coach-role users."""
        if not name:
            return None
        return find_by_name(self.get_active_coaches(), name)

    def get_active_by_id(self, user_id: int) -> Optional[User]:
        return (
            self.session.query(User)
            .filter(User.id == user_id, User.deleted_at.is_(None))
            .first()
        )
