import attrs

from src.platform.exception.exceptions import ForbiddenError
from src.service.lab_booking.domain.enum.user_role import UserRole


@attrs.frozen
class Caller:
    """Verified identity of whoever issued the request."""

    user_id: str
    role: UserRole = UserRole.STUDENT
    is_banned: bool = False

    @property
    def is_staff(self) -> bool:
        return self.role.is_staff

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def ensure_staff(self, action: str) -> None:
        if not self.is_staff:
            raise ForbiddenError(f'Only teachers or admins can {action}')

    def ensure_admin(self, action: str) -> None:
        if not self.is_admin:
            raise ForbiddenError(f'Only admins can {action}')

    def ensure_owner_or_admin(self, owner_id: str, action: str) -> None:
        if self.user_id != owner_id and not self.is_admin:
            raise ForbiddenError(f'Only the creator or an admin can {action}')
