from datetime import datetime
from typing import Optional

import attrs

from src.service.lab_booking.domain.enum.user_role import UserRole


@attrs.define
class LabUser:
    """Local mirror of an identity-provider account."""

    id: str
    email: str = ''
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole = UserRole.STUDENT
    is_banned: bool = False
    banned_at: Optional[datetime] = None
    banned_by: Optional[str] = None
    ban_reason: Optional[str] = None

    @property
    def display_name(self) -> str:
        full = ' '.join(part for part in (self.first_name, self.last_name) if part)
        return full or self.email or self.id

    def ban(self, *, by: str, reason: Optional[str], at: datetime) -> 'LabUser':
        return attrs.evolve(
            self, is_banned=True, banned_at=at, banned_by=by, ban_reason=reason or None
        )

    def unban(self) -> 'LabUser':
        return attrs.evolve(
            self, is_banned=False, banned_at=None, banned_by=None, ban_reason=None
        )
