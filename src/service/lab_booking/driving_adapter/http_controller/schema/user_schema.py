from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from src.service.lab_booking.domain.enum.user_role import UserRole


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: str
    role: UserRole
    is_banned: bool = False
    banned_at: Optional[datetime] = None
    banned_by: Optional[str] = None
    ban_reason: Optional[str] = None


class AccountSyncRequest(BaseModel):
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    class Config:
        json_schema_extra = {
            'example': {'email': 'ada@example.edu', 'first_name': 'Ada', 'last_name': 'Lovelace'}
        }


class RoleChangeRequest(BaseModel):
    user_id: str
    role: UserRole


class RolesUpdateRequest(BaseModel):
    changes: List[RoleChangeRequest]
