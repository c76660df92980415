"""
Caller Authentication (identity provider tokens)
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import HTTPException, status
import jwt

from src.platform.config.core_setting import settings
from src.service.lab_booking.domain.enum.user_role import UserRole
from src.service.lab_booking.domain.value_object.caller import Caller


class JwtAuth:
    """
    Verifies the signed token issued by the identity provider.

    Claims: ``sub`` (user id), ``role`` (STUDENT/TEACHER/ADMIN, default
    STUDENT) and optional ``is_banned``.
    """

    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_jwt_token(
        self,
        *,
        user_id: str,
        role: UserRole = UserRole.STUDENT,
        is_banned: bool = False,
        email: Optional[str] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': user_id,
            'exp': now + timedelta(minutes=self.token_expire_minutes),
            'iat': now,
            'role': role.value,
            'is_banned': is_banned,
        }
        if email:
            payload['email'] = email

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')

    def get_caller_from_jwt(self, token: Optional[str]) -> Caller:
        if not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail='Not authenticated'
            )

        payload = self.decode_jwt_token(token)

        user_id = payload.get('sub')
        if not user_id or not isinstance(user_id, str):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')

        try:
            role = UserRole(str(payload.get('role') or UserRole.STUDENT.value).upper())
        except ValueError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid role')

        return Caller(user_id=user_id, role=role, is_banned=bool(payload.get('is_banned')))
