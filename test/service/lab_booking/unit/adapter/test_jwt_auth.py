from fastapi import HTTPException
import jwt
import pytest

from src.platform.config.core_setting import settings
from src.service.lab_booking.domain.enum.user_role import UserRole
from src.service.lab_booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@pytest.fixture
def jwt_auth() -> JwtAuth:
    return JwtAuth()


@pytest.mark.unit
class TestJwtAuth:
    def test_round_trip_claims(self, jwt_auth):
        token = jwt_auth.create_jwt_token(
            user_id='teacher_1', role=UserRole.TEACHER, is_banned=False
        )

        caller = jwt_auth.get_caller_from_jwt(token)

        assert caller.user_id == 'teacher_1'
        assert caller.role == UserRole.TEACHER
        assert caller.is_staff
        assert not caller.is_banned

    def test_role_defaults_to_student(self, jwt_auth):
        token = jwt.encode(
            {'sub': 'u1'}, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM
        )

        caller = jwt_auth.get_caller_from_jwt(token)

        assert caller.role == UserRole.STUDENT

    def test_lowercase_role_is_accepted(self, jwt_auth):
        token = jwt.encode(
            {'sub': 'u1', 'role': 'admin', 'is_banned': True},
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )

        caller = jwt_auth.get_caller_from_jwt(token)

        assert caller.is_admin
        assert caller.is_banned

    @pytest.mark.parametrize(
        'token',
        [None, '', 'not-a-token'],
    )
    def test_missing_or_garbled_token(self, jwt_auth, token):
        with pytest.raises(HTTPException) as exc_info:
            jwt_auth.get_caller_from_jwt(token)
        assert exc_info.value.status_code == 401

    def test_wrong_signature(self, jwt_auth):
        token = jwt.encode({'sub': 'u1'}, 'another-secret', algorithm=settings.ALGORITHM)

        with pytest.raises(HTTPException):
            jwt_auth.get_caller_from_jwt(token)

    def test_unknown_role(self, jwt_auth):
        token = jwt.encode(
            {'sub': 'u1', 'role': 'JANITOR'},
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(HTTPException) as exc_info:
            jwt_auth.get_caller_from_jwt(token)
        assert exc_info.value.detail == 'Invalid role'
