from typing import Dict

from src.service.lab_booking.domain.enum.user_role import UserRole
from src.service.lab_booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


def auth_headers(
    user_id: str, role: UserRole = UserRole.STUDENT, is_banned: bool = False
) -> Dict[str, str]:
    """Bearer header for a token minted with the suite's secret."""
    token = JwtAuth().create_jwt_token(user_id=user_id, role=role, is_banned=is_banned)
    return {'Authorization': f'Bearer {token}'}


def assert_response_status(response, expected_status: int, message: str | None = None):
    response_text = getattr(response, 'text', getattr(response, 'content', 'N/A'))
    assert response.status_code == expected_status, (
        message or f'Expected {expected_status}, got {response.status_code}: {response_text}'
    )
