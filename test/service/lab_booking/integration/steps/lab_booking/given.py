from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from fastapi.testclient import TestClient
from pytest_bdd import given, parsers

from src.service.lab_booking.domain.enum.user_role import UserRole
from test.shared.utils import assert_response_status, auth_headers


def _sign_in(
    client: TestClient, booking_state: Dict[str, Any], user_id: str, is_banned: bool = False
) -> None:
    headers = auth_headers(user_id, UserRole.STUDENT, is_banned=is_banned)
    response = client.put(
        '/api/user/me',
        json={'email': f'{user_id}@lab.local', 'first_name': user_id},
        headers=headers,
    )
    assert_response_status(response, 200)
    booking_state['headers'] = headers


@given(parsers.parse('an admin has created the "{name}" lab with the default layout'))
def create_lab(client: TestClient, booking_state: Dict[str, Any], name: str):
    response = client.post(
        '/api/lab', json={'name': name}, headers=auth_headers('admin_1', UserRole.ADMIN)
    )
    assert_response_status(response, 201)
    booking_state['lab_id'] = response.json()['id']


@given(parsers.parse('teacher "{user_id}" has opened a session tomorrow in that lab'))
def open_session(client: TestClient, booking_state: Dict[str, Any], user_id: str):
    headers = auth_headers(user_id, UserRole.TEACHER)
    client.put('/api/user/me', json={'email': f'{user_id}@lab.local'}, headers=headers)
    start_at = (datetime.now(timezone.utc) + timedelta(days=1)).replace(microsecond=0)
    response = client.post(
        '/api/session',
        json={
            'lab_id': booking_state['lab_id'],
            'start_at': start_at.isoformat(),
            'end_at': (start_at + timedelta(minutes=55)).isoformat(),
        },
        headers=headers,
    )
    assert_response_status(response, 201)
    booking_state['session_id'] = response.json()['id']
    booking_state['teacher_headers'] = headers


@given(parsers.parse('student "{user_id}" is signed in'))
def student_signed_in(client: TestClient, booking_state: Dict[str, Any], user_id: str):
    _sign_in(client, booking_state, user_id)


@given(parsers.parse('student "{user_id}" is signed in with a ban'))
def banned_student_signed_in(client: TestClient, booking_state: Dict[str, Any], user_id: str):
    _sign_in(client, booking_state, user_id, is_banned=True)


@given(parsers.parse('student "{user_id}" has booked seat "{seat_name}"'))
def student_has_booked(
    client: TestClient, booking_state: Dict[str, Any], user_id: str, seat_name: str
):
    _sign_in(client, booking_state, user_id)
    response = client.post(
        f'/api/session/{booking_state["session_id"]}/booking',
        json={'lab_id': booking_state['lab_id'], 'seat_name': seat_name},
        headers=booking_state['headers'],
    )
    assert_response_status(response, 201)
