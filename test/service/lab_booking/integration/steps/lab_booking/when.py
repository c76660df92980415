from typing import Any, Dict

from fastapi.testclient import TestClient
from pytest_bdd import parsers, when


@when(parsers.parse('they book seat "{seat_name}"'))
def book_seat(client: TestClient, booking_state: Dict[str, Any], seat_name: str):
    response = client.post(
        f'/api/session/{booking_state["session_id"]}/booking',
        json={'lab_id': booking_state['lab_id'], 'seat_name': seat_name},
        headers=booking_state['headers'],
    )
    booking_state['response'] = response
    if response.status_code == 201:
        booking_state['booking'] = response.json()


@when(parsers.parse('they release seat "{seat_name}"'))
def release_seat(client: TestClient, booking_state: Dict[str, Any], seat_name: str):
    booking_state['response'] = client.post(
        f'/api/session/{booking_state["session_id"]}/booking/release',
        json={'lab_id': booking_state['lab_id'], 'seat_name': seat_name},
        headers=booking_state['headers'],
    )


@when('the teacher approves the booking')
def approve_booking(client: TestClient, booking_state: Dict[str, Any]):
    response = client.post(
        f'/api/booking/{booking_state["booking"]["id"]}/approve',
        headers=booking_state['teacher_headers'],
    )
    booking_state['response'] = response
    if response.status_code == 200:
        booking_state['booking'] = response.json()
