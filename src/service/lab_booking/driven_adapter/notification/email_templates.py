"""
Plain-HTML e-mail bodies for booking lifecycle messages.

Dates are rendered in the lab's local timezone (``settings.TIMEZONE``).
"""

from datetime import datetime
from html import escape
from typing import Iterable
import zoneinfo

import attrs

from src.platform.config.core_setting import settings
from src.service.lab_booking.app.dto.notification_dto import (
    BookingChange,
    BookingNotice,
    EquipmentLine,
    StudentReminder,
    SummaryStudent,
    TeacherSummary,
)
from src.service.lab_booking.domain.enum.booking_status import BookingStatus


FOOTER = 'Lab Reservation System'
_PRIMARY = '#003087'
_DANGER = '#ef4444'


@attrs.frozen
class RenderedEmail:
    subject: str
    html: str
    text: str


def _local(value: datetime) -> datetime:
    return value.astimezone(zoneinfo.ZoneInfo(settings.TIMEZONE))


def format_date(value: datetime) -> str:
    # e.g. "Monday, 3 March 2025"
    local = _local(value)
    return f'{local.strftime("%A")}, {local.day} {local.strftime("%B %Y")}'


def format_time(value: datetime) -> str:
    return _local(value).strftime('%H:%M')


def _equipment_label(line: EquipmentLine) -> str:
    unit = ' ml' if line.unit_type == 'ML' else ''
    return f'{line.name} (x{line.amount}{unit})'


def _render(
    *,
    title: str,
    greeting: str,
    paragraphs: Iterable[str],
    details: dict[str, str],
    items: Iterable[str] = (),
    items_title: str = '',
    color: str = _PRIMARY,
) -> tuple[str, str]:
    paragraphs, items = list(paragraphs), list(items)
    detail_html = ''.join(
        f'<p><strong>{escape(key)}:</strong> {escape(value)}</p>' for key, value in details.items()
    )
    items_html = (
        f'<p><strong>{escape(items_title)}:</strong></p><ul>'
        + ''.join(f'<li>{escape(item)}</li>' for item in items)
        + '</ul>'
        if items
        else ''
    )
    html = (
        '<!DOCTYPE html><html><body style="font-family: Arial, sans-serif; color: #333;">'
        '<div style="max-width: 600px; margin: 0 auto; padding: 20px;">'
        f'<div style="background: {color}; color: white; padding: 20px; text-align: center;">'
        f'<h1>{escape(title)}</h1></div>'
        f'<div style="background: #f9f9f9; padding: 20px;"><p>{escape(greeting)}</p>'
        + ''.join(f'<p>{escape(p)}</p>' for p in paragraphs)
        + f'<div style="background: white; padding: 15px;">{detail_html}{items_html}</div>'
        f'<p style="text-align: center; color: #666; font-size: 12px;">{FOOTER}</p>'
        '</div></div></body></html>'
    )
    text = '\n'.join(
        [greeting, '', *paragraphs, '']
        + [f'{key}: {value}' for key, value in details.items()]
        + ([f'{items_title}:'] + [f'  - {item}' for item in items] if items else [])
        + ['', FOOTER]
    )
    return html, text


def _session_details(lab_name: str, start_at: datetime, end_at: datetime) -> dict[str, str]:
    return {
        'Lab': lab_name,
        'Date': format_date(start_at),
        'Time': f'{format_time(start_at)} - {format_time(end_at)}',
    }


def booking_confirmation(notice: BookingNotice) -> RenderedEmail:
    is_pending = notice.status == BookingStatus.PENDING_APPROVAL
    html, text = _render(
        title='Booking Pending Approval' if is_pending else 'Booking Confirmed',
        greeting=f'Hi {notice.student_name},',
        paragraphs=[
            'Your booking was received and is waiting for a teacher to approve it.'
            if is_pending
            else 'Your lab seat is booked.'
        ],
        details={
            **_session_details(notice.lab_name, notice.start_at, notice.end_at),
            'Seat': notice.seat_name,
            **({'Notes': notice.notes} if notice.notes else {}),
        },
        items=[_equipment_label(line) for line in notice.equipment],
        items_title='Equipment Reserved',
    )
    prefix = 'Pending: ' if is_pending else ''
    return RenderedEmail(
        subject=f'{prefix}Lab Booking - {notice.lab_name} on {format_date(notice.start_at)}',
        html=html,
        text=text,
    )


def booking_status_change(notice: BookingNotice, change: BookingChange) -> RenderedEmail:
    status_text = change.value.lower()
    html, text = _render(
        title=f'Booking {status_text.capitalize()}',
        greeting=f'Hi {notice.student_name},',
        paragraphs=[f'Your lab booking has been {status_text}.'],
        details={
            **_session_details(notice.lab_name, notice.start_at, notice.end_at),
            'Seat': notice.seat_name,
        },
        color=_PRIMARY if change == BookingChange.APPROVED else _DANGER,
    )
    return RenderedEmail(
        subject=(
            f'Lab Booking {status_text}: {notice.lab_name} on {format_date(notice.start_at)}'
        ),
        html=html,
        text=text,
    )


def teacher_request(notice: BookingNotice) -> RenderedEmail:
    html, text = _render(
        title='Booking Approval Needed',
        greeting=f'Hi {notice.teacher_name or "there"},',
        paragraphs=[f'{notice.student_name} has requested a booking.'],
        details={
            **_session_details(notice.lab_name, notice.start_at, notice.end_at),
            'Seat': notice.seat_name,
        },
    )
    return RenderedEmail(
        subject=f'Approval needed: {notice.lab_name} booking request', html=html, text=text
    )


def student_reminder(reminder: StudentReminder) -> RenderedEmail:
    lead_minutes = settings.STUDENT_REMINDER_LEAD_MINUTES
    lead = f'{lead_minutes // 60} hours' if lead_minutes % 60 == 0 else f'{lead_minutes} minutes'
    html, text = _render(
        title='Lab Session Reminder',
        greeting=f'Hi {reminder.student_name},',
        paragraphs=[
            f'This is a reminder that your lab session is starting in {lead}.',
            'Please arrive on time and bring any necessary materials.',
        ],
        details={
            **_session_details(reminder.lab_name, reminder.start_at, reminder.end_at),
            'Your Seat': reminder.seat_name,
        },
        items=[_equipment_label(line) for line in reminder.equipment],
        items_title='Equipment Reserved',
    )
    return RenderedEmail(
        subject=(
            f'Reminder: Lab Session in {reminder.lab_name} - {format_time(reminder.start_at)}'
        ),
        html=html,
        text=text,
    )


def _summary_line(student: SummaryStudent) -> str:
    line = f'{student.name} - seat {student.seat_name}'
    if student.equipment:
        line += f' ({", ".join(_equipment_label(item) for item in student.equipment)})'
    if student.notes:
        line += f' - notes: {student.notes}'
    return line


def teacher_summary(summary: TeacherSummary) -> RenderedEmail:
    students = [_summary_line(student) for student in summary.students]
    totals = summary.total_equipment
    html, text = _render(
        title='Session Starting Soon',
        greeting=f'Hi {summary.teacher_name},',
        paragraphs=[
            f'Your session starts in {settings.TEACHER_REMINDER_LEAD_MINUTES} minutes '
            f'with {len(summary.students)} students booked.',
            *(
                ['Total equipment needed: ' + ', '.join(_equipment_label(line) for line in totals)]
                if totals
                else []
            ),
        ],
        details=_session_details(summary.lab_name, summary.start_at, summary.end_at),
        items=students,
        items_title='Students',
    )
    return RenderedEmail(
        subject=(
            f'Starting Soon: {summary.lab_name} Session ({len(summary.students)} students)'
        ),
        html=html,
        text=text,
    )
