from enum import StrEnum


class AttendanceStatus(StrEnum):
    PRESENT = 'PRESENT'
    ABSENT = 'ABSENT'
    EXCUSED = 'EXCUSED'
