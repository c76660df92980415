from enum import Enum


class UserRole(str, Enum):
    STUDENT = 'STUDENT'
    TEACHER = 'TEACHER'
    ADMIN = 'ADMIN'

    @property
    def is_staff(self) -> bool:
        return self in (UserRole.TEACHER, UserRole.ADMIN)
