from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.lab_booking.domain.value_object.lab_layout import LabLayout


@attrs.define
class Lab:
    name: str
    # stored JSON layout; None means the lab uses the default layout
    row_config: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(cls, *, name: str, layout: Optional[LabLayout] = None) -> 'Lab':
        name = (name or '').strip()
        if not name:
            raise DomainError('Lab name is required')
        return cls(name=name, row_config=layout.to_json() if layout else None)

    @property
    def layout(self) -> LabLayout:
        return LabLayout.parse(self.row_config)
