from typing import Optional

import attrs


@attrs.define
class Seat:
    lab_id: int
    name: str
    row: Optional[int] = None
    col: Optional[int] = None
    is_active: bool = True
    id: Optional[int] = None
