from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.domain.enum.unit_type import UnitType
from src.service.lab_booking.domain.value_object.lab_layout import LabLayout


class RowConfigSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    seats: int


class LabLayoutSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            'example': {
                'rows': [{'name': 'A', 'seats': 6}, {'name': 'B', 'seats': 6}],
                'edgeSeat': True,
            }
        },
    )

    rows: List[RowConfigSchema]
    edge_seat: bool = Field(
        default=False,
        validation_alias=AliasChoices('edgeSeat', 'hasEdgeSeat', 'edge_seat'),
        serialization_alias='edgeSeat',
    )

    def to_layout(self) -> LabLayout:
        """
        Raises:
            InvalidLabConfigError: rows break the layout rules
        """
        return LabLayout.build(
            rows=[(row.name, row.seats) for row in self.rows], edge_seat=self.edge_seat
        )


class LabCreateRequest(BaseModel):
    name: str
    layout: Optional[LabLayoutSchema] = None

    class Config:
        json_schema_extra = {
            'example': {'name': 'Physics', 'layout': None},
        }


class LabResponse(BaseModel):
    id: int
    name: str
    layout: LabLayoutSchema
    total_seats: int

    @classmethod
    def from_lab(cls, lab: Lab) -> 'LabResponse':
        layout = lab.layout
        return cls(
            id=lab.id or 0,
            name=lab.name,
            layout=LabLayoutSchema.model_validate(layout),
            total_seats=layout.total_seats,
        )


class SeatResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    lab_id: int
    name: str
    row: Optional[int] = None
    col: Optional[int] = None
    is_active: bool


class EquipmentRequest(BaseModel):
    name: str
    total: int = Field(ge=0)
    unit_type: UnitType = UnitType.UNIT
    expiration_date: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            'example': {'name': 'Microscope', 'total': 10, 'unit_type': 'UNIT'},
        }


class EquipmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    lab_id: int
    name: str
    total: int
    unit_type: UnitType
    expiration_date: Optional[datetime] = None
    created_by: Optional[str] = None
