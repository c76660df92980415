from typing import List

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.command.add_lab_equipment_use_case import AddLabEquipmentUseCase
from src.service.lab_booking.app.command.create_lab_use_case import CreateLabUseCase
from src.service.lab_booking.app.command.delete_lab_equipment_use_case import (
    DeleteLabEquipmentUseCase,
)
from src.service.lab_booking.app.command.set_lab_layout_use_case import SetLabLayoutUseCase
from src.service.lab_booking.app.command.update_lab_equipment_use_case import (
    UpdateLabEquipmentUseCase,
)
from src.service.lab_booking.app.query.lab_query_use_case import LabQueryUseCase
from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.driving_adapter.http_controller.auth.role_auth import (
    get_current_caller,
    require_admin,
    require_staff,
)
from src.service.lab_booking.driving_adapter.http_controller.schema.lab_schema import (
    EquipmentRequest,
    EquipmentResponse,
    LabCreateRequest,
    LabLayoutSchema,
    LabResponse,
    SeatResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_lab(
    request: LabCreateRequest,
    caller: Caller = Depends(require_admin),
    use_case: CreateLabUseCase = Depends(CreateLabUseCase.depends),
) -> LabResponse:
    lab = await use_case.execute(
        name=request.name,
        layout=request.layout.to_layout() if request.layout else None,
        caller=caller,
    )
    return LabResponse.from_lab(lab)


@router.get('/by-name')
@Logger.io
async def get_lab_by_name(
    name: str = Query(..., min_length=1),
    caller: Caller = Depends(get_current_caller),
    use_case: LabQueryUseCase = Depends(LabQueryUseCase.depends),
) -> LabResponse:
    return LabResponse.from_lab(await use_case.find_by_name(name=name))


@router.put('/equipment/{equipment_id}')
@Logger.io
async def update_lab_equipment(
    equipment_id: int,
    request: EquipmentRequest,
    caller: Caller = Depends(require_staff),
    use_case: UpdateLabEquipmentUseCase = Depends(UpdateLabEquipmentUseCase.depends),
) -> EquipmentResponse:
    equipment = await use_case.execute(
        equipment_id=equipment_id,
        name=request.name,
        total=request.total,
        unit_type=request.unit_type,
        expiration_date=request.expiration_date,
        caller=caller,
    )
    return EquipmentResponse.model_validate(equipment)


@router.delete('/equipment/{equipment_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_lab_equipment(
    equipment_id: int,
    caller: Caller = Depends(require_staff),
    use_case: DeleteLabEquipmentUseCase = Depends(DeleteLabEquipmentUseCase.depends),
) -> None:
    await use_case.execute(equipment_id=equipment_id, caller=caller)


@router.get('/{lab_id}')
@Logger.io
async def get_lab(
    lab_id: int,
    caller: Caller = Depends(get_current_caller),
    use_case: LabQueryUseCase = Depends(LabQueryUseCase.depends),
) -> LabResponse:
    return LabResponse.from_lab(await use_case.get_lab(lab_id=lab_id))


@router.get('/{lab_id}/layout')
@Logger.io
async def get_lab_layout(
    lab_id: int,
    caller: Caller = Depends(get_current_caller),
    use_case: LabQueryUseCase = Depends(LabQueryUseCase.depends),
) -> LabLayoutSchema:
    return LabLayoutSchema.model_validate(await use_case.get_layout(lab_id=lab_id))


@router.put('/{lab_id}/layout')
@Logger.io
async def set_lab_layout(
    lab_id: int,
    request: LabLayoutSchema,
    caller: Caller = Depends(require_staff),
    use_case: SetLabLayoutUseCase = Depends(SetLabLayoutUseCase.depends),
) -> LabResponse:
    lab = await use_case.execute(lab_id=lab_id, layout=request.to_layout(), caller=caller)
    return LabResponse.from_lab(lab)


@router.get('/{lab_id}/seats')
@Logger.io
async def list_seats(
    lab_id: int,
    caller: Caller = Depends(get_current_caller),
    use_case: LabQueryUseCase = Depends(LabQueryUseCase.depends),
) -> List[SeatResponse]:
    seats = await use_case.list_seats(lab_id=lab_id)
    return [SeatResponse.model_validate(seat) for seat in seats]


@router.get('/{lab_id}/equipment')
@Logger.io
async def list_lab_equipment(
    lab_id: int,
    caller: Caller = Depends(get_current_caller),
    use_case: LabQueryUseCase = Depends(LabQueryUseCase.depends),
) -> List[EquipmentResponse]:
    equipment = await use_case.list_equipment(lab_id=lab_id)
    return [EquipmentResponse.model_validate(item) for item in equipment]


@router.post('/{lab_id}/equipment', status_code=status.HTTP_201_CREATED)
@Logger.io
async def add_lab_equipment(
    lab_id: int,
    request: EquipmentRequest,
    caller: Caller = Depends(require_staff),
    use_case: AddLabEquipmentUseCase = Depends(AddLabEquipmentUseCase.depends),
) -> EquipmentResponse:
    equipment = await use_case.execute(
        lab_id=lab_id,
        name=request.name,
        total=request.total,
        unit_type=request.unit_type,
        expiration_date=request.expiration_date,
        caller=caller,
    )
    return EquipmentResponse.model_validate(equipment)
