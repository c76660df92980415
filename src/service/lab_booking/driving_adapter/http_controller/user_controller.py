from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.command.delete_account_use_case import DeleteAccountUseCase
from src.service.lab_booking.app.command.sync_account_use_case import SyncAccountUseCase
from src.service.lab_booking.app.command.update_roles_use_case import (
    RoleChange,
    UpdateRolesUseCase,
)
from src.service.lab_booking.app.query.user_query_use_case import UserQueryUseCase
from src.service.lab_booking.domain.enum.user_role import UserRole
from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.driving_adapter.http_controller.auth.role_auth import (
    get_current_caller,
    require_admin,
    require_staff,
)
from src.service.lab_booking.driving_adapter.http_controller.schema.user_schema import (
    AccountSyncRequest,
    RolesUpdateRequest,
    UserResponse,
)


router = APIRouter()


@router.get('/me')
@Logger.io
async def get_me(
    caller: Caller = Depends(get_current_caller),
    use_case: UserQueryUseCase = Depends(UserQueryUseCase.depends),
) -> UserResponse:
    return UserResponse.model_validate(await use_case.get_me(caller=caller))


@router.put('/me')
@Logger.io
async def sync_me(
    request: AccountSyncRequest,
    caller: Caller = Depends(get_current_caller),
    use_case: SyncAccountUseCase = Depends(SyncAccountUseCase.depends),
) -> UserResponse:
    user = await use_case.execute(
        caller=caller,
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    return UserResponse.model_validate(user)


@router.get('')
@Logger.io
async def list_accounts(
    role: Optional[UserRole] = None,
    caller: Caller = Depends(require_staff),
    use_case: UserQueryUseCase = Depends(UserQueryUseCase.depends),
) -> List[UserResponse]:
    users = await use_case.list_accounts(caller=caller, role=role)
    return [UserResponse.model_validate(user) for user in users]


@router.put('/roles')
@Logger.io
async def update_roles(
    request: RolesUpdateRequest,
    caller: Caller = Depends(require_admin),
    use_case: UpdateRolesUseCase = Depends(UpdateRolesUseCase.depends),
) -> List[UserResponse]:
    users = await use_case.execute(
        changes=[RoleChange(user_id=item.user_id, role=item.role) for item in request.changes],
        caller=caller,
    )
    return [UserResponse.model_validate(user) for user in users]


@router.delete('/{user_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_account(
    user_id: str,
    caller: Caller = Depends(get_current_caller),
    use_case: DeleteAccountUseCase = Depends(DeleteAccountUseCase.depends),
) -> None:
    await use_case.execute(user_id=user_id, caller=caller)
