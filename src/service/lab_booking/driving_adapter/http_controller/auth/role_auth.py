from typing import Optional

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends, Header
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.service.lab_booking.app.query.user_query_use_case import UserQueryUseCase
from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


@inject
async def get_current_caller(
    authorization: Optional[str] = Header(None),
    cookie_token: Optional[str] = Cookie(None, alias=settings.AUTH_COOKIE_NAME),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    user_query: UserQueryUseCase = Depends(UserQueryUseCase.depends),
) -> Caller:
    """
    Caller from the bearer token (or the session cookie).

    A ban recorded by staff applies even when the token predates it.
    """
    caller = jwt_auth.get_caller_from_jwt(_bearer_token(authorization) or cookie_token)
    if caller.is_banned:
        return caller

    stored = await user_query.get_user(user_id=caller.user_id)
    if stored and stored.is_banned:
        return attrs.evolve(caller, is_banned=True)
    return caller


async def require_staff(caller: Caller = Depends(get_current_caller)) -> Caller:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_staff',
        attributes={'user.id': caller.user_id, 'user.role': caller.role.value},
    ):
        caller.ensure_staff('perform this action')
        return caller


async def require_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    caller.ensure_admin('perform this action')
    return caller
