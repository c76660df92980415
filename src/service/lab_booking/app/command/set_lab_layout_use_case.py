from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.booking_errors import LayoutConflictError
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.domain.value_object.lab_layout import LabLayout


class SetLabLayoutUseCase:
    """
    Replace a lab's seating layout.

    Flow:
    1. Lock the lab row exclusively; seat booking changes hold it shared
    2. Refuse when a booking in an upcoming session sits on a seat the new
       layout drops (every such booking is named in the error)
    3. Store the layout, materialize its seats, deactivate the rest
    4. Recompute the capacity of every upcoming session from its bookings
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, lab_id: int, layout: LabLayout, caller: Caller) -> Lab:
        caller.ensure_staff('change lab layouts')

        with self.tracer.start_as_current_span(
            'use_case.set_lab_layout', attributes={'lab.id': lab_id}
        ):
            async with self.uow:
                lab = await self.uow.lab_repo.get_for_update(lab_id=lab_id)
                if not lab:
                    raise NotFoundError('Lab not found')

                now = utc_now()
                upcoming = await self.uow.seat_booking_repo.list_by_lab_starting_after(
                    lab_id=lab_id, after=now
                )
                orphaned = [booking for booking in upcoming if not layout.contains(booking.name)]
                if orphaned:
                    users = await self.uow.user_repo.get_many(
                        user_ids=[booking.user_id for booking in orphaned]
                    )
                    raise LayoutConflictError(
                        [
                            f'{users[b.user_id].display_name if b.user_id in users else b.user_id}'
                            f' ({b.name})'
                            for b in orphaned
                        ]
                    )

                updated = await self.uow.lab_repo.update_row_config(
                    lab_id=lab_id, row_config=layout.to_json()
                )

                valid_names = set()
                for position in layout.positions():
                    await self.uow.seat_repo.get_or_create(
                        lab_id=lab_id, name=position.name, row=position.row, col=position.col
                    )
                    valid_names.add(position.name)

                seats = await self.uow.seat_repo.list_by_lab(lab_id=lab_id, active_only=True)
                await self.uow.seat_repo.deactivate(
                    seat_ids=[
                        seat.id
                        for seat in seats
                        if seat.name not in valid_names and seat.id is not None
                    ]
                )

                recounted = await self.uow.session_repo.recount_capacity(
                    lab_id=lab_id, after=now, total_seats=layout.total_seats
                )

                await self.uow.commit()

        Logger.base.info(
            f'🧪 [LAB] Layout of lab {lab_id} set to {layout.total_seats} seats, '
            f'{recounted} upcoming sessions recounted'
        )
        return updated
