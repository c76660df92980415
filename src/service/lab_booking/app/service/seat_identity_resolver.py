from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.domain.entity.seat_entity import Seat
from src.service.lab_booking.domain.value_object.lab_layout import SeatPosition


class SeatIdentityResolver:
    """Maps a seat label such as "B3" or "Edge" onto a durable Seat record."""

    @staticmethod
    def locate(*, lab: Lab, seat_name: str) -> SeatPosition:
        """
        Raises:
            InvalidSeatError: label unknown to the lab's current layout
            InvalidLabConfigError: the stored layout cannot be parsed
        """
        return lab.layout.locate(seat_name)

    @Logger.io
    async def resolve(self, *, uow: AbstractUnitOfWork, lab: Lab, seat_name: str) -> Seat:
        position = self.locate(lab=lab, seat_name=seat_name)
        return await uow.seat_repo.get_or_create(
            lab_id=lab.id or 0, name=position.name, row=position.row, col=position.col
        )
