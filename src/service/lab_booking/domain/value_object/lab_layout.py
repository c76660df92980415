import re
from typing import Any, Iterator, Optional

import attrs
import orjson

from src.service.lab_booking.domain.booking_errors import InvalidLabConfigError, InvalidSeatError


EDGE_SEAT_NAME = 'Edge'
MIN_SEATS_PER_ROW = 1
MAX_SEATS_PER_ROW = 12

_ROW_NAME_PATTERN = re.compile(r'^[A-Za-z]+$')
_SEAT_NAME_PATTERN = re.compile(r'^([A-Za-z]+)(\d+)$')


@attrs.frozen
class RowConfig:
    name: str
    seats: int


@attrs.frozen
class SeatPosition:
    """A seat label resolved against a layout; row is the 1-based row index."""

    name: str
    row: Optional[int] = None
    col: Optional[int] = None

    @property
    def is_edge(self) -> bool:
        return self.name == EDGE_SEAT_NAME


def normalize_seat_name(seat_name: str) -> str:
    """
    Canonical form of a seat label: row letters upper-cased ("b3" -> "B3"),
    any casing of the edge seat -> "Edge".

    Raises:
        InvalidSeatError: label is neither ``<Letters><Number>`` nor ``Edge``
    """
    raw = (seat_name or '').strip()
    if raw.lower() == EDGE_SEAT_NAME.lower():
        return EDGE_SEAT_NAME
    match = _SEAT_NAME_PATTERN.match(raw)
    if not match:
        raise InvalidSeatError(seat_name)
    return f'{match.group(1).upper()}{int(match.group(2))}'


@attrs.frozen
class LabLayout:
    """
    Declarative seating layout of a lab: ordered named rows, each with a seat
    count in [1, 12], plus an optional single edge seat.
    """

    rows: tuple[RowConfig, ...]
    edge_seat: bool = False

    @classmethod
    def default(cls) -> 'LabLayout':
        return cls(
            rows=(RowConfig('A', 6), RowConfig('B', 6), RowConfig('C', 6)),
            edge_seat=True,
        )

    @classmethod
    def parse(cls, raw: str | bytes | dict[str, Any] | None) -> 'LabLayout':
        """
        Build a layout from its stored JSON form.

        ``None``/empty means the lab never saved a layout and gets the default.
        Both ``edgeSeat`` and ``hasEdgeSeat`` are accepted for the edge flag.

        Raises:
            InvalidLabConfigError: malformed JSON or a layout breaking the row rules
        """
        if raw is None or raw == '' or raw == b'':
            return cls.default()
        if isinstance(raw, dict):
            data = raw
        else:
            try:
                data = orjson.loads(raw)
            except orjson.JSONDecodeError as e:
                raise InvalidLabConfigError('layout is not valid JSON') from e
        if not isinstance(data, dict):
            raise InvalidLabConfigError('layout must be a JSON object')

        raw_rows = data.get('rows')
        if not isinstance(raw_rows, list) or not raw_rows:
            raise InvalidLabConfigError('layout needs at least one row')

        edge = data.get('edgeSeat', data.get('hasEdgeSeat', False))
        if not isinstance(edge, bool):
            raise InvalidLabConfigError('edgeSeat must be true or false')

        return cls.build(
            rows=[
                (item.get('name'), item.get('seats')) if isinstance(item, dict) else (None, None)
                for item in raw_rows
            ],
            edge_seat=edge,
        )

    @classmethod
    def build(cls, *, rows: list[tuple[Any, Any]], edge_seat: bool) -> 'LabLayout':
        if not rows:
            raise InvalidLabConfigError('layout needs at least one row')

        seen: set[str] = set()
        parsed: list[RowConfig] = []
        for name, seats in rows:
            if not isinstance(name, str) or not _ROW_NAME_PATTERN.match(name):
                raise InvalidLabConfigError(f'row name {name!r} must be letters only')
            name = name.upper()
            if name in seen:
                raise InvalidLabConfigError(f'row {name} appears more than once')
            # bool is an int subclass
            if isinstance(seats, bool) or not isinstance(seats, int):
                raise InvalidLabConfigError(f'row {name} seat count must be an integer')
            if not MIN_SEATS_PER_ROW <= seats <= MAX_SEATS_PER_ROW:
                raise InvalidLabConfigError(
                    f'row {name} must have between {MIN_SEATS_PER_ROW} and '
                    f'{MAX_SEATS_PER_ROW} seats'
                )
            seen.add(name)
            parsed.append(RowConfig(name=name, seats=seats))

        return cls(rows=tuple(parsed), edge_seat=edge_seat)

    @property
    def total_seats(self) -> int:
        return sum(row.seats for row in self.rows) + (1 if self.edge_seat else 0)

    def positions(self) -> Iterator[SeatPosition]:
        for row_index, row in enumerate(self.rows, start=1):
            for col in range(1, row.seats + 1):
                yield SeatPosition(name=f'{row.name}{col}', row=row_index, col=col)
        if self.edge_seat:
            yield SeatPosition(name=EDGE_SEAT_NAME)

    def seat_names(self) -> list[str]:
        return [position.name for position in self.positions()]

    def locate(self, seat_name: str) -> SeatPosition:
        """
        Raises:
            InvalidSeatError: the label does not name a seat of this layout
        """
        name = normalize_seat_name(seat_name)
        if name == EDGE_SEAT_NAME:
            if not self.edge_seat:
                raise InvalidSeatError(seat_name)
            return SeatPosition(name=EDGE_SEAT_NAME)

        match = _SEAT_NAME_PATTERN.match(name)
        assert match
        row_name, col = match.group(1), int(match.group(2))
        for row_index, row in enumerate(self.rows, start=1):
            if row.name == row_name and 1 <= col <= row.seats:
                return SeatPosition(name=name, row=row_index, col=col)
        raise InvalidSeatError(seat_name)

    def contains(self, seat_name: str) -> bool:
        try:
            self.locate(seat_name)
        except InvalidSeatError:
            return False
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            'rows': [{'name': row.name, 'seats': row.seats} for row in self.rows],
            'edgeSeat': self.edge_seat,
        }

    def to_json(self) -> str:
        return orjson.dumps(self.to_dict()).decode()
