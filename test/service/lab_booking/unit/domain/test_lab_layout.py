import pytest

from src.service.lab_booking.domain.booking_errors import InvalidLabConfigError, InvalidSeatError
from src.service.lab_booking.domain.value_object.lab_layout import (
    EDGE_SEAT_NAME,
    LabLayout,
    RowConfig,
    normalize_seat_name,
)


@pytest.mark.unit
class TestLabLayoutParsing:
    def test_missing_layout_falls_back_to_default(self):
        """
        Given: a lab that never saved a layout
        When: the stored value is parsed
        Then: rows A, B, C with 6 seats each plus the edge seat (19 seats)
        """
        # Act
        layout = LabLayout.parse(None)

        # Assert
        assert layout.rows == (RowConfig('A', 6), RowConfig('B', 6), RowConfig('C', 6))
        assert layout.edge_seat is True
        assert layout.total_seats == 19

    def test_accepts_both_edge_flag_spellings(self):
        legacy = LabLayout.parse('{"rows": [{"name": "A", "seats": 2}], "hasEdgeSeat": true}')
        current = LabLayout.parse('{"rows": [{"name": "A", "seats": 2}], "edgeSeat": true}')

        assert legacy == current
        assert legacy.total_seats == 3

    def test_round_trips_through_stored_json(self):
        layout = LabLayout(rows=(RowConfig('A', 4), RowConfig('B', 12)), edge_seat=False)

        assert LabLayout.parse(layout.to_json()) == layout

    @pytest.mark.parametrize(
        'raw',
        [
            'not json',
            '[]',
            '{"rows": []}',
            '{"rows": [{"name": "A", "seats": 0}]}',
            '{"rows": [{"name": "A", "seats": 13}]}',
            '{"rows": [{"name": "A1", "seats": 3}]}',
            '{"rows": [{"name": "A", "seats": 2}, {"name": "a", "seats": 2}]}',
            '{"rows": [{"name": "A", "seats": true}]}',
            '{"rows": [{"name": "A", "seats": 2}], "edgeSeat": "yes"}',
        ],
    )
    def test_rejects_malformed_layouts(self, raw):
        with pytest.raises(InvalidLabConfigError):
            LabLayout.parse(raw)


@pytest.mark.unit
class TestSeatLocation:
    @pytest.fixture
    def layout(self) -> LabLayout:
        return LabLayout.default()

    def test_normalizes_seat_labels(self):
        assert normalize_seat_name(' b3 ') == 'B3'
        assert normalize_seat_name('EDGE') == EDGE_SEAT_NAME
        assert normalize_seat_name('c06') == 'C6'

    def test_locates_row_and_column(self, layout):
        position = layout.locate('b3')

        assert position.name == 'B3'
        assert position.row == 2
        assert position.col == 3
        assert not position.is_edge

    def test_edge_seat_has_no_coordinates(self, layout):
        position = layout.locate('edge')

        assert position.is_edge
        assert position.row is None and position.col is None

    @pytest.mark.parametrize('seat_name', ['A7', 'D1', 'A0', '3A', '', 'Window'])
    def test_unknown_seats_are_invalid(self, layout, seat_name):
        with pytest.raises(InvalidSeatError):
            layout.locate(seat_name)

    def test_edge_seat_invalid_when_layout_has_none(self):
        layout = LabLayout(rows=(RowConfig('A', 6),), edge_seat=False)

        assert not layout.contains('Edge')
        with pytest.raises(InvalidSeatError):
            layout.locate('Edge')

    def test_positions_cover_every_seat_once(self, layout):
        names = layout.seat_names()

        assert len(names) == len(set(names)) == 19
        assert names[0] == 'A1'
        assert names[-1] == EDGE_SEAT_NAME
