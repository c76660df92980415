import attrs


@attrs.frozen
class EquipmentRequest:
    """Amount of one equipment item a student asks for with a seat."""

    equipment_id: int
    amount: int


@attrs.frozen
class EquipmentOffer:
    """Amount of one equipment item staff make available in a session."""

    equipment_id: int
    available: int
