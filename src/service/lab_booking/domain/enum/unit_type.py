from enum import StrEnum


class UnitType(StrEnum):
    UNIT = 'UNIT'
    ML = 'ML'
