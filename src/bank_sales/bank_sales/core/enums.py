from __future__ import annotations

from enum import Enum


class Role(int, Enum):
    """User roles used for authorization. Values match roles.id."""

    ADMIN = 1
    ADVISOR = 2


class ProductType(int, Enum):
    """Product catalog ids (seeded reference data)."""

    CONSUMER_CREDIT = 1
    FREE_INVESTMENT_PAYROLL = 2
    CREDIT_CARD = 3


class SaleStatus(str, Enum):
    """Sale status stored in the database.

    Open enum: any status may follow any other.
    """

    OPEN = "Open"
    IN_PROCESS = "InProcess"
    FINISHED = "Finished"


class Period(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
