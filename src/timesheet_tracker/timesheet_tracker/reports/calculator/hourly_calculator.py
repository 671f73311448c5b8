from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .base import CostCalculator

_CENT = Decimal("0.01")


class HourlyCostCalculator(CostCalculator):
    """Standard rule: hours x current hourly rate, rounded to pence."""

    def cost(self, hours: Decimal, hourly_rate: Decimal) -> Decimal:
        return (Decimal(hours) * Decimal(hourly_rate)).quantize(_CENT, rounding=ROUND_HALF_UP)
