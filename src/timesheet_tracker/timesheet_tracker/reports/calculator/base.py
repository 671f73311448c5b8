from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal


class CostCalculator(ABC):
    """Calculator interface (Strategy Pattern for labour cost)."""

    @abstractmethod
    def cost(self, hours: Decimal, hourly_rate: Decimal) -> Decimal:
        raise NotImplementedError
