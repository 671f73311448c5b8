from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data, no database access. `password_hash` never leaves the service layer.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    hourly_rate: Decimal
    is_active: bool = True
    created_at: Optional[datetime] = None
