from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Project:
    project_id: int
    name: str
    location: Optional[str]
    is_active: bool = True
    created_at: Optional[datetime] = None
    timesheet_count: int = 0
