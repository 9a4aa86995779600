from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import PersonType


@dataclass(frozen=True)
class Person:
    """Học viên hoặc giáo viên."""

    person_id: int
    person_type: PersonType
    full_name: str
    phone: Optional[str] = None
    is_active: bool = True
