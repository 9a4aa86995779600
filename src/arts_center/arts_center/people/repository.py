from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import PersonType
from .model import Person


class PersonRepository(Protocol):
    """Students and teachers live in separate tables; `person_type` picks one."""

    def get_by_id(self, person_type: PersonType, person_id: int) -> Optional[Person]:
        raise NotImplementedError

    def list_all(self, person_type: PersonType, *, active_only: bool = False) -> Sequence[Person]:
        raise NotImplementedError

    def list_by_ids(self, person_type: PersonType, person_ids: Iterable[int]) -> Sequence[Person]:
        raise NotImplementedError
