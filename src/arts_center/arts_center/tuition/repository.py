from __future__ import annotations

from typing import Protocol

from .model import FeeSchedule


class FeeScheduleRepository(Protocol):
    def current(self) -> FeeSchedule:
        """Snapshot of the fee table as edited by the admin workflow."""

        raise NotImplementedError
