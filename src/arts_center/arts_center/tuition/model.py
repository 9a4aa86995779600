from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..common.validators import require_non_empty, require_subject
from ..core.quality import DataQualityFinding


@dataclass(frozen=True)
class FeeSchedule:
    """Bảng học phí theo môn: subject -> học phí tháng (VND).

    Passed into the fee computations at call time; never read from a global.
    """

    fees: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        normalized = {require_non_empty(k, "Môn học"): int(v) for k, v in dict(self.fees).items()}
        object.__setattr__(self, "fees", MappingProxyType(normalized))

    @classmethod
    def of(cls, fees: Mapping[str, int]) -> "FeeSchedule":
        """Admin input: subjects must be known subject names."""

        return cls({require_subject(k): int(v) for k, v in fees.items()})

    def fee_for(self, subject: str) -> Optional[int]:
        return self.fees.get(subject)

    def has_valid_fee(self, subject: str) -> bool:
        fee = self.fee_for(subject)
        return fee is not None and fee > 0

    def __contains__(self, subject: str) -> bool:
        return subject in self.fees

    def subjects(self) -> Iterable[str]:
        return self.fees.keys()


@dataclass(frozen=True)
class FeeQuote:
    """Read-model: học phí một học viên phải đóng cho một lớp trong một tháng."""

    person_id: int
    class_id: int
    subject: str
    month: int
    year: int
    monthly_fee: int
    fraction: Fraction
    amount: int
    warnings: tuple[DataQualityFinding, ...] = ()
