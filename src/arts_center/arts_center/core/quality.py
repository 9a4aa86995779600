from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field

from .enums import FindingCode
from .exceptions import DataQualityWarning


@dataclass(frozen=True)
class DataQualityFinding:
    """Read-model cho một phát hiện về chất lượng dữ liệu (không chặn thao tác)."""

    code: FindingCode
    message: str
    context: dict = field(default_factory=dict, compare=False)

    def as_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message, **self.context}


def report_finding(finding: DataQualityFinding, *, logger: logging.Logger) -> DataQualityFinding:
    """Log the finding and emit it as a DataQualityWarning."""

    logger.warning("[data-quality] %s: %s %s", finding.code.value, finding.message, finding.context)
    warnings.warn(DataQualityWarning(finding.message), stacklevel=3)
    return finding
