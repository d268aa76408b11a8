from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import LedgerEntry


@dataclass(frozen=True)
class ClosureDecision:
    status: AttendanceStatus
    rating: int


class ClosureStrategy(ABC):
    """Strategy Pattern: decide a student's final outcome when the day ends."""

    @abstractmethod
    def decide(self, current: Optional[LedgerEntry]) -> ClosureDecision:
        raise NotImplementedError
