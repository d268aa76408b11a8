from __future__ import annotations

from typing import Optional

from ...core.constants import UNRATED
from ...core.enums import AttendanceStatus
from ..model import LedgerEntry
from .base import ClosureDecision, ClosureStrategy


class AbsentStrategy(ClosureStrategy):
    """Anyone not marked present ends the day absent and unrated."""

    def decide(self, current: Optional[LedgerEntry]) -> ClosureDecision:
        return ClosureDecision(status=AttendanceStatus.ABSENT, rating=UNRATED)
