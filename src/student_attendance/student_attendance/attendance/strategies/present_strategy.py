from __future__ import annotations

from typing import Optional

from ...common.validators import require_rating
from ...core.constants import DEFAULT_CLOSURE_RATING, UNRATED
from ...core.enums import AttendanceStatus
from ..model import LedgerEntry
from .base import ClosureDecision, ClosureStrategy


class PresentStrategy(ClosureStrategy):
    """Present students keep their rating; unrated ones get the default."""

    def __init__(self, default_rating: int = DEFAULT_CLOSURE_RATING):
        self._default_rating = require_rating(default_rating)

    def decide(self, current: Optional[LedgerEntry]) -> ClosureDecision:
        rating = current.rating if current and current.rating > UNRATED else self._default_rating
        return ClosureDecision(status=AttendanceStatus.PRESENT, rating=rating)
