from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.validators import require_rating
from ..core.constants import DEFAULT_CLOSURE_RATING
from .model import LedgerEntry
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import ClosureStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class ClosureStrategyFactory:
    """Factory Pattern: choose the closure strategy from a student's current entry."""

    default_rating: int = DEFAULT_CLOSURE_RATING

    def __post_init__(self):
        self.default_rating = require_rating(self.default_rating)

    def for_entry(self, current: Optional[LedgerEntry]) -> ClosureStrategy:
        if current and current.is_present:
            return PresentStrategy(self.default_rating)
        return AbsentStrategy()
