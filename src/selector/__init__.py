"""Daily article selection."""

from src.selector.models import (
    DailySelection,
    FifthSlotOutcome,
    PairKey,
    SelectionDraft,
    SelectionSession,
    SelectionStep,
)
from src.selector.selector import Selector, genre_weight


__all__ = [
    "DailySelection",
    "FifthSlotOutcome",
    "PairKey",
    "SelectionDraft",
    "SelectionSession",
    "SelectionStep",
    "Selector",
    "genre_weight",
]
