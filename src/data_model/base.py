"""Shared value types: size categories and per-category counts."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class SizeCategory(str, Enum):
    """Size category shared by articles and layout slots.

    - SHORT: short body text / small slot area
    - MEDIUM: medium body text / medium slot area
    - LONG: long body text / large slot area
    """

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


# Fixed iteration order used for per-category counts and fallbacks
SIZE_CATEGORY_ORDER: tuple[SizeCategory, ...] = (
    SizeCategory.SHORT,
    SizeCategory.MEDIUM,
    SizeCategory.LONG,
)


@dataclass(frozen=True)
class SizeCounts:
    """Count of items per size category.

    Attributes:
        short: Number of short items.
        medium: Number of medium items.
        long: Number of long items.
    """

    short: int = 0
    medium: int = 0
    long: int = 0

    @classmethod
    def from_categories(cls, categories: Iterable[SizeCategory]) -> "SizeCounts":
        """Count categories from an iterable."""
        counter = Counter(categories)
        return cls(
            short=counter[SizeCategory.SHORT],
            medium=counter[SizeCategory.MEDIUM],
            long=counter[SizeCategory.LONG],
        )

    def get(self, category: SizeCategory) -> int:
        """Get the count for a category."""
        return getattr(self, category.value)

    def as_dict(self) -> dict[SizeCategory, int]:
        """Convert to a category-keyed dictionary."""
        return {cat: self.get(cat) for cat in SIZE_CATEGORY_ORDER}

    @property
    def total(self) -> int:
        """Total count across categories."""
        return self.short + self.medium + self.long
