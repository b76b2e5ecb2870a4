"""Domain exceptions for the edition build pipeline.

Builds either complete or fail outright. Every fatal condition is raised as
a subclass of NewsdeskError so callers can handle one base type; degraded
data (bad pairs, unreachable story parts, unfilled filler slots) is logged
as a warning instead and never raised.
"""

from src.data_model.base import SIZE_CATEGORY_ORDER, SizeCategory


class NewsdeskError(Exception):
    """Base exception for all edition build errors."""


class PoolExhaustedError(NewsdeskError):
    """Raised when a required pick cannot be served from its queue.

    The featured pick is unavoidable; an empty featured queue after the
    rebuild pass means the pool itself has no content.
    """

    def __init__(self, pool_name: str, needed: int = 1) -> None:
        """Initialize the error.

        Args:
            pool_name: Name of the exhausted pool.
            needed: Number of entries the pick required.
        """
        self.pool_name = pool_name
        self.needed = needed
        super().__init__(
            f"Pool '{pool_name}' is exhausted: needed {needed} queued article(s)"
        )


class NoMatchingPresetError(NewsdeskError):
    """Raised when no layout preset matches the important-category counts.

    Carries the full required-vs-available breakdown so content/preset
    imbalance can be diagnosed from the log line alone.
    """

    def __init__(
        self,
        required: dict[SizeCategory, int],
        available: dict[str, dict[SizeCategory, int]],
    ) -> None:
        """Initialize the error.

        Args:
            required: Required important slot count per size category.
            available: Important slot counts per category for every preset.
        """
        self.required = required
        self.available = available
        needed = ", ".join(
            f"{cat.value}={required.get(cat, 0)}" for cat in SIZE_CATEGORY_ORDER
        )
        super().__init__(
            f"No suitable preset found for important blocks ({needed}); "
            f"checked {len(available)} preset(s)"
        )

    def to_dict(self) -> dict[str, object]:
        """Convert the breakdown to a plain dictionary for logging.

        Returns:
            Dictionary with required and per-preset available counts.
        """
        return {
            "required": {cat.value: self.required.get(cat, 0) for cat in SIZE_CATEGORY_ORDER},
            "available": {
                name: {cat.value: counts.get(cat, 0) for cat in SIZE_CATEGORY_ORDER}
                for name, counts in self.available.items()
            },
        }


class LayoutConsistencyError(NewsdeskError):
    """Raised when an important article survives matching without a slot.

    This indicates a Matcher/Selector invariant violation, not bad content.
    """

    def __init__(self, preset_name: str, headline: str, category: SizeCategory) -> None:
        """Initialize the error.

        Args:
            preset_name: Name of the matched preset.
            headline: Headline of the article that could not be bound.
            category: Size category of that article.
        """
        self.preset_name = preset_name
        self.headline = headline
        self.category = category
        super().__init__(
            f"No matching {category.value} block in preset '{preset_name}' "
            f"for important article: {headline}"
        )


class BuildInProgressError(NewsdeskError):
    """Raised when a build is requested while another one is running."""

    def __init__(self, run_id: str) -> None:
        """Initialize the error.

        Args:
            run_id: Run identifier of the rejected request.
        """
        self.run_id = run_id
        super().__init__(f"Edition build already in progress; rejected run {run_id}")
