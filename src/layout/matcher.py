"""Layout preset matching."""

import random

import structlog

from src.config.constants import COMPONENT_LAYOUT
from src.data_model.base import SizeCounts
from src.data_model.errors import NoMatchingPresetError
from src.layout.models import LayoutPreset


logger = structlog.get_logger()


class PresetMatcher:
    """Finds a preset whose important slots exactly fit the selection."""

    def __init__(
        self,
        presets: list[LayoutPreset],
        short_limit: int,
        medium_limit: int,
        rng: random.Random,
        run_id: str | None = None,
    ) -> None:
        """Initialize the matcher.

        Args:
            presets: Preset catalog.
            short_limit: Maximum slot area of a short slot.
            medium_limit: Maximum slot area of a medium slot.
            rng: Random source shared with the rest of the build.
            run_id: Optional run identifier for logging.
        """
        self._presets = list(presets)
        self._short_limit = short_limit
        self._medium_limit = medium_limit
        self._rng = rng
        self._log = logger.bind(component=COMPONENT_LAYOUT)
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def available_counts(self, preset: LayoutPreset) -> SizeCounts:
        """Count a preset's important slots per size category."""
        return preset.important_counts(self._short_limit, self._medium_limit)

    def match(self, required: SizeCounts) -> LayoutPreset:
        """Pick a random preset whose important slot counts equal ``required``.

        Args:
            required: Important article count per size category.

        Returns:
            The first matching preset of a shuffled catalog.

        Raises:
            NoMatchingPresetError: If no preset matches exactly.
        """
        candidates = list(self._presets)
        self._rng.shuffle(candidates)

        for preset in candidates:
            if self.available_counts(preset) == required:
                self._log.info(
                    "preset_matched",
                    preset=preset.name,
                    short=required.short,
                    medium=required.medium,
                    long=required.long,
                )
                return preset

        error = NoMatchingPresetError(
            required=required.as_dict(),
            available={
                p.name: self.available_counts(p).as_dict() for p in self._presets
            },
        )
        self._log.error("no_matching_preset", **error.to_dict())
        raise error
