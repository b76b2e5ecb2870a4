"""Visual key lookup for slot assignments.

Maps a (slot size, agency id, important) combination to one or more opaque
visual keys. The renderer resolves keys to its own block templates; when a
combination has several keys one is drawn at random for visual variation.
"""

import random
from typing import Annotated

import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.layout.models import GridSize, LayoutPreset


logger = structlog.get_logger()


class VisualKeyEntry(BaseModel):
    """One row of the visual key table.

    Attributes:
        size: Slot size the keys apply to.
        agency_id: Agency the keys apply to.
        important: Whether the keys are for important slots.
        keys: Visual keys available for this combination.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    size: GridSize
    agency_id: Annotated[int, Field(ge=0)]
    important: bool = False
    keys: Annotated[list[str], Field(min_length=1)]

    def matches(self, size: GridSize, agency_id: int, important: bool) -> bool:
        """Check whether this entry covers a combination."""
        return (
            self.size == size
            and self.agency_id == agency_id
            and self.important == important
        )


class VisualKeyMapping(BaseModel):
    """Root configuration for visual_keys.yaml."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    entries: list[VisualKeyEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_combinations(self) -> "VisualKeyMapping":
        """Ensure every combination is listed at most once."""
        seen: set[tuple[str, int, bool]] = set()
        for entry in self.entries:
            combo = (entry.size.label, entry.agency_id, entry.important)
            if combo in seen:
                msg = (
                    f"Duplicate visual key entry for size {combo[0]}, "
                    f"agency {combo[1]}, important: {combo[2]}"
                )
                raise ValueError(msg)
            seen.add(combo)
        return self

    def find_entry(
        self, size: GridSize, agency_id: int, important: bool
    ) -> VisualKeyEntry | None:
        """Find the entry for a combination.

        Returns:
            Matching entry, or None if the combination is not mapped.
        """
        for entry in self.entries:
            if entry.matches(size, agency_id, important):
                return entry
        return None

    def lookup(
        self,
        size: GridSize,
        agency_id: int,
        important: bool,
        rng: random.Random,
    ) -> str | None:
        """Get a visual key for a combination.

        Args:
            size: Slot size.
            agency_id: Agency of the bound article.
            important: Whether the slot is important.
            rng: Random source used to pick between variants.

        Returns:
            One of the mapped keys, or None if the combination is unmapped.
        """
        entry = self.find_entry(size, agency_id, important)
        if entry is None:
            logger.warning(
                "visual_key_missing",
                component="layout",
                size=size.label,
                agency_id=agency_id,
                important=important,
            )
            return None
        if len(entry.keys) == 1:
            return entry.keys[0]
        return rng.choice(entry.keys)

    def coverage_gaps(
        self,
        presets: list[LayoutPreset],
        important_agency_ids: list[int],
        other_agency_ids: list[int],
    ) -> list[dict[str, object]]:
        """List slot combinations used by presets that have no mapping.

        Args:
            presets: Presets whose slots should be covered.
            important_agency_ids: Agencies that can fill important slots.
            other_agency_ids: Agencies that can fill the remaining slots.

        Returns:
            Sorted list of unmapped combinations (size, agency_id, important).
        """
        combos: set[tuple[str, int, bool]] = set()
        for preset in presets:
            for block in preset.blocks:
                agency_ids = (
                    important_agency_ids if block.important else other_agency_ids
                )
                for agency_id in agency_ids:
                    if self.find_entry(block.size, agency_id, block.important) is None:
                        combos.add((block.size.label, agency_id, block.important))
        return [
            {"size": size, "agency_id": agency_id, "important": important}
            for size, agency_id, important in sorted(combos)
        ]
