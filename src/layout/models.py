"""Data models for layout presets and slot assignments."""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.data_model.base import SizeCategory, SizeCounts


class GridPosition(BaseModel):
    """Grid coordinate of a slot (bottom-left origin).

    Accepts either a mapping or an ``[x, y]`` pair when loaded from YAML.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    x: Annotated[int, Field(ge=0)]
    y: Annotated[int, Field(ge=0)]

    @model_validator(mode="before")
    @classmethod
    def parse_pair(cls, data: Any) -> Any:
        """Coerce an ``[x, y]`` pair into a mapping."""
        if isinstance(data, list | tuple):
            if len(data) != 2:
                msg = "Position must be an [x, y] pair"
                raise ValueError(msg)
            return {"x": data[0], "y": data[1]}
        return data

    def as_tuple(self) -> tuple[int, int]:
        """Get the position as an (x, y) tuple."""
        return (self.x, self.y)


class GridSize(BaseModel):
    """Slot size in grid cells.

    Accepts either a mapping or a ``"WxH"`` label when loaded from YAML.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    width: Annotated[int, Field(ge=1)]
    height: Annotated[int, Field(ge=1)]

    @model_validator(mode="before")
    @classmethod
    def parse_label(cls, data: Any) -> Any:
        """Coerce a ``"WxH"`` label into a mapping."""
        if isinstance(data, str):
            parts = data.lower().split("x")
            if len(parts) != 2 or not all(p.isdigit() for p in parts):
                msg = f"Invalid size '{data}', expected format like '2x1'"
                raise ValueError(msg)
            return {"width": int(parts[0]), "height": int(parts[1])}
        return data

    @property
    def area(self) -> int:
        """Area in grid cells."""
        return self.width * self.height

    @property
    def label(self) -> str:
        """Size label in ``WxH`` form."""
        return f"{self.width}x{self.height}"


def category_for_area(area: int, short_limit: int, medium_limit: int) -> SizeCategory:
    """Classify a slot area against the two area thresholds.

    Args:
        area: Slot area (width x height).
        short_limit: Maximum area of a short slot.
        medium_limit: Maximum area of a medium slot.

    Returns:
        Size category of the slot.
    """
    if area <= short_limit:
        return SizeCategory.SHORT
    if area <= medium_limit:
        return SizeCategory.MEDIUM
    return SizeCategory.LONG


class LayoutBlock(BaseModel):
    """A single slot inside a layout preset.

    Attributes:
        position: Grid position of the slot.
        size: Slot size in cells.
        important: Whether the slot is reserved for curated content.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    position: GridPosition
    size: GridSize
    important: bool = False

    def category(self, short_limit: int, medium_limit: int) -> SizeCategory:
        """Get the derived size category of this slot."""
        return category_for_area(self.size.area, short_limit, medium_limit)


class LayoutPreset(BaseModel):
    """A fixed, ordered collection of slots forming one page layout.

    Attributes:
        name: Unique preset name.
        blocks: Ordered slots of the preset.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Annotated[str, Field(min_length=1, max_length=100)]
    blocks: Annotated[list[LayoutBlock], Field(min_length=1)]

    @model_validator(mode="after")
    def validate_unique_positions(self) -> "LayoutPreset":
        """Ensure no two slots share a grid position."""
        positions = [b.position.as_tuple() for b in self.blocks]
        duplicates = {p for p in positions if positions.count(p) > 1}
        if duplicates:
            msg = f"Duplicate block positions in preset '{self.name}': {sorted(duplicates)}"
            raise ValueError(msg)
        return self

    def important_blocks(self) -> list[LayoutBlock]:
        """Get slots reserved for important content, in preset order."""
        return [b for b in self.blocks if b.important]

    def important_counts(self, short_limit: int, medium_limit: int) -> SizeCounts:
        """Count important slots per size category."""
        return SizeCounts.from_categories(
            b.category(short_limit, medium_limit) for b in self.important_blocks()
        )


class PresetCatalog(BaseModel):
    """Root configuration for presets.yaml."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    presets: Annotated[list[LayoutPreset], Field(min_length=1)]

    @model_validator(mode="after")
    def validate_unique_names(self) -> "PresetCatalog":
        """Ensure preset names are unique."""
        names = [p.name for p in self.presets]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            msg = f"Duplicate preset names found: {sorted(duplicates)}"
            raise ValueError(msg)
        return self


class AssignmentKind(str, Enum):
    """What kind of content a slot received.

    - IMPORTANT: a selected important article
    - FEATURED: the featured rotation article
    - FILLER: a random filler article
    - EMPTY: placeholder, no filler left for the slot
    """

    IMPORTANT = "important"
    FEATURED = "featured"
    FILLER = "filler"
    EMPTY = "empty"


class BlockAssignment(BaseModel):
    """Binding of one article to one slot, handed to the renderer.

    Attributes:
        position: Grid position of the slot.
        size: Slot size.
        kind: Kind of content bound to the slot.
        visual_key: Opaque visual representation key (None if unmapped).
        headline: Article headline (empty for placeholders).
        description: Article body text (empty for placeholders).
        background_name: Auxiliary background display key.
        use_custom_background: Whether the renderer applies the background.
        agency_id: Agency of the bound article, if any.
        pair_id: Pair id of the bound article (0 if unpaired or empty).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    position: GridPosition
    size: GridSize
    kind: AssignmentKind
    visual_key: str | None = None
    headline: str = ""
    description: str = ""
    background_name: str | None = None
    use_custom_background: bool = False
    agency_id: int | None = None
    pair_id: int = 0

    @property
    def is_empty(self) -> bool:
        """Whether this is an empty placeholder assignment."""
        return self.kind == AssignmentKind.EMPTY
