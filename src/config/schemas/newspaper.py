"""Newspaper tuning configuration schema."""

import re
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.data_model.base import SizeCategory


SIZE_LABEL_PATTERN = re.compile(r"^\d+x\d+$")


class ArticleSizeConfig(BaseModel):
    """Body length thresholds used to classify articles.

    Attributes:
        short_max_length: Maximum description length for a short article.
        medium_max_length: Maximum description length for a medium article.
        long_max_length: Maximum allowed description length for any article.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    short_max_length: Annotated[int, Field(ge=1)] = 120
    medium_max_length: Annotated[int, Field(ge=1)] = 280
    long_max_length: Annotated[int, Field(ge=1)] = 480

    @model_validator(mode="after")
    def validate_increasing(self) -> "ArticleSizeConfig":
        """Ensure thresholds are strictly increasing."""
        if not (
            self.short_max_length < self.medium_max_length < self.long_max_length
        ):
            msg = "Length thresholds must satisfy short < medium < long"
            raise ValueError(msg)
        return self


class CategoryIdsConfig(BaseModel):
    """Integer ids assigned to each size category in serialized articles.

    Attributes:
        short: Id written for short articles.
        medium: Id written for medium articles.
        long: Id written for long articles.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    short: int = 0
    medium: int = 1
    long: int = 2

    @model_validator(mode="after")
    def validate_distinct(self) -> "CategoryIdsConfig":
        """Ensure every category has its own id."""
        if len({self.short, self.medium, self.long}) != 3:
            msg = "Category ids must be distinct"
            raise ValueError(msg)
        return self

    def id_for(self, category: SizeCategory) -> int:
        """Get the integer id of a category."""
        return {
            SizeCategory.SHORT: self.short,
            SizeCategory.MEDIUM: self.medium,
            SizeCategory.LONG: self.long,
        }[category]

    def category_for(self, category_id: int) -> SizeCategory:
        """Map an integer id back to its category.

        Args:
            category_id: Serialized category id.

        Returns:
            Matching size category.

        Raises:
            ValueError: If the id is not configured.
        """
        for category in SizeCategory:
            if self.id_for(category) == category_id:
                return category
        msg = f"Unknown size category id: {category_id}"
        raise ValueError(msg)


class BlockAreaConfig(BaseModel):
    """Slot area thresholds (width x height) used to classify layout blocks.

    Attributes:
        short_limit: Maximum area of a short block.
        medium_limit: Maximum area of a medium block.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    short_limit: Annotated[int, Field(ge=1)] = 1
    medium_limit: Annotated[int, Field(ge=1)] = 2

    @model_validator(mode="after")
    def validate_order(self) -> "BlockAreaConfig":
        """Ensure the medium limit is not below the short limit."""
        if self.medium_limit < self.short_limit:
            msg = "medium_limit must be >= short_limit"
            raise ValueError(msg)
        return self


class SelectionConfig(BaseModel):
    """Selector tuning.

    Attributes:
        genre_count: Genres selected per newspaper.
        repeat_penalty_factor: Multiplier for genres chosen in the previous
            build (0.0 strong penalty, 1.0 no penalty).
        hype_slot_enabled: Whether the hype continuation slot is active.
        fifth_slot_enabled: Whether the optional fifth slot is active.
        fifth_slot_chance: Chance in percent that the fifth slot is an
            important continuation instead of filler.
        hype_min_chance: Lower clamp in percent for continuation weights.
        hype_max_chance: Upper clamp in percent for continuation weights.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    genre_count: Annotated[int, Field(ge=1, le=20)] = 3
    repeat_penalty_factor: Annotated[float, Field(ge=0.0, le=1.0)] = 0.5
    hype_slot_enabled: bool = True
    fifth_slot_enabled: bool = True
    fifth_slot_chance: Annotated[float, Field(ge=0.0, le=100.0)] = 30.0
    hype_min_chance: Annotated[float, Field(ge=0.0, le=100.0)] = 10.0
    hype_max_chance: Annotated[float, Field(ge=0.0, le=100.0)] = 60.0

    @model_validator(mode="after")
    def validate_hype_band(self) -> "SelectionConfig":
        """Ensure the hype clamp band is not inverted."""
        if self.hype_min_chance > self.hype_max_chance:
            msg = "hype_min_chance must be <= hype_max_chance"
            raise ValueError(msg)
        return self


class OffsetBreakpoints(BaseModel):
    """Probability breakpoints for story continuation offsets.

    A draw below chance_offset_1 places the next part directly after the
    previous one, a draw below chance_offset_2 two slots after it, anything
    else three slots after it.

    Attributes:
        chance_offset_1: Breakpoint for offset 1.
        chance_offset_2: Breakpoint for offset 2.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    chance_offset_1: Annotated[float, Field(ge=0.0, le=1.0)] = 0.5
    chance_offset_2: Annotated[float, Field(ge=0.0, le=1.0)] = 0.8

    @model_validator(mode="after")
    def validate_order(self) -> "OffsetBreakpoints":
        """Ensure breakpoints are ordered."""
        if self.chance_offset_1 > self.chance_offset_2:
            msg = "chance_offset_1 must be <= chance_offset_2"
            raise ValueError(msg)
        return self


class StoryOffsetsConfig(BaseModel):
    """Breakpoint pairs for paired and unpaired pools."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    paired: OffsetBreakpoints = Field(default_factory=OffsetBreakpoints)
    unpaired: OffsetBreakpoints = Field(
        default_factory=lambda: OffsetBreakpoints(chance_offset_1=0.3, chance_offset_2=0.7)
    )

    def for_pool(self, uses_pairs: bool) -> OffsetBreakpoints:
        """Get the breakpoint pair for a pool kind."""
        return self.paired if uses_pairs else self.unpaired


class LayoutConfig(BaseModel):
    """Layout display options.

    Attributes:
        background_sizes: Slot sizes ("WxH") that show the article background.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    background_sizes: list[str] = Field(default_factory=lambda: ["2x2"])

    @field_validator("background_sizes")
    @classmethod
    def validate_sizes(cls, v: list[str]) -> list[str]:
        """Ensure sizes use the WxH format."""
        for size in v:
            if not SIZE_LABEL_PATTERN.match(size):
                msg = f"Invalid size '{size}', expected format like '2x1'"
                raise ValueError(msg)
        return v


class NewspaperConfig(BaseModel):
    """Root configuration for newspaper.yaml."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    article_size: ArticleSizeConfig = Field(default_factory=ArticleSizeConfig)
    categories: CategoryIdsConfig = Field(default_factory=CategoryIdsConfig)
    block_area: BlockAreaConfig = Field(default_factory=BlockAreaConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    story_offsets: StoryOffsetsConfig = Field(default_factory=StoryOffsetsConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
