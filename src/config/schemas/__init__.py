"""Configuration schema definitions."""

from src.config.schemas.newspaper import (
    ArticleSizeConfig,
    BlockAreaConfig,
    CategoryIdsConfig,
    LayoutConfig,
    NewspaperConfig,
    OffsetBreakpoints,
    SelectionConfig,
    StoryOffsetsConfig,
)
from src.config.schemas.pools import PoolConfig, PoolsConfig


__all__ = [
    "ArticleSizeConfig",
    "BlockAreaConfig",
    "CategoryIdsConfig",
    "LayoutConfig",
    "NewspaperConfig",
    "OffsetBreakpoints",
    "PoolConfig",
    "PoolsConfig",
    "SelectionConfig",
    "StoryOffsetsConfig",
]
