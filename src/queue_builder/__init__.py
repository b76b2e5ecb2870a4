"""Eligibility queue building."""

from src.queue_builder.blocks import ArticleBlock, build_blocks, flatten
from src.queue_builder.builder import QueueBuilder, draw_offset, needs_rebuild


__all__ = [
    "ArticleBlock",
    "QueueBuilder",
    "build_blocks",
    "draw_offset",
    "flatten",
    "needs_rebuild",
]
