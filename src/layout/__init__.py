"""Layout preset matching, slot assignment and visual keys."""

from src.layout.assigner import SlotAssigner, take_fitting_article
from src.layout.matcher import PresetMatcher
from src.layout.models import (
    AssignmentKind,
    BlockAssignment,
    GridPosition,
    GridSize,
    LayoutBlock,
    LayoutPreset,
    PresetCatalog,
    SizeCounts,
)
from src.layout.visual_keys import VisualKeyEntry, VisualKeyMapping


__all__ = [
    "AssignmentKind",
    "BlockAssignment",
    "GridPosition",
    "GridSize",
    "LayoutBlock",
    "LayoutPreset",
    "PresetCatalog",
    "PresetMatcher",
    "SizeCounts",
    "SlotAssigner",
    "VisualKeyEntry",
    "VisualKeyMapping",
    "take_fitting_article",
]
