"""Binding of selected articles to preset slots."""

import random

import structlog

from src.articles.models import Article
from src.articles.pool import GenrePool
from src.config.constants import COMPONENT_LAYOUT
from src.data_model.base import SizeCategory
from src.data_model.errors import LayoutConsistencyError
from src.layout.models import (
    AssignmentKind,
    BlockAssignment,
    LayoutBlock,
    LayoutPreset,
)
from src.layout.visual_keys import VisualKeyMapping
from src.selector.models import DailySelection


logger = structlog.get_logger()

# Smaller categories a slot accepts when no exact filler is left, best first
FILLER_FALLBACKS: dict[SizeCategory, tuple[SizeCategory, ...]] = {
    SizeCategory.SHORT: (),
    SizeCategory.MEDIUM: (SizeCategory.SHORT,),
    SizeCategory.LONG: (SizeCategory.MEDIUM, SizeCategory.SHORT),
}


def take_fitting_article(
    category: SizeCategory, queue: list[Article]
) -> Article | None:
    """Remove and return the best-fitting article for a slot category.

    An exact category match is preferred; medium slots fall back to short
    articles, long slots to medium and then short articles.

    Args:
        category: Category of the slot to fill.
        queue: Filler queue, searched front first and mutated in place.

    Returns:
        The removed article, or None if nothing fits.
    """
    for wanted in (category, *FILLER_FALLBACKS[category]):
        for index, article in enumerate(queue):
            if article.size_category == wanted:
                return queue.pop(index)
    return None


class SlotAssigner:
    """Binds important, featured and filler articles to a preset's slots."""

    def __init__(
        self,
        visual_keys: VisualKeyMapping,
        short_limit: int,
        medium_limit: int,
        background_sizes: list[str],
        rng: random.Random,
        run_id: str | None = None,
    ) -> None:
        """Initialize the assigner.

        Args:
            visual_keys: Visual key table.
            short_limit: Maximum slot area of a short slot.
            medium_limit: Maximum slot area of a medium slot.
            background_sizes: Slot sizes ("WxH") that show article backgrounds.
            rng: Random source shared with the rest of the build.
            run_id: Optional run identifier for logging.
        """
        self._visual_keys = visual_keys
        self._short_limit = short_limit
        self._medium_limit = medium_limit
        self._background_sizes = set(background_sizes)
        self._rng = rng
        self._log = logger.bind(component=COMPONENT_LAYOUT)
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def _category(self, block: LayoutBlock) -> SizeCategory:
        return block.category(self._short_limit, self._medium_limit)

    def assign(
        self,
        preset: LayoutPreset,
        selection: DailySelection,
        filler_pool: GenrePool,
    ) -> list[BlockAssignment]:
        """Bind every slot of a preset.

        Args:
            preset: Matched preset.
            selection: The day's selection.
            filler_pool: Filler pool; used fillers are removed from its queue.

        Returns:
            One assignment per slot, in preset order.

        Raises:
            LayoutConsistencyError: If an important article finds no slot.
        """
        bound: dict[int, BlockAssignment] = {}

        for article in selection.important:
            index = self._find_free(
                preset, bound, important=True, category=article.size_category
            )
            if index is None:
                self._log.error(
                    "invariant_violation",
                    error_type="important_article_unbound",
                    preset=preset.name,
                    headline=article.headline,
                    category=article.size_category.value,
                )
                raise LayoutConsistencyError(
                    preset.name, article.headline, article.size_category
                )
            bound[index] = self._bind(
                preset.blocks[index], article, AssignmentKind.IMPORTANT
            )

        featured_index = self._find_free(
            preset, bound, important=False, category=SizeCategory.SHORT
        )
        if featured_index is None:
            self._log.warning(
                "featured_slot_missing",
                preset=preset.name,
                headline=selection.featured.headline,
            )
        else:
            bound[featured_index] = self._bind(
                preset.blocks[featured_index],
                selection.featured,
                AssignmentKind.FEATURED,
            )

        empty_positions: list[tuple[int, int]] = []
        for index, block in enumerate(preset.blocks):
            if index in bound or block.important:
                continue
            article = take_fitting_article(self._category(block), filler_pool.queue)
            if article is None:
                bound[index] = self._empty(block)
                empty_positions.append(block.position.as_tuple())
            else:
                bound[index] = self._bind(block, article, AssignmentKind.FILLER)

        if empty_positions:
            self._log.warning(
                "filler_slots_unfilled",
                preset=preset.name,
                positions=empty_positions,
            )

        assignments = [bound[i] for i in sorted(bound)]
        self._log.info(
            "slots_assigned",
            preset=preset.name,
            assignment_count=len(assignments),
            empty_count=len(empty_positions),
        )
        return assignments

    def _find_free(
        self,
        preset: LayoutPreset,
        bound: dict[int, BlockAssignment],
        important: bool,
        category: SizeCategory,
    ) -> int | None:
        """Index of the first unbound slot with the given flag and category."""
        for index, block in enumerate(preset.blocks):
            if index in bound or block.important != important:
                continue
            if self._category(block) == category:
                return index
        return None

    def _bind(
        self, block: LayoutBlock, article: Article, kind: AssignmentKind
    ) -> BlockAssignment:
        is_featured = kind == AssignmentKind.FEATURED
        show_background = is_featured or block.size.label in self._background_sizes
        return BlockAssignment(
            position=block.position,
            size=block.size,
            kind=kind,
            visual_key=self._visual_keys.lookup(
                block.size, article.agency_id, block.important, self._rng
            ),
            headline=article.headline,
            description=article.description,
            background_name=article.background_name if show_background else None,
            use_custom_background=show_background,
            agency_id=article.agency_id,
            pair_id=article.pair_id,
        )

    def _empty(self, block: LayoutBlock) -> BlockAssignment:
        return BlockAssignment(
            position=block.position,
            size=block.size,
            kind=AssignmentKind.EMPTY,
        )
