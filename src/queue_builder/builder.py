"""Eligibility queue builder.

Rebuilds a pool's eligible queue from its source list: story starters are
shuffled into a base sequence, then later story parts are inserted a few
slots after the previous part so that serial stories unfold over several
days.
"""

import random
from collections import defaultdict

import structlog

from src.articles.pool import GenrePool, PoolRegistry
from src.config.constants import COMPONENT_QUEUE
from src.config.schemas.newspaper import OffsetBreakpoints, StoryOffsetsConfig
from src.data_model.base import SIZE_CATEGORY_ORDER
from src.queue_builder.blocks import ArticleBlock, build_blocks, flatten


logger = structlog.get_logger()

StoryLookup = dict[int, dict[int, ArticleBlock]]


def needs_rebuild(pool: GenrePool) -> bool:
    """Check whether a pool's queue must be rebuilt before drawing.

    A queue is rebuilt when empty. Unpaired pools with auto reshuffle are
    also rebuilt when any size category is missing, so that slot filling
    always finds a candidate of every size.

    Args:
        pool: Pool to check.

    Returns:
        True if the queue must be rebuilt.
    """
    if not pool.queue:
        return True
    if pool.uses_pairs or not pool.auto_reshuffle:
        return False
    present = pool.categories_present()
    return any(category not in present for category in SIZE_CATEGORY_ORDER)


def draw_offset(rng: random.Random, breakpoints: OffsetBreakpoints) -> int:
    """Draw the insertion offset of a story continuation.

    Returns:
        1, 2 or 3 slots after the previous part.
    """
    r = rng.random()
    if r < breakpoints.chance_offset_1:
        return 1
    if r < breakpoints.chance_offset_2:
        return 2
    return 3


class QueueBuilder:
    """Builds and refreshes eligible queues for every pool in a registry."""

    def __init__(
        self,
        story_offsets: StoryOffsetsConfig,
        rng: random.Random,
        run_id: str | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            story_offsets: Continuation offset breakpoints.
            rng: Random source shared with the rest of the build.
            run_id: Optional run identifier for logging.
        """
        self._story_offsets = story_offsets
        self._rng = rng
        self._log = logger.bind(component=COMPONENT_QUEUE)
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def build_queue(self, pool: GenrePool) -> None:
        """Replace a pool's queue with a freshly shuffled one.

        Args:
            pool: Pool whose queue is rebuilt from its source list.
        """
        blocks = build_blocks(pool.source, pool_name=pool.name)

        base = [b for b in blocks if b.is_story_starter]
        self._rng.shuffle(base)

        stories = self._build_story_lookup(blocks)
        self._insert_continuations(
            base, stories, self._story_offsets.for_pool(pool.uses_pairs)
        )

        scheduled = {id(b) for b in base}
        unreachable = [b for b in blocks if id(b) not in scheduled]
        if unreachable:
            self._log.warning(
                "story_continuations_unreachable",
                pool=pool.name,
                excluded=[
                    {"story_id": b.story_id, "story_part": b.story_part}
                    for b in unreachable
                ],
            )

        pool.queue[:] = flatten(base)
        self._log.debug(
            "queue_rebuilt",
            pool=pool.name,
            queue_length=len(pool.queue),
            block_count=len(base),
        )

    def _build_story_lookup(self, blocks: list[ArticleBlock]) -> StoryLookup:
        """Group story blocks by story id, then by part.

        Only stories with more than one distinct part are kept.
        """
        grouped: dict[int, list[ArticleBlock]] = defaultdict(list)
        for block in blocks:
            if block.story_id != 0:
                grouped[block.story_id].append(block)

        lookup: StoryLookup = {}
        for story_id, story_blocks in grouped.items():
            parts: dict[int, ArticleBlock] = {}
            for block in story_blocks:
                if block.story_part in parts:
                    self._log.warning(
                        "duplicate_story_part",
                        story_id=story_id,
                        story_part=block.story_part,
                    )
                    continue
                parts[block.story_part] = block
            if len(parts) > 1:
                lookup[story_id] = parts
        return lookup

    def _insert_continuations(
        self,
        base: list[ArticleBlock],
        stories: StoryLookup,
        breakpoints: OffsetBreakpoints,
    ) -> None:
        """Insert parts 2, 3, ... of every started story into the base sequence."""
        for parts in stories.values():
            first = parts.get(1)
            if first is None or first not in base:
                continue

            index = base.index(first)
            part = 2
            while part in parts:
                offset = draw_offset(self._rng, breakpoints)
                index = max(0, min(index + offset, len(base)))
                base.insert(index, parts[part])
                part += 1

    def rebuild_if_needed(self, registry: PoolRegistry) -> list[str]:
        """Rebuild every pool whose queue needs it.

        Pools that do not need a rebuild are left untouched.

        Args:
            registry: Pools to check.

        Returns:
            Names of rebuilt pools.
        """
        rebuilt: list[str] = []
        for pool in registry.all_pools():
            if needs_rebuild(pool):
                self.build_queue(pool)
                rebuilt.append(pool.name)
        if rebuilt:
            self._log.info("pools_reshuffled", pools=rebuilt, reason="needed")
        return rebuilt

    def rebuild_all(self, registry: PoolRegistry) -> list[str]:
        """Rebuild every pool unconditionally.

        Args:
            registry: Pools to rebuild.

        Returns:
            Names of rebuilt pools.
        """
        rebuilt: list[str] = []
        for pool in registry.all_pools():
            self.build_queue(pool)
            rebuilt.append(pool.name)
        self._log.info("pools_reshuffled", pools=rebuilt, reason="full")
        return rebuilt
