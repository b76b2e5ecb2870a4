"""Daily article selection.

The selector pulls the day's important articles from the genre queues,
optionally reveals the hidden agency counterpart of one or two of them,
and draws the featured article from its FIFO queue.
"""

import math
import random
from collections.abc import Callable

import structlog

from src.articles.models import Article
from src.articles.pool import GenrePool, PoolRegistry
from src.config.constants import COMPONENT_SELECTOR
from src.config.schemas.newspaper import SelectionConfig
from src.data_model.errors import PoolExhaustedError
from src.queue_builder.builder import QueueBuilder
from src.selector.models import (
    DailySelection,
    FifthSlotOutcome,
    PairKey,
    SelectionDraft,
    SelectionSession,
    SelectionStep,
)


logger = structlog.get_logger()

# A genre needs two queued entries so that a pair can be drawn whole
MIN_GENRE_QUEUE = 2


def genre_weight(base: float, was_previous: bool, penalty: float) -> float:
    """Apply the repeat penalty to a genre's random base weight.

    Args:
        base: Uniform random base weight.
        was_previous: Whether the genre was chosen by the previous build.
        penalty: Repeat penalty factor in [0, 1].

    Returns:
        Final weight, never larger than ``base``.
    """
    return base * penalty if was_previous else base


class Selector:
    """Selects the important and featured articles for one edition."""

    def __init__(
        self,
        config: SelectionConfig,
        queue_builder: QueueBuilder,
        session: SelectionSession,
        rng: random.Random,
        run_id: str | None = None,
    ) -> None:
        """Initialize the selector.

        Args:
            config: Selection tuning.
            queue_builder: Builder used for the rebuild-if-needed passes.
            session: Cross-build state (anti-repetition memory).
            rng: Random source shared with the rest of the build.
            run_id: Optional run identifier for logging.
        """
        self._config = config
        self._queue_builder = queue_builder
        self._session = session
        self._rng = rng
        self._log = logger.bind(component=COMPONENT_SELECTOR)
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    @property
    def session(self) -> SelectionSession:
        """Get the cross-build session state."""
        return self._session

    def select(
        self,
        registry: PoolRegistry,
        on_step: Callable[[SelectionStep], None] | None = None,
    ) -> DailySelection:
        """Run the full selection.

        Args:
            registry: Pools to draw from.
            on_step: Called after each checkpoint of the selection, in order.

        Returns:
            The day's selection.

        Raises:
            PoolExhaustedError: If the featured queue is empty after rebuild.
        """

        def reached(step: SelectionStep) -> None:
            if on_step is not None:
                on_step(step)

        draft = SelectionDraft()
        draft.rebuilt_pools.extend(self._queue_builder.rebuild_if_needed(registry))
        reached(SelectionStep.QUEUES_REBUILT)

        pools = self.select_genres(registry, draft)
        reached(SelectionStep.GENRES_SELECTED)

        self.pick_primaries(pools, draft)
        reached(SelectionStep.ARTICLES_PICKED)

        self.resolve_extra_slots(draft)
        self.pick_featured(registry, draft)
        draft.rebuilt_pools.extend(self._queue_builder.rebuild_if_needed(registry))
        selection = self.finalize(draft)
        reached(SelectionStep.EXTRAS_RESOLVED)
        return selection

    def select_genres(
        self, registry: PoolRegistry, draft: SelectionDraft
    ) -> list[GenrePool]:
        """Choose the day's genres by penalized random weight.

        Genres with fewer than two queued entries are not candidates.
        The chosen names become the session's anti-repetition memory.

        Args:
            registry: Pools to choose from.
            draft: Selection in progress.

        Returns:
            Chosen pools, highest weight first.
        """
        weighted: list[tuple[GenrePool, float]] = []
        skipped: list[str] = []
        for pool in registry.genres.values():
            if len(pool.queue) < MIN_GENRE_QUEUE:
                skipped.append(pool.name)
                if pool.queue:
                    # A lone leftover keeps the queue non-empty, so it is
                    # never rebuilt and the genre stays out until new game.
                    self._log.warning(
                        "genre_stranded",
                        genre=pool.name,
                        queued=[a.headline for a in pool.queue],
                    )
                continue
            weight = genre_weight(
                self._rng.random(),
                self._session.was_previous(pool.name),
                self._config.repeat_penalty_factor,
            )
            weighted.append((pool, weight))

        weighted.sort(key=lambda entry: entry[1], reverse=True)
        chosen = [pool for pool, _ in weighted[: self._config.genre_count]]

        draft.genres = [pool.name for pool in chosen]
        self._session.remember(draft.genres)

        if skipped:
            self._log.info("genres_skipped_short_queue", genres=skipped)
        self._log.info(
            "genres_selected",
            genres=draft.genres,
            weights={pool.name: round(weight, 4) for pool, weight in weighted},
        )
        return chosen

    def pick_primaries(self, pools: list[GenrePool], draft: SelectionDraft) -> None:
        """Take the front entry (or one side of the front pair) of each pool.

        Args:
            pools: Chosen genre pools.
            draft: Selection in progress.
        """
        for pool in pools:
            queue = pool.queue
            if not queue:
                continue
            first = queue[0]
            second = queue[1] if len(queue) > 1 else None
            if first.is_paired and second is not None and second.pair_id == first.pair_id:
                shown = first if self._rng.random() < 0.5 else second
                draft.pair_map[PairKey(pool.name, first.pair_id)] = (first, second)
                pool.pop_front(2)
            else:
                shown = first
                pool.pop_front(1)
            draft.important.append(shown)
            self._log.debug(
                "primary_picked",
                genre=pool.name,
                headline=shown.headline,
                pair_id=shown.pair_id,
                agency_id=shown.agency_id,
            )

    def resolve_extra_slots(self, draft: SelectionDraft) -> None:
        """Resolve the hype slot and the optional fifth slot.

        Args:
            draft: Selection in progress.
        """
        if self._config.hype_slot_enabled:
            draft.hype_revealed = self.resolve_continuation(draft)

        if not self._config.fifth_slot_enabled:
            draft.fifth_slot = FifthSlotOutcome.DISABLED
            return

        roll = self._rng.random()
        if roll < self._config.fifth_slot_chance / 100:
            revealed = self.resolve_continuation(draft)
            draft.fifth_slot = (
                FifthSlotOutcome.CONTINUATION
                if revealed is not None
                else FifthSlotOutcome.NO_CANDIDATE
            )
        else:
            draft.fifth_slot = FifthSlotOutcome.FILLER
        self._log.info("fifth_slot_resolved", outcome=draft.fifth_slot.value)

    def continuation_candidates(self, draft: SelectionDraft) -> list[Article]:
        """Shown articles whose hidden counterpart can still be revealed."""
        candidates: list[Article] = []
        for article in draft.important:
            key = draft.pair_key(article)
            if key is not None and key not in draft.revealed:
                candidates.append(article)
        return candidates

    def resolve_continuation(self, draft: SelectionDraft) -> PairKey | None:
        """Reveal the counterpart of one shown article, weighted by value.

        Candidate weights are normalized, clamped into the configured
        chance band and drawn as ``uniform / weight``, lowest draw wins.

        Args:
            draft: Selection in progress.

        Returns:
            Pair that was revealed, or None if the slot was skipped.
        """
        candidates = self.continuation_candidates(draft)
        weights = [a.continuation_weight for a in candidates]
        total = sum(weights)
        if not candidates or total <= 0:
            self._log.info(
                "continuation_skipped",
                candidate_count=len(candidates),
                total_weight=total,
            )
            return None

        low = self._config.hype_min_chance / 100
        high = self._config.hype_max_chance / 100
        clamped = [min(max(w / total, low), high) for w in weights]

        draws = [
            self._rng.random() / chance if chance > 0 else math.inf
            for chance in clamped
        ]
        best = min(range(len(candidates)), key=draws.__getitem__)
        chosen = candidates[best]
        key = draft.pair_key(chosen)
        counterpart = draft.counterpart(chosen)
        if key is None or counterpart is None:
            return None

        draft.important.append(counterpart)
        draft.revealed.append(key)
        self._log.info(
            "continuation_revealed",
            pair=key.label,
            headline=counterpart.headline,
            chances={
                candidate.headline: round(chance * 100, 1)
                for candidate, chance in zip(candidates, clamped)
            },
        )
        return key

    def pick_featured(self, registry: PoolRegistry, draft: SelectionDraft) -> None:
        """Pop the front of the featured queue.

        Args:
            registry: Pools holding the featured queue.
            draft: Selection in progress.

        Raises:
            PoolExhaustedError: If the featured queue is empty.
        """
        featured_pool = registry.featured
        if not featured_pool.queue:
            raise PoolExhaustedError(featured_pool.name)
        draft.featured = featured_pool.pop_front(1)[0]
        self._log.debug("featured_picked", headline=draft.featured.headline)

    def finalize(self, draft: SelectionDraft) -> DailySelection:
        """Freeze a draft into the day's selection.

        Raises:
            PoolExhaustedError: If no featured article was picked.
        """
        if draft.featured is None:
            raise PoolExhaustedError("featured")
        selection = DailySelection(
            important=draft.important,
            featured=draft.featured,
            pair_map=draft.pair_map,
            genres=draft.genres,
            revealed_pairs=draft.revealed,
            fifth_slot=draft.fifth_slot,
            rebuilt_pools=draft.rebuilt_pools,
        )
        self._log.info(
            "selection_complete",
            important_count=len(selection.important),
            required={
                cat.value: count
                for cat, count in selection.required_counts().as_dict().items()
            },
            genres=selection.genres,
        )
        return selection
