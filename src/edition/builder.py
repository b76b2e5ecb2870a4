"""Edition build orchestration.

One call to ``build_edition`` runs the full cycle: rebuild queues, select
articles, match a preset and bind every slot. Only one build may be in
flight at a time; the pools it mutates belong to the builder.
"""

import random
import threading
import time
import uuid

import structlog

from src.articles.importer import ArticleImporter
from src.articles.pool import GenrePool, PoolRegistry
from src.articles.unlock import TagGate
from src.config.constants import COMPONENT_EDITION
from src.config.effective import EffectiveConfig
from src.config.schemas.pools import PoolConfig
from src.data_model.errors import BuildInProgressError
from src.edition.metrics import EditionMetrics
from src.edition.models import EditionResult
from src.edition.state_machine import BuildState, BuildStateMachine
from src.layout.assigner import SlotAssigner
from src.layout.matcher import PresetMatcher
from src.observability.logging import run_context
from src.queue_builder.builder import QueueBuilder
from src.selector.models import SelectionSession, SelectionStep
from src.selector.selector import Selector


logger = structlog.get_logger()

# Build states entered as the selector reaches each checkpoint
SELECTION_STATES: dict[SelectionStep, BuildState] = {
    SelectionStep.QUEUES_REBUILT: BuildState.QUEUES_REBUILT,
    SelectionStep.GENRES_SELECTED: BuildState.GENRES_SELECTED,
    SelectionStep.ARTICLES_PICKED: BuildState.ARTICLES_PICKED,
    SelectionStep.EXTRAS_RESOLVED: BuildState.HYPE_RESOLVED,
}


def load_registry(config: EffectiveConfig, importer: ArticleImporter) -> PoolRegistry:
    """Import every configured pool into a new registry.

    Queues start empty; the first rebuild pass fills them.

    Args:
        config: Effective configuration naming the pool files.
        importer: Importer used to parse the article files.

    Returns:
        Registry holding the genre, featured and filler pools.
    """

    def make_pool(pool_config: PoolConfig) -> GenrePool:
        return GenrePool(
            name=pool_config.name,
            uses_pairs=pool_config.uses_pairs,
            auto_reshuffle=pool_config.auto_reshuffle,
            catalog=importer.load_file(config.pool_path(pool_config)),
        )

    registry = PoolRegistry(
        genres={p.name: make_pool(p) for p in config.pools.genres},
        featured=make_pool(config.pools.featured),
        filler=make_pool(config.pools.filler),
        gate=TagGate(config.pools.unlocked_tags),
    )
    registry.apply_gate()
    return registry


class EditionBuilder:
    """Builds daily editions from a pool registry."""

    def __init__(
        self,
        config: EffectiveConfig,
        registry: PoolRegistry,
        rng: random.Random | None = None,
        session: SelectionSession | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            config: Effective configuration.
            registry: Pools owned by this builder.
            rng: Random source; a fresh unseeded one if omitted.
            session: Cross-build selection state; a new one if omitted.
        """
        self._config = config
        self._registry = registry
        self._rng = rng or random.Random()
        self._session = session or SelectionSession()
        self._lock = threading.Lock()
        self._state_machine = BuildStateMachine()
        self._metrics = EditionMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_EDITION)

        newspaper = config.newspaper
        self._queue_builder = QueueBuilder(newspaper.story_offsets, self._rng)
        self._selector = Selector(
            newspaper.selection, self._queue_builder, self._session, self._rng
        )
        self._matcher = PresetMatcher(
            config.presets.presets,
            newspaper.block_area.short_limit,
            newspaper.block_area.medium_limit,
            self._rng,
        )
        self._assigner = SlotAssigner(
            config.visual_keys,
            newspaper.block_area.short_limit,
            newspaper.block_area.medium_limit,
            newspaper.layout.background_sizes,
            self._rng,
        )

    @classmethod
    def from_config(
        cls, config: EffectiveConfig, seed: int | None = None
    ) -> "EditionBuilder":
        """Import the configured pools and create a builder.

        Args:
            config: Effective configuration.
            seed: Optional seed for reproducible editions.

        Returns:
            Builder owning a freshly imported registry.
        """
        importer = ArticleImporter(
            config.newspaper.article_size,
            config.newspaper.categories,
            run_id=config.run_id,
        )
        registry = load_registry(config, importer)
        return cls(config, registry, rng=random.Random(seed))

    @property
    def registry(self) -> PoolRegistry:
        """Get the pools owned by this builder."""
        return self._registry

    @property
    def session(self) -> SelectionSession:
        """Get the cross-build selection state."""
        return self._session

    @property
    def state(self) -> BuildState:
        """Get the build cycle state."""
        return self._state_machine.state

    def start_new_game(self) -> list[str]:
        """Reset session memory and reshuffle every pool.

        Returns:
            Names of rebuilt pools.

        Raises:
            BuildInProgressError: If a build is running.
        """
        if not self._lock.acquire(blocking=False):
            raise BuildInProgressError("new-game")
        try:
            self._session.reset()
            rebuilt = self._queue_builder.rebuild_all(self._registry)
            self._metrics.record_rebuilds(rebuilt)
            self._log.info("new_game_started", pools=len(rebuilt))
            return rebuilt
        finally:
            self._lock.release()

    def unlock_tag(self, tag: str) -> list[str]:
        """Unlock a subgenre tag between builds.

        Raises:
            BuildInProgressError: If a build is running.
        """
        if not self._lock.acquire(blocking=False):
            raise BuildInProgressError("unlock")
        try:
            return self._registry.unlock_tag(tag)
        finally:
            self._lock.release()

    def build_edition(self, day: int | None = None) -> EditionResult:
        """Build one edition.

        Args:
            day: In-game day to stamp on the edition; defaults to the next
                session day.

        Returns:
            The complete edition.

        Raises:
            BuildInProgressError: If another build is running.
            NewsdeskError: On any fatal build failure; no partial edition
                is returned.
        """
        run_id = str(uuid.uuid4())
        if not self._lock.acquire(blocking=False):
            self._log.warning("build_rejected_in_progress", run_id=run_id)
            raise BuildInProgressError(run_id)

        edition_day = day if day is not None else self._session.day + 1
        log = self._log.bind(run_id=run_id, day=edition_day)
        self._state_machine.bind_run(run_id)
        start_time = time.perf_counter()
        try:
            with run_context(run_id, edition_day):
                edition = self._run_cycle(run_id, edition_day)
        except Exception as e:
            failed_in = self._state_machine.state
            self._metrics.record_failure(type(e).__name__)
            log.error(
                "edition_build_failed",
                state=failed_in.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            if self._state_machine.can_transition(BuildState.FAILED):
                self._state_machine.transition(BuildState.FAILED)
                self._state_machine.transition(BuildState.IDLE)
            raise
        finally:
            self._lock.release()

        duration_ms = (time.perf_counter() - start_time) * 1000
        self._session.day = edition_day
        self._metrics.record_build(
            edition.preset_name, edition.empty_slot_count(), duration_ms
        )
        log.info(
            "edition_built",
            preset=edition.preset_name,
            genres=edition.genres,
            assignment_count=len(edition.assignments),
            checksum=edition.checksum,
            duration_ms=round(duration_ms, 2),
        )
        return edition

    def _on_selection_step(self, step: SelectionStep) -> None:
        self._state_machine.transition(SELECTION_STATES[step])

    def _run_cycle(self, run_id: str, day: int) -> EditionResult:
        sm = self._state_machine
        selection = self._selector.select(
            self._registry, on_step=self._on_selection_step
        )

        preset = self._matcher.match(selection.required_counts())
        sm.transition(BuildState.PRESET_MATCHED)

        assignments = self._assigner.assign(preset, selection, self._registry.filler)
        sm.transition(BuildState.SLOTS_ASSIGNED)

        self._metrics.record_rebuilds(selection.rebuilt_pools)
        edition = EditionResult(
            run_id=run_id,
            day=day,
            preset_name=preset.name,
            assignments=assignments,
            genres=selection.genres,
            revealed_pairs=selection.revealed_pairs,
            fifth_slot=selection.fifth_slot,
            rebuilt_pools=selection.rebuilt_pools,
        ).with_checksum()
        sm.transition(BuildState.IDLE)
        return edition
