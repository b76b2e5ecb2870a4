"""Article pools and the registry that owns them."""

from dataclasses import dataclass, field

import structlog

from src.articles.models import Article
from src.articles.unlock import TagGate
from src.data_model.base import SizeCategory


logger = structlog.get_logger()


@dataclass
class GenrePool:
    """One article pool with its eligible queue.

    The source list is the static content of the pool for the current
    unlock state; the queue is the reshuffled working copy drained from
    the front by the selector and the slot assigner.

    Attributes:
        name: Pool name (genre name for important pools).
        uses_pairs: Whether the pool holds agency pairs.
        auto_reshuffle: Unpaired pools only: rebuild when a size category
            is missing from the queue.
        catalog: Every imported article, regardless of unlock state.
        source: Catalog filtered by the unlock gate.
        queue: Eligible queue, front first.
    """

    name: str
    uses_pairs: bool = True
    auto_reshuffle: bool = True
    catalog: list[Article] = field(default_factory=list)
    source: list[Article] = field(default_factory=list)
    queue: list[Article] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.queue)

    def categories_present(self) -> set[SizeCategory]:
        """Size categories currently present in the queue."""
        return {a.size_category for a in self.queue}

    def pop_front(self, count: int = 1) -> list[Article]:
        """Remove and return the first ``count`` queued articles."""
        taken = self.queue[:count]
        del self.queue[:count]
        return taken

    def refresh_source(self, gate: TagGate) -> bool:
        """Recompute the source list from the catalog.

        Args:
            gate: Unlock gate to filter with.

        Returns:
            True if the source list changed.
        """
        filtered = gate.filter(self.catalog)
        changed = filtered != self.source
        self.source = filtered
        return changed


@dataclass
class PoolRegistry:
    """Arena owning every pool used by a newspaper session.

    Attributes:
        genres: Important genre pools keyed by name, in configured order.
        featured: Rotating featured pool, drawn FIFO.
        filler: Random filler pool for non-important slots.
        gate: Subgenre unlock gate applied to every pool.
    """

    genres: dict[str, GenrePool]
    featured: GenrePool
    filler: GenrePool
    gate: TagGate = field(default_factory=TagGate)

    def all_pools(self) -> list[GenrePool]:
        """Every pool, genres first, then featured and filler."""
        return [*self.genres.values(), self.featured, self.filler]

    def apply_gate(self) -> list[str]:
        """Refresh every pool's source list from the unlock gate.

        Pools whose source changed have their queue cleared so the next
        rebuild pass reshuffles them.

        Returns:
            Names of pools whose source changed.
        """
        changed: list[str] = []
        for pool in self.all_pools():
            if pool.refresh_source(self.gate):
                pool.queue.clear()
                changed.append(pool.name)
        return changed

    def unlock_tag(self, tag: str) -> list[str]:
        """Unlock a subgenre tag and refresh affected pools.

        Args:
            tag: Tag to unlock.

        Returns:
            Names of pools whose source changed (empty when the tag was
            already unlocked).
        """
        if not self.gate.unlock(tag):
            return []
        changed = self.apply_gate()
        logger.info(
            "eligible_pools_updated",
            component="unlock",
            tag=tag,
            changed_pools=changed,
        )
        return changed
