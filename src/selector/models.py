"""Selection session state and the daily selection result."""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from src.articles.models import Article
from src.data_model.base import SizeCounts


class PairKey(NamedTuple):
    """Identity of a drawn pair.

    Pair ids are numbered per pool file, so two genres can both hold a
    pair 1; the genre name keeps them apart.
    """

    genre: str
    pair_id: int

    @property
    def label(self) -> str:
        """Short form used in log events, e.g. ``politics/1``."""
        return f"{self.genre}/{self.pair_id}"


class SelectionStep(str, Enum):
    """Checkpoints reported while a selection runs.

    - QUEUES_REBUILT: the cycle-start rebuild pass finished
    - GENRES_SELECTED: the day's genres were chosen
    - ARTICLES_PICKED: one primary article was taken per genre
    - EXTRAS_RESOLVED: hype, fifth slot and featured pick are done
    """

    QUEUES_REBUILT = "queues_rebuilt"
    GENRES_SELECTED = "genres_selected"
    ARTICLES_PICKED = "articles_picked"
    EXTRAS_RESOLVED = "extras_resolved"


class FifthSlotOutcome(str, Enum):
    """How the optional fifth slot was resolved.

    - DISABLED: fifth slot switched off in configuration
    - CONTINUATION: a second continuation was revealed
    - FILLER: left to filler content by the chance roll
    - NO_CANDIDATE: the roll succeeded but nothing could be continued
    """

    DISABLED = "disabled"
    CONTINUATION = "continuation"
    FILLER = "filler"
    NO_CANDIDATE = "no_candidate"


@dataclass
class SelectionSession:
    """State carried from one build to the next.

    Attributes:
        previous_genres: Genre names chosen by the previous build.
        day: Number of editions built in this session.
    """

    previous_genres: list[str] = field(default_factory=list)
    day: int = 0

    def was_previous(self, genre: str) -> bool:
        """Check whether a genre was chosen by the previous build."""
        return genre in self.previous_genres

    def remember(self, genres: list[str]) -> None:
        """Replace the anti-repetition memory."""
        self.previous_genres = list(genres)

    def reset(self) -> None:
        """Forget everything at a new-game boundary."""
        self.previous_genres = []
        self.day = 0


@dataclass
class SelectionDraft:
    """Working state of one selection, discarded once it is finalized.

    Attributes:
        genres: Chosen genre names in weight order.
        important: Selected important articles in pick order.
        pair_map: Both members of every pair drawn today.
        revealed: Pairs whose hidden counterpart was already added.
        hype_revealed: Pair revealed by the hype slot, if any.
        fifth_slot: Outcome of the fifth slot.
        featured: Featured rotation article, once picked.
        rebuilt_pools: Pools reshuffled by the rebuild passes.
    """

    genres: list[str] = field(default_factory=list)
    important: list[Article] = field(default_factory=list)
    pair_map: dict[PairKey, tuple[Article, Article]] = field(default_factory=dict)
    revealed: list[PairKey] = field(default_factory=list)
    hype_revealed: PairKey | None = None
    fifth_slot: FifthSlotOutcome = FifthSlotOutcome.DISABLED
    featured: Article | None = None
    rebuilt_pools: list[str] = field(default_factory=list)

    def pair_key(self, article: Article) -> PairKey | None:
        """Find the drawn pair an article instance belongs to."""
        for key, (first, second) in self.pair_map.items():
            if article is first or article is second:
                return key
        return None

    def counterpart(self, article: Article) -> Article | None:
        """Get the hidden other half of an article's pair."""
        key = self.pair_key(article)
        if key is None:
            return None
        first, second = self.pair_map[key]
        return second if article is first else first


class DailySelection(BaseModel):
    """Everything the selector chose for one edition.

    Attributes:
        important: Important articles, primaries first, then continuations.
        featured: Featured rotation article.
        pair_map: Both members of every pair drawn today.
        genres: Chosen genre names.
        revealed_pairs: Pairs whose counterpart was revealed.
        fifth_slot: Outcome of the fifth slot.
        rebuilt_pools: Pools reshuffled while selecting.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    important: list[Article]
    featured: Article
    pair_map: dict[PairKey, tuple[Article, Article]]
    genres: list[str]
    revealed_pairs: list[PairKey]
    fifth_slot: FifthSlotOutcome = FifthSlotOutcome.DISABLED
    rebuilt_pools: list[str] = Field(default_factory=list)

    def required_counts(self) -> SizeCounts:
        """Important slot counts the layout preset must provide."""
        return SizeCounts.from_categories(a.size_category for a in self.important)
