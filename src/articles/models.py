"""Article data model and length classification."""

from collections import Counter
from collections.abc import Iterable
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from src.data_model.base import SizeCategory


class Article(BaseModel):
    """A single newspaper article.

    Field aliases follow the PascalCase keys of the article JSON files.

    Attributes:
        pair_id: Pair id shared by the two agency versions (0 = unpaired).
        headline: Article headline.
        description: Article body text.
        agency_id: Id of the agency that wrote this version.
        subgenre: Topic tag used by the unlock gate.
        value_positive: Positive reception value.
        value_negative: Negative reception value.
        size_category: Size category derived from the body length.
        story_id: Multi-part story id (0 = standalone).
        story_part: 1-based part number inside the story.
        background_name: Optional auxiliary background display key.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    pair_id: Annotated[int, Field(ge=0, alias="PairID")] = 0
    headline: Annotated[str, Field(min_length=1, alias="Headline")]
    description: Annotated[str, Field(alias="Description")] = ""
    agency_id: Annotated[int, Field(ge=0, alias="AgencyID")] = 0
    subgenre: Annotated[str, Field(alias="Subgenre")] = ""
    value_positive: Annotated[float, Field(ge=0.0, alias="ValuePositive")] = 0.0
    value_negative: Annotated[float, Field(ge=0.0, alias="ValueNegative")] = 0.0
    size_category: Annotated[SizeCategory, Field(alias="SizeCategory")]
    story_id: Annotated[int, Field(ge=0, alias="StoryID")] = 0
    story_part: Annotated[int, Field(ge=0, alias="StoryPart")] = 0
    background_name: Annotated[str | None, Field(alias="BackgroundName")] = None

    @property
    def is_paired(self) -> bool:
        """Whether the article belongs to an agency pair."""
        return self.pair_id != 0

    @property
    def continuation_weight(self) -> float:
        """Weight used when picking a story to continue."""
        return max(self.value_positive, self.value_negative)


def classify_length(length: int, short_max: int, medium_max: int) -> SizeCategory:
    """Classify a body length into a size category.

    Args:
        length: Description length in characters.
        short_max: Maximum length of a short article.
        medium_max: Maximum length of a medium article.

    Returns:
        Size category for the length.
    """
    if length <= short_max:
        return SizeCategory.SHORT
    if length <= medium_max:
        return SizeCategory.MEDIUM
    return SizeCategory.LONG


def pairing_violations(articles: Iterable[Article]) -> dict[int, int]:
    """Find pair ids that do not occur exactly twice.

    Args:
        articles: Articles of one pool.

    Returns:
        Mapping of offending pair id to its occurrence count.
    """
    counts = Counter(a.pair_id for a in articles if a.is_paired)
    return {pair_id: count for pair_id, count in sorted(counts.items()) if count != 2}
