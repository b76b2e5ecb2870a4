"""Article blocks used while rebuilding a queue.

A block is either a single unpaired article or the two agency versions of
one paired news event. Blocks only exist during a rebuild and are
flattened back into articles afterwards.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from src.articles.models import Article
from src.config.constants import COMPONENT_QUEUE


logger = structlog.get_logger()


@dataclass(eq=False)
class ArticleBlock:
    """One or two articles scheduled as a unit.

    Blocks compare by identity so that position lookups inside a
    sequence never confuse two blocks with equal content.
    """

    articles: tuple[Article, ...]

    @property
    def story_id(self) -> int:
        return self.articles[0].story_id

    @property
    def story_part(self) -> int:
        return self.articles[0].story_part

    @property
    def is_story_starter(self) -> bool:
        """Whether the block can open the queue on its own."""
        return self.story_id == 0 or self.story_part == 1


def build_blocks(articles: Iterable[Article], pool_name: str = "") -> list[ArticleBlock]:
    """Partition articles into blocks.

    Paired articles are grouped by pair id into two-element blocks, in
    order of first appearance; unpaired articles become single blocks.
    A pair id that does not occur exactly twice is logged and excluded.

    Args:
        articles: Source articles of one pool.
        pool_name: Pool name used in log events.

    Returns:
        Paired blocks followed by single blocks.
    """
    groups: dict[int, list[Article]] = defaultdict(list)
    singles: list[ArticleBlock] = []
    for article in articles:
        if article.is_paired:
            groups[article.pair_id].append(article)
        else:
            singles.append(ArticleBlock((article,)))

    paired: list[ArticleBlock] = []
    for pair_id, members in groups.items():
        if len(members) != 2:
            logger.warning(
                "invalid_pair_group_excluded",
                component=COMPONENT_QUEUE,
                pool=pool_name,
                pair_id=pair_id,
                member_count=len(members),
            )
            continue
        paired.append(ArticleBlock(tuple(members)))

    return paired + singles


def flatten(blocks: Iterable[ArticleBlock]) -> list[Article]:
    """Flatten blocks back into an article sequence."""
    return [article for block in blocks for article in block.articles]
