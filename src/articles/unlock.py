"""Subgenre unlock gate."""

from collections.abc import Iterable

import structlog

from src.articles.models import Article


logger = structlog.get_logger()


class TagGate:
    """Set of unlocked subgenre tags filtering pool content.

    A gate created without tags is open: every article passes.
    """

    def __init__(self, unlocked_tags: Iterable[str] | None = None) -> None:
        """Initialize the gate.

        Args:
            unlocked_tags: Initially unlocked tags, or None for an open gate.
        """
        self._tags: set[str] | None = (
            None if unlocked_tags is None else {t.strip().lower() for t in unlocked_tags}
        )

    @property
    def is_open(self) -> bool:
        """Whether every subgenre passes the gate."""
        return self._tags is None

    @property
    def tags(self) -> frozenset[str]:
        """Currently unlocked tags (empty for an open gate)."""
        return frozenset(self._tags or ())

    def allows(self, article: Article) -> bool:
        """Check whether an article's subgenre is unlocked.

        Untagged articles always pass.
        """
        tag = article.subgenre.strip().lower()
        if self._tags is None or not tag:
            return True
        return tag in self._tags

    def filter(self, articles: Iterable[Article]) -> list[Article]:
        """Keep only articles whose subgenre is unlocked, preserving order."""
        return [a for a in articles if self.allows(a)]

    def unlock(self, tag: str) -> bool:
        """Unlock a tag.

        Args:
            tag: Tag to unlock (case-insensitive).

        Returns:
            True if the gate changed, False if the tag was already unlocked
            or the gate is open.
        """
        normalized = tag.strip().lower()
        if self._tags is None or normalized in self._tags:
            logger.info("tag_already_unlocked", component="unlock", tag=normalized)
            return False
        self._tags.add(normalized)
        logger.info(
            "tag_unlocked",
            component="unlock",
            tag=normalized,
            unlocked_count=len(self._tags),
        )
        return True
