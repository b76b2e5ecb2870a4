"""Article ingestion from JSON files."""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import structlog

from src.articles.models import Article, classify_length, pairing_violations
from src.config.constants import COMPONENT_IMPORTER
from src.config.schemas.newspaper import ArticleSizeConfig, CategoryIdsConfig


logger = structlog.get_logger()

SIZE_CATEGORY_KEY = "SizeCategory"
DESCRIPTION_KEY = "Description"

# Snake_case names are for code only; ingested records must use the
# PascalCase keys that classification reads.
ARTICLE_FIELD_NAMES = frozenset(Article.model_fields)


class ArticleImporter:
    """Parses article JSON arrays into validated Article models.

    Articles are classified by description length. A record that already
    carries an integer SizeCategory keeps it, mapped back through the
    configured category ids.
    """

    def __init__(
        self,
        article_size: ArticleSizeConfig,
        categories: CategoryIdsConfig,
        run_id: str | None = None,
    ) -> None:
        """Initialize the importer.

        Args:
            article_size: Description length thresholds.
            categories: Integer ids of the size categories.
            run_id: Optional run identifier for logging.
        """
        self._article_size = article_size
        self._categories = categories
        self._log = logger.bind(component=COMPONENT_IMPORTER)
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def load_file(self, path: Path) -> list[Article]:
        """Load one JSON article file.

        Args:
            path: Path to a JSON array of flat article objects.

        Returns:
            Parsed articles in file order.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file is not valid JSON.
            ValueError: If the top-level value is not an array, or a record
                uses model field names instead of the JSON keys.
            pydantic.ValidationError: If a record is invalid.
        """
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            msg = f"Article file {path} must contain a JSON array"
            raise ValueError(msg)
        return self.load_records(data, source=str(path))

    def load_records(
        self,
        records: Iterable[Mapping[str, Any]],
        source: str = "<records>",
    ) -> list[Article]:
        """Classify and validate raw article records.

        Args:
            records: Flat article objects with PascalCase keys.
            source: Source label used in log events.

        Returns:
            Parsed articles in input order.
        """
        articles = [self._parse_record(record) for record in records]

        violations = pairing_violations(articles)
        if violations:
            self._log.warning(
                "pairing_contract_violated",
                source=source,
                pair_counts=violations,
            )

        self._log.info(
            "articles_imported",
            source=source,
            article_count=len(articles),
        )
        return articles

    def _parse_record(self, record: Mapping[str, Any]) -> Article:
        data = dict(record)
        field_names = sorted(ARTICLE_FIELD_NAMES.intersection(data))
        if field_names:
            msg = (
                f"Article record '{data.get('Headline', '?')}' uses model field "
                f"names instead of JSON keys: {', '.join(field_names)}"
            )
            raise ValueError(msg)

        description = data.get(DESCRIPTION_KEY) or ""
        length = len(description)

        if length > self._article_size.long_max_length:
            self._log.warning(
                "article_exceeds_max_length",
                headline=data.get("Headline"),
                excess=length - self._article_size.long_max_length,
            )

        category_id = data.get(SIZE_CATEGORY_KEY)
        if isinstance(category_id, int) and not isinstance(category_id, bool):
            data[SIZE_CATEGORY_KEY] = self._categories.category_for(category_id)
        else:
            data[SIZE_CATEGORY_KEY] = classify_length(
                length,
                self._article_size.short_max_length,
                self._article_size.medium_max_length,
            )
        return Article.model_validate(data)
