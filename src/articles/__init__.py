"""Article models, pools, ingestion and the unlock gate."""

from src.articles.importer import ArticleImporter
from src.articles.models import Article, classify_length, pairing_violations
from src.articles.pool import GenrePool, PoolRegistry
from src.articles.unlock import TagGate


__all__ = [
    "Article",
    "ArticleImporter",
    "GenrePool",
    "PoolRegistry",
    "TagGate",
    "classify_length",
    "pairing_violations",
]
