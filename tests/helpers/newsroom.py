"""Shared, deterministic newspaper content for tests."""

from src.articles.models import Article
from src.articles.pool import GenrePool, PoolRegistry
from src.config.effective import EffectiveConfig
from src.config.schemas.newspaper import NewspaperConfig
from src.config.schemas.pools import PoolsConfig
from src.data_model.base import SizeCategory
from src.layout.models import PresetCatalog
from src.layout.visual_keys import VisualKeyMapping


# Important slots: front-a has 2 short + 1 medium, front-b 1 short + 2 medium.
# With two genres (one short, one medium) and a hype reveal, every selection
# needs one of the two.
PRESETS = [
    {
        "name": "front-a",
        "blocks": [
            {"position": [0, 0], "size": "1x1", "important": True},
            {"position": [1, 0], "size": "1x1", "important": True},
            {"position": [2, 0], "size": "2x1", "important": True},
            {"position": [0, 1], "size": "1x1"},
            {"position": [1, 1], "size": "1x1"},
            {"position": [2, 1], "size": "2x1"},
            {"position": [0, 2], "size": "2x2"},
        ],
    },
    {
        "name": "front-b",
        "blocks": [
            {"position": [0, 0], "size": "1x1", "important": True},
            {"position": [1, 0], "size": "2x1", "important": True},
            {"position": [0, 1], "size": "1x2", "important": True},
            {"position": [3, 0], "size": "1x1"},
            {"position": [1, 1], "size": "2x2"},
            {"position": [3, 1], "size": "1x1"},
        ],
    },
]

TWO_SHORT_PRESET = {
    "name": "front-c",
    "blocks": [
        {"position": [0, 0], "size": "1x1", "important": True},
        {"position": [1, 0], "size": "1x1", "important": True},
        {"position": [2, 0], "size": "1x1"},
    ],
}


def make_article(headline: str, **overrides: object) -> Article:
    """Create a short article with the given field overrides."""
    data: dict[str, object] = {
        "headline": headline,
        "size_category": SizeCategory.SHORT,
        "value_positive": 1.0,
    }
    data.update(overrides)
    return Article.model_validate(data)


def make_pair(pair_id: int, category: SizeCategory, **overrides: object) -> list[Article]:
    """Create both agency versions of one news event."""
    return [
        make_article(
            f"{pair_id}-{side}",
            pair_id=pair_id,
            agency_id=agency_id,
            size_category=category,
            **overrides,
        )
        for agency_id, side in ((0, "a"), (1, "b"))
    ]


def make_effective_config(
    presets: list[dict[str, object]] | None = None,
    **selection: object,
) -> EffectiveConfig:
    """Create an effective configuration with two genres.

    Selection defaults to two genres and a fifth slot that always goes to
    filler; keyword arguments override selection fields.
    """
    selection_data: dict[str, object] = {"genre_count": 2, "fifth_slot_chance": 0}
    selection_data.update(selection)
    return EffectiveConfig(
        newspaper=NewspaperConfig.model_validate({"selection": selection_data}),
        pools=PoolsConfig.model_validate(
            {
                "genres": [
                    {"name": "politics", "file": "politics.json"},
                    {"name": "science", "file": "science.json"},
                ],
                "featured": {
                    "name": "featured",
                    "file": "featured.json",
                    "uses_pairs": False,
                    "auto_reshuffle": False,
                },
                "filler": {"name": "filler", "file": "filler.json", "uses_pairs": False},
            }
        ),
        presets=PresetCatalog.model_validate({"presets": presets or PRESETS}),
        visual_keys=VisualKeyMapping(),
        run_id="test-run",
    )


def make_registry() -> PoolRegistry:
    """Create a registry with short politics pairs and medium science pairs.

    Queues start empty; the first rebuild pass fills them.
    """
    politics = [a for pair_id in (1, 2, 3) for a in make_pair(pair_id, SizeCategory.SHORT)]
    science = [a for pair_id in (11, 12, 13) for a in make_pair(pair_id, SizeCategory.MEDIUM)]
    featured = [
        make_article(f"photo-{i}", agency_id=2, background_name=f"bg_{i}") for i in range(3)
    ]
    filler = [
        make_article(f"filler-{category.value}-{i}", agency_id=3, size_category=category)
        for category in SizeCategory
        for i in range(3)
    ]
    return PoolRegistry(
        genres={
            "politics": GenrePool(name="politics", catalog=politics, source=list(politics)),
            "science": GenrePool(name="science", catalog=science, source=list(science)),
        },
        featured=GenrePool(
            name="featured",
            uses_pairs=False,
            auto_reshuffle=False,
            catalog=featured,
            source=list(featured),
        ),
        filler=GenrePool(
            name="filler", uses_pairs=False, catalog=filler, source=list(filler)
        ),
    )
