"""Article pool configuration schema."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PoolConfig(BaseModel):
    """Configuration for a single article pool.

    Attributes:
        name: Unique pool name (also the genre name for important pools).
        file: JSON article file, relative to the pools.yaml directory.
        uses_pairs: Whether the pool holds agency pairs.
        auto_reshuffle: For unpaired pools, rebuild when a size category is
            missing from the queue. Ignored for paired pools.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Annotated[str, Field(min_length=1, max_length=100, pattern=r"^[a-z0-9_-]+$")]
    file: Annotated[str, Field(min_length=1)]
    uses_pairs: bool = True
    auto_reshuffle: bool = True

    @field_validator("file")
    @classmethod
    def validate_json_file(cls, v: str) -> str:
        """Ensure the pool file is a JSON file."""
        if not v.endswith(".json"):
            msg = "Pool file must be a .json file"
            raise ValueError(msg)
        return v


class PoolsConfig(BaseModel):
    """Root configuration for pools.yaml.

    Attributes:
        version: Schema version.
        genres: Important genre pools.
        featured: Rotating featured pool (drawn FIFO).
        filler: Random filler pool for non-important slots.
        unlocked_tags: Subgenre tags unlocked at game start; None unlocks all.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    genres: Annotated[list[PoolConfig], Field(min_length=1)]
    featured: PoolConfig
    filler: PoolConfig
    unlocked_tags: list[str] | None = None

    @model_validator(mode="after")
    def validate_unique_names(self) -> "PoolsConfig":
        """Ensure all pool names are unique."""
        names = [p.name for p in self.genres] + [self.featured.name, self.filler.name]
        duplicates = {name for name in names if names.count(name) > 1}
        if duplicates:
            msg = f"Duplicate pool names found: {sorted(duplicates)}"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_featured_is_fifo(self) -> "PoolsConfig":
        """The featured pool is a FIFO rotation and must not auto-reshuffle."""
        if self.featured.uses_pairs or self.featured.auto_reshuffle:
            msg = "featured pool must set uses_pairs: false and auto_reshuffle: false"
            raise ValueError(msg)
        return self
