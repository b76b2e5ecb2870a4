"""Effective configuration combining all validated configs."""

import hashlib
import json
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from src.config.schemas.newspaper import NewspaperConfig
from src.config.schemas.pools import PoolConfig, PoolsConfig
from src.layout.models import LayoutPreset, PresetCatalog
from src.layout.visual_keys import VisualKeyMapping


class EffectiveConfig(BaseModel):
    """Combined effective configuration for a run.

    This represents the immutable, normalized configuration that is
    used throughout a run. Once created, it cannot be modified.

    Attributes:
        newspaper: Validated newspaper tuning.
        pools: Validated pool definitions.
        presets: Validated layout preset catalog.
        visual_keys: Validated visual key table.
        pools_dir: Directory that pool article files are relative to.
        file_checksums: SHA-256 checksums of source files.
        run_id: Unique identifier for the run.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    newspaper: NewspaperConfig
    pools: PoolsConfig
    presets: PresetCatalog
    visual_keys: VisualKeyMapping
    pools_dir: str = "."
    file_checksums: Annotated[dict[str, str], Field(default_factory=dict)]
    run_id: str

    def to_normalized_dict(self) -> dict[str, object]:
        """Convert to a normalized dictionary with stable key ordering.

        Returns:
            Dictionary representation with sorted keys at all levels.
        """
        result: dict[str, object] = json.loads(self.to_normalized_json())
        return result

    def to_normalized_json(self) -> str:
        """Convert to normalized JSON with stable ordering.

        Returns:
            JSON string with sorted keys.
        """
        data = self.model_dump(mode="json")
        return json.dumps(data, sort_keys=True, separators=(",", ":"))

    def compute_checksum(self) -> str:
        """Compute SHA-256 checksum of normalized configuration.

        Returns:
            Hex-encoded SHA-256 checksum.
        """
        normalized = self.to_normalized_json()
        return hashlib.sha256(normalized.encode("utf-8")).hexdigest()

    def all_pools(self) -> list[PoolConfig]:
        """Get every pool definition (genres, featured, filler)."""
        return [*self.pools.genres, self.pools.featured, self.pools.filler]

    def pool_path(self, pool: PoolConfig) -> Path:
        """Resolve the article file of a pool.

        Args:
            pool: Pool definition.

        Returns:
            Path of the pool's JSON article file.
        """
        return Path(self.pools_dir) / pool.file

    def get_preset(self, name: str) -> LayoutPreset | None:
        """Get a preset by name.

        Args:
            name: The preset name to look up.

        Returns:
            LayoutPreset if found, None otherwise.
        """
        for preset in self.presets.presets:
            if preset.name == name:
                return preset
        return None

    def summary(self) -> dict[str, object]:
        """Get a summary of the effective configuration.

        Returns:
            Dictionary with summary information.
        """
        return {
            "run_id": self.run_id,
            "genre_pool_count": len(self.pools.genres),
            "preset_count": len(self.presets.presets),
            "visual_key_entry_count": len(self.visual_keys.entries),
            "genre_count": self.newspaper.selection.genre_count,
            "config_checksum": self.compute_checksum(),
            "file_checksums": self.file_checksums,
        }
