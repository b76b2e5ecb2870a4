"""Integration tests for configuration loading."""

import shutil
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from src.config.constants import IMPORTANT_AGENCY_IDS, SUPPORT_AGENCY_IDS
from src.config.loader import ConfigLoader
from src.config.state_machine import ConfigState, ConfigStateError


FIXTURES_DIR = Path(__file__).parent.parent / "fixtures" / "config"


def _copy_fixtures(tmp_path: Path) -> Path:
    config_dir = tmp_path / "config"
    shutil.copytree(FIXTURES_DIR, config_dir)
    return config_dir


class TestConfigLoaderIntegration:
    """Integration tests for ConfigLoader."""

    @pytest.mark.integration
    def test_load_valid_configs(self) -> None:
        """Test loading the fixture configuration directory."""
        loader = ConfigLoader(run_id="test-run-001")

        effective = loader.load_dir(FIXTURES_DIR)

        assert loader.state == ConfigState.READY
        assert [p.name for p in effective.pools.genres] == ["politics", "science"]
        assert [p.name for p in effective.presets.presets] == [
            "front-a",
            "front-b",
            "front-c",
        ]
        assert len(effective.visual_keys.entries) == 10
        assert effective.newspaper.selection.genre_count == 2
        assert effective.run_id == "test-run-001"

    @pytest.mark.integration
    def test_load_produces_checksums(self) -> None:
        """Test that loading produces file checksums."""
        loader = ConfigLoader(run_id="test-run-002")
        loader.load_dir(FIXTURES_DIR)

        checksums = loader.file_checksums
        assert len(checksums) == 4
        for path, checksum in checksums.items():
            assert len(checksum) == 64
            assert path.endswith(".yaml")

    @pytest.mark.integration
    def test_pool_paths_resolve(self) -> None:
        """Test that pool files resolve next to pools.yaml."""
        effective = ConfigLoader(run_id="test-run-003").load_dir(FIXTURES_DIR)
        for pool in effective.all_pools():
            assert effective.pool_path(pool).is_file()

    @pytest.mark.integration
    def test_checksum_stable_across_loads(self) -> None:
        """Test that two loads of the same files agree."""
        first = ConfigLoader(run_id="run-a").load_dir(FIXTURES_DIR)
        second = ConfigLoader(run_id="run-a").load_dir(FIXTURES_DIR)
        assert first.compute_checksum() == second.compute_checksum()

    @pytest.mark.integration
    def test_visual_key_coverage(self) -> None:
        """Test the coverage report for the fixture presets."""
        effective = ConfigLoader(run_id="test-run-004").load_dir(FIXTURES_DIR)
        gaps = effective.visual_keys.coverage_gaps(
            effective.presets.presets,
            list(IMPORTANT_AGENCY_IDS),
            list(SUPPORT_AGENCY_IDS),
        )
        assert gaps == [
            {"size": "2x1", "agency_id": 2, "important": False},
            {"size": "2x2", "agency_id": 2, "important": False},
        ]

    @pytest.mark.integration
    def test_loader_is_single_use(self) -> None:
        """Test that a READY loader cannot load again."""
        loader = ConfigLoader(run_id="test-run-005")
        loader.load_dir(FIXTURES_DIR)
        with pytest.raises(ConfigStateError):
            loader.load_dir(FIXTURES_DIR)

    @pytest.mark.integration
    def test_validation_summary(self) -> None:
        """Test the validation summary after a successful load."""
        loader = ConfigLoader(run_id="test-run-006")
        loader.load_dir(FIXTURES_DIR)
        summary = loader.get_validation_summary()
        assert summary["state"] == "READY"
        assert summary["validation_error_count"] == 0
        assert '"state": "READY"' in loader.get_validation_summary_json()


class TestConfigLoaderFailures:
    """Failure handling of ConfigLoader."""

    @pytest.mark.integration
    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file fails the load."""
        config_dir = _copy_fixtures(tmp_path)
        (config_dir / "presets.yaml").unlink()
        loader = ConfigLoader(run_id="test-run-010")

        with pytest.raises(FileNotFoundError):
            loader.load_dir(config_dir)

        assert loader.state == ConfigState.FAILED
        (error,) = loader.validation_errors
        assert error["type"] == "file_not_found"
        assert error["file"].endswith("presets.yaml")

    @pytest.mark.integration
    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that broken YAML fails the load."""
        config_dir = _copy_fixtures(tmp_path)
        (config_dir / "visual_keys.yaml").write_text("entries: [\n", encoding="utf-8")
        loader = ConfigLoader(run_id="test-run-011")

        with pytest.raises(yaml.YAMLError):
            loader.load_dir(config_dir)

        assert loader.state == ConfigState.FAILED
        assert loader.validation_errors[0]["type"] == "yaml_parse_error"

    @pytest.mark.integration
    def test_schema_violation(self, tmp_path: Path) -> None:
        """Test that schema errors are collected with locations."""
        config_dir = _copy_fixtures(tmp_path)
        newspaper = yaml.safe_load((config_dir / "newspaper.yaml").read_text())
        newspaper["selection"]["repeat_penalty_factor"] = 2.5
        (config_dir / "newspaper.yaml").write_text(yaml.safe_dump(newspaper))
        loader = ConfigLoader(run_id="test-run-012")

        with pytest.raises(ValidationError):
            loader.load_dir(config_dir)

        assert loader.state == ConfigState.FAILED
        (error,) = loader.validation_errors
        assert error["loc"] == "selection.repeat_penalty_factor"
        assert error["file"].endswith("newspaper.yaml")

    @pytest.mark.integration
    def test_duplicate_preset_names(self, tmp_path: Path) -> None:
        """Test that duplicate preset names are rejected."""
        config_dir = _copy_fixtures(tmp_path)
        presets = yaml.safe_load((config_dir / "presets.yaml").read_text())
        presets["presets"][1]["name"] = "front-a"
        (config_dir / "presets.yaml").write_text(yaml.safe_dump(presets))

        with pytest.raises(ValidationError, match="Duplicate preset names"):
            ConfigLoader(run_id="test-run-013").load_dir(config_dir)
