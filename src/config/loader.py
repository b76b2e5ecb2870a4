"""Configuration loader for a newspaper config directory.

A config directory holds four YAML files. Each is parsed, checksummed and
validated against its schema in a fixed order; the first failure stops the
load, is recorded as a user-facing error and re-raised.
"""

import hashlib
import json
import time
from pathlib import Path
from typing import NamedTuple

import structlog
import yaml
from pydantic import BaseModel, ValidationError

from src.config.constants import (
    COMPONENT_CONFIG,
    FILE_TYPE_NEWSPAPER,
    FILE_TYPE_POOLS,
    FILE_TYPE_PRESETS,
    FILE_TYPE_VISUAL_KEYS,
    NEWSPAPER_FILE,
    POOLS_FILE,
    PRESETS_FILE,
    VISUAL_KEYS_FILE,
)
from src.config.effective import EffectiveConfig
from src.config.schemas.newspaper import NewspaperConfig
from src.config.schemas.pools import PoolsConfig
from src.config.state_machine import ConfigState, ConfigStateMachine
from src.layout.models import PresetCatalog
from src.layout.visual_keys import VisualKeyMapping


logger = structlog.get_logger()


class ConfigFile(NamedTuple):
    """One file of a config directory and the schema it must satisfy."""

    file_type: str
    file_name: str
    model: type[BaseModel]


CONFIG_FILES: tuple[ConfigFile, ...] = (
    ConfigFile(FILE_TYPE_NEWSPAPER, NEWSPAPER_FILE, NewspaperConfig),
    ConfigFile(FILE_TYPE_POOLS, POOLS_FILE, PoolsConfig),
    ConfigFile(FILE_TYPE_PRESETS, PRESETS_FILE, PresetCatalog),
    ConfigFile(FILE_TYPE_VISUAL_KEYS, VISUAL_KEYS_FILE, VisualKeyMapping),
)


def _describe_failure(error: Exception) -> list[tuple[str, str, str]]:
    """Turn a load failure into (location, message, error type) rows."""
    if isinstance(error, ValidationError):
        return [
            (".".join(str(part) for part in err["loc"]), err["msg"], err["type"])
            for err in error.errors()
        ]
    if isinstance(error, FileNotFoundError):
        return [("file", str(error), "file_not_found")]
    return [("yaml", str(error), "yaml_parse_error")]


class ConfigLoader:
    """Loads and validates a newspaper config directory.

    Moves through UNLOADED -> LOADING -> VALIDATED -> READY, or FAILED on
    the first bad file. A loader instance loads once.
    """

    def __init__(self, run_id: str) -> None:
        """Initialize the loader.

        Args:
            run_id: Identifier of the run the configuration is loaded for.
        """
        self._run_id = run_id
        self._state_machine = ConfigStateMachine(run_id)
        self._file_checksums: dict[str, str] = {}
        self._validation_errors: list[dict[str, str]] = []
        self._duration_ms = 0.0

    @property
    def state(self) -> ConfigState:
        """Get the current loader state."""
        return self._state_machine.state

    @property
    def file_checksums(self) -> dict[str, str]:
        """Get SHA-256 checksums keyed by resolved file path."""
        return dict(self._file_checksums)

    @property
    def validation_errors(self) -> list[dict[str, str]]:
        """Get recorded errors; each has file, loc, msg and type keys."""
        return list(self._validation_errors)

    def _read_file(self, file_path: Path, entry: ConfigFile) -> BaseModel:
        raw = file_path.read_bytes()
        checksum = hashlib.sha256(raw).hexdigest()
        self._file_checksums[str(file_path.resolve())] = checksum
        data = yaml.safe_load(raw.decode("utf-8")) or {}
        validated = entry.model.model_validate(data)
        logger.debug(
            "config_file_loaded",
            component=COMPONENT_CONFIG,
            run_id=self._run_id,
            file_type=entry.file_type,
            file_path=str(file_path),
            file_sha256=checksum,
        )
        return validated

    def load_dir(self, config_dir: Path) -> EffectiveConfig:
        """Load every config file from a directory.

        Args:
            config_dir: Directory holding newspaper.yaml, pools.yaml,
                presets.yaml and visual_keys.yaml.

        Returns:
            The validated effective configuration.

        Raises:
            ValidationError: If a file does not match its schema.
            FileNotFoundError: If a file is missing.
            yaml.YAMLError: If a file is not valid YAML.
            ConfigStateError: If this loader was already used.
        """
        self._state_machine.transition(ConfigState.LOADING)
        log = logger.bind(component=COMPONENT_CONFIG, run_id=self._run_id)
        started = time.perf_counter()

        models: dict[str, BaseModel] = {}
        for entry in CONFIG_FILES:
            file_path = config_dir / entry.file_name
            try:
                models[entry.file_type] = self._read_file(file_path, entry)
            except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
                self._fail(file_path, e, log)
                raise

        self._state_machine.transition(ConfigState.VALIDATED)
        self._duration_ms = (time.perf_counter() - started) * 1000

        pools = models[FILE_TYPE_POOLS]
        presets = models[FILE_TYPE_PRESETS]
        effective = EffectiveConfig(
            newspaper=models[FILE_TYPE_NEWSPAPER],
            pools=pools,
            presets=presets,
            visual_keys=models[FILE_TYPE_VISUAL_KEYS],
            pools_dir=str(config_dir),
            file_checksums=dict(self._file_checksums),
            run_id=self._run_id,
        )
        self._state_machine.transition(ConfigState.READY)
        log.info(
            "config_ready",
            genre_pool_count=len(pools.genres),
            preset_count=len(presets.presets),
            duration_ms=round(self._duration_ms, 2),
        )
        return effective

    def _fail(
        self,
        file_path: Path,
        error: Exception,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        self._state_machine.transition(ConfigState.FAILED)
        for loc, msg, error_type in _describe_failure(error):
            self._validation_errors.append(
                {"file": str(file_path), "loc": loc, "msg": msg, "type": error_type}
            )
        log.error(
            "config_load_failed",
            file_path=str(file_path),
            error_type=self._validation_errors[-1]["type"],
            validation_error_count=len(self._validation_errors),
            errors=self._validation_errors,
        )

    def get_validation_summary(self) -> dict[str, object]:
        """Summarize the load for status output."""
        return {
            "run_id": self._run_id,
            "state": self.state.name,
            "file_checksums": self._file_checksums,
            "validation_error_count": len(self._validation_errors),
            "validation_errors": self._validation_errors,
            "validation_duration_ms": self._duration_ms,
        }

    def get_validation_summary_json(self) -> str:
        """Get the summary as JSON with stable key order."""
        return json.dumps(self.get_validation_summary(), sort_keys=True, indent=2)
