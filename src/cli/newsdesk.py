"""CLI commands for the newspaper builder."""

import json
import sys
import uuid
from pathlib import Path

import click
import structlog
import yaml
from pydantic import ValidationError

from src.config.constants import (
    COMPONENT_CLI,
    IMPORTANT_AGENCY_IDS,
    SUPPORT_AGENCY_IDS,
    VALIDATION_FAILED,
    VALIDATION_PASSED,
)
from src.config.effective import EffectiveConfig
from src.config.error_hints import format_validation_error
from src.config.loader import ConfigLoader
from src.config.state_machine import ConfigState
from src.data_model.errors import NewsdeskError
from src.edition.builder import EditionBuilder
from src.edition.io import EditionWriter
from src.edition.metrics import EditionMetrics
from src.observability.logging import bind_run_context, configure_logging
from src.settings.app import get_settings


logger = structlog.get_logger()

# Failures ConfigLoader records before re-raising
CONFIG_ERRORS = (ValidationError, FileNotFoundError, yaml.YAMLError)


def _setup_logging(run_id: str, verbose: bool, json_logs: bool | None) -> None:
    """Configure logging from settings and command-line overrides."""
    settings = get_settings()
    level = "DEBUG" if verbose else settings.log_level
    use_json = settings.json_logs if json_logs is None else json_logs
    configure_logging(level=level, json_format=use_json)
    bind_run_context(run_id)


def _echo_validation_errors(loader: ConfigLoader) -> None:
    click.echo("Configuration validation failed:", err=True)
    for error in loader.validation_errors:
        formatted = format_validation_error(
            location=error["loc"],
            message=error["msg"],
            error_type=error.get("type", "unknown"),
            include_hint=True,
        )
        source = error.get("file")
        prefix = f"[{Path(source).name}] " if source else ""
        click.echo(f"  - {prefix}{formatted}", err=True)


def _load_configuration(config_dir: Path, run_id: str) -> EffectiveConfig:
    """Load and validate configuration, exit on failure.

    Args:
        config_dir: Directory holding the four YAML files.
        run_id: Run identifier.

    Returns:
        Validated effective configuration.
    """
    log = logger.bind(run_id=run_id, component=COMPONENT_CLI)
    loader = ConfigLoader(run_id=run_id)

    try:
        effective_config = loader.load_dir(config_dir)
    except CONFIG_ERRORS as e:
        log.warning(
            "config_load_failed",
            error=str(e),
            validation_result=VALIDATION_FAILED,
            validation_errors=loader.validation_errors,
        )
        _echo_validation_errors(loader)
        sys.exit(1)

    if loader.state != ConfigState.READY:
        log.error("unexpected_state", state=loader.state.name)
        sys.exit(1)

    log.info(
        "config_validated",
        validation_result=VALIDATION_PASSED,
        config_checksum=effective_config.compute_checksum(),
    )
    return effective_config


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Daily newspaper edition builder CLI."""


@cli.command()
@click.option(
    "--config",
    "config_dir",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory containing newspaper.yaml, pools.yaml, presets.yaml and visual_keys.yaml.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the validation summary (state, checksums, errors) as JSON.",
)
def validate(config_dir: Path, as_json: bool) -> None:
    """Validate configuration files without building editions."""
    run_id = str(uuid.uuid4())
    configure_logging(json_format=False)
    bind_run_context(run_id)

    loader = ConfigLoader(run_id=run_id)

    try:
        effective_config = loader.load_dir(config_dir)
    except CONFIG_ERRORS:
        if as_json:
            click.echo(loader.get_validation_summary_json())
        else:
            _echo_validation_errors(loader)
        sys.exit(1)

    if as_json:
        click.echo(loader.get_validation_summary_json())
        return

    click.echo("Configuration is valid!")
    click.echo(f"  Genre pools: {len(effective_config.pools.genres)}")
    click.echo(f"  Presets: {len(effective_config.presets.presets)}")
    click.echo(f"  Visual key entries: {len(effective_config.visual_keys.entries)}")
    click.echo(f"  Checksum: {effective_config.compute_checksum()}")

    gaps = effective_config.visual_keys.coverage_gaps(
        effective_config.presets.presets,
        list(IMPORTANT_AGENCY_IDS),
        list(SUPPORT_AGENCY_IDS),
    )
    if gaps:
        click.echo(f"  Visual key gaps: {len(gaps)}")
        for gap in gaps:
            click.echo(
                f"    - size {gap['size']}, agency {gap['agency_id']}, "
                f"important: {gap['important']}"
            )


@cli.command()
@click.option(
    "--config",
    "config_dir",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory containing the configuration files.",
)
@click.option(
    "--out",
    "output_dir",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory for edition JSON files.",
)
@click.option(
    "--days",
    type=click.IntRange(min=1),
    default=1,
    help="Number of consecutive editions to build (default: 1).",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed for reproducible editions (default: NEWSDESK_SEED).",
)
@click.option(
    "--unlock",
    "unlock_tags",
    multiple=True,
    help="Subgenre tag to unlock before the first edition (repeatable).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: NEWSDESK_JSON_LOGS).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def build(  # noqa: PLR0913
    config_dir: Path,
    output_dir: Path,
    days: int,
    seed: int | None,
    unlock_tags: tuple[str, ...],
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Build one edition per in-game day and write them as JSON."""
    run_id = str(uuid.uuid4())
    _setup_logging(run_id, verbose, json_logs)
    log = logger.bind(run_id=run_id, component=COMPONENT_CLI, command="build")

    effective_config = _load_configuration(config_dir, run_id)
    resolved_seed = get_settings().resolve_seed(seed)
    log.info("build_started", days=days, seed=resolved_seed)

    try:
        builder = EditionBuilder.from_config(effective_config, seed=resolved_seed)
    except (OSError, ValueError, ValidationError) as e:
        log.error("pool_import_failed", error=str(e))
        click.echo(f"Error: failed to import article pools: {e}", err=True)
        sys.exit(1)

    for tag in unlock_tags:
        builder.unlock_tag(tag)
    builder.start_new_game()

    writer = EditionWriter(output_dir, run_id=run_id)
    for _ in range(days):
        try:
            edition = builder.build_edition()
        except NewsdeskError as e:
            click.echo(f"Error: edition build failed: {e}", err=True)
            sys.exit(1)
        file_info = writer.write(edition)
        click.echo(
            f"Day {edition.day}: preset '{edition.preset_name}', "
            f"{len(edition.assignments)} slots -> {file_info.path}"
        )

    metrics = EditionMetrics.get_instance().to_dict()
    log.info("build_complete", **metrics)
    if verbose:
        click.echo(json.dumps(metrics, indent=2, sort_keys=True))


if __name__ == "__main__":
    cli()
