"""Unit tests for structured logging configuration."""

import io
import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from src.observability.logging import (
    bind_run_context,
    configure_logging,
    parse_level,
    run_context,
)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def _lines(stream: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestParseLevel:
    """Tests for parse_level."""

    @pytest.mark.unit
    def test_names_and_numbers(self) -> None:
        """Test resolving level names case-insensitively."""
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("WARNING") == logging.WARNING
        assert parse_level(logging.ERROR) == logging.ERROR

    @pytest.mark.unit
    def test_unknown_name(self) -> None:
        """Test that an unknown level name is rejected."""
        with pytest.raises(ValueError, match="Unknown log level"):
            parse_level("chatty")


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.unit
    def test_json_output(self) -> None:
        """Test that events render as sorted JSON lines."""
        stream = io.StringIO()
        configure_logging(level="INFO", output=stream, json_format=True)
        structlog.get_logger().info("edition_built", preset="front-a")

        (event,) = _lines(stream)
        assert event["event"] == "edition_built"
        assert event["preset"] == "front-a"
        assert event["level"] == "info"
        assert "timestamp" in event

    @pytest.mark.unit
    def test_level_filtering(self) -> None:
        """Test that events below the level are dropped."""
        stream = io.StringIO()
        configure_logging(level="WARNING", output=stream)
        log = structlog.get_logger()
        log.info("hidden")
        log.warning("shown")
        assert [e["event"] for e in _lines(stream)] == ["shown"]

    @pytest.mark.unit
    def test_run_context_binding(self) -> None:
        """Test that a build context applies only inside its block."""
        stream = io.StringIO()
        configure_logging(output=stream)
        log = structlog.get_logger()

        with run_context("run-42", day=3):
            log.info("inside")
        log.info("outside")

        inside, outside = _lines(stream)
        assert inside["run_id"] == "run-42"
        assert inside["day"] == 3
        assert "run_id" not in outside
        assert "day" not in outside

    @pytest.mark.unit
    def test_run_context_restores_command_run_id(self) -> None:
        """Test that the command-level run id is back after a build block."""
        stream = io.StringIO()
        configure_logging(output=stream)
        log = structlog.get_logger()

        bind_run_context("cli-run")
        with run_context("build-run", day=1):
            log.info("edition_built")
        log.info("build_complete")

        built, complete = _lines(stream)
        assert built["run_id"] == "build-run"
        assert complete["run_id"] == "cli-run"
        assert "day" not in complete

    @pytest.mark.unit
    def test_console_output(self) -> None:
        """Test the human-readable renderer."""
        stream = io.StringIO()
        configure_logging(output=stream, json_format=False)
        structlog.get_logger().info("config_validated")
        assert "config_validated" in stream.getvalue()
