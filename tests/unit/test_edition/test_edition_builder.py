"""Unit tests for edition build orchestration."""

import random

import pytest
import structlog

from src.data_model.errors import BuildInProgressError, NoMatchingPresetError
from src.edition.builder import EditionBuilder
from src.edition.metrics import EditionMetrics
from src.edition.state_machine import BuildState
from src.layout.models import AssignmentKind
from src.selector.models import SelectionSession
from tests.helpers.newsroom import (
    TWO_SHORT_PRESET,
    make_effective_config,
    make_registry,
)


def _builder(seed: int = 0, **config: object) -> EditionBuilder:
    EditionMetrics.reset()
    return EditionBuilder(
        make_effective_config(**config), make_registry(), rng=random.Random(seed)
    )


class TestBuildEdition:
    """Tests for EditionBuilder.build_edition."""

    @pytest.mark.unit
    def test_builds_complete_edition(self) -> None:
        """Test a successful build binds every slot of the matched preset."""
        builder = _builder()
        edition = builder.build_edition()

        assert edition.day == 1
        assert edition.preset_name in ("front-a", "front-b")
        expected_slots = 7 if edition.preset_name == "front-a" else 6
        assert len(edition.assignments) == expected_slots
        assert len(edition.checksum) == 64
        assert sorted(edition.genres) == ["politics", "science"]
        assert builder.state == BuildState.IDLE

    @pytest.mark.unit
    def test_slot_bindings(self) -> None:
        """Test that every slot is bound exactly once with the right kinds."""
        edition = _builder(seed=4).build_edition()
        kinds = [a.kind for a in edition.assignments]
        positions = [a.position.as_tuple() for a in edition.assignments]

        assert kinds.count(AssignmentKind.IMPORTANT) == 3
        assert kinds.count(AssignmentKind.FEATURED) == 1
        assert AssignmentKind.EMPTY not in kinds
        assert len(positions) == len(set(positions))

    @pytest.mark.unit
    def test_first_build_rebuilds_every_pool(self) -> None:
        """Test that the first cycle fills every queue."""
        edition = _builder().build_edition()
        assert edition.rebuilt_pools[:4] == ["politics", "science", "featured", "filler"]

    @pytest.mark.unit
    def test_days_advance(self) -> None:
        """Test that consecutive builds stamp consecutive days."""
        builder = _builder()
        days = [builder.build_edition().day for _ in range(4)]
        assert days == [1, 2, 3, 4]
        assert builder.session.day == 4

    @pytest.mark.unit
    def test_explicit_day(self) -> None:
        """Test that an explicit day is honored."""
        builder = _builder()
        assert builder.build_edition(day=10).day == 10
        assert builder.build_edition().day == 11

    @pytest.mark.unit
    def test_many_days_without_failure(self) -> None:
        """Test a long session across several pool rotations."""
        builder = _builder(seed=11)
        editions = [builder.build_edition() for _ in range(12)]
        assert all(e.fifth_slot.value == "filler" for e in editions)
        assert all(len(e.revealed_pairs) == 1 for e in editions)
        assert EditionMetrics.get_instance().builds_total == 12

    @pytest.mark.unit
    def test_same_seed_same_editions(self) -> None:
        """Test that seeded builds are reproducible."""
        first = _builder(seed=5)
        second = _builder(seed=5)
        for _ in range(3):
            assert first.build_edition().checksum == second.build_edition().checksum

    @pytest.mark.unit
    def test_anti_repetition_memory(self) -> None:
        """Test that the session remembers the last chosen genres."""
        builder = _builder()
        edition = builder.build_edition()
        assert builder.session.previous_genres == edition.genres

    @pytest.mark.unit
    def test_command_run_id_survives_builds(self) -> None:
        """Test that a build leaves the caller's bound run id in place."""
        structlog.contextvars.bind_contextvars(run_id="cli-run")
        try:
            builder = _builder()
            builder.build_edition()
            with pytest.raises(NoMatchingPresetError):
                _builder(presets=[TWO_SHORT_PRESET]).build_edition()
            assert structlog.contextvars.get_contextvars() == {"run_id": "cli-run"}
        finally:
            structlog.contextvars.clear_contextvars()


class TestBuildFailures:
    """Tests for failed builds."""

    @pytest.mark.unit
    def test_no_matching_preset_fails_cleanly(self) -> None:
        """Test that a failed match surfaces the error and resets the cycle."""
        builder = _builder(presets=[TWO_SHORT_PRESET])

        with pytest.raises(NoMatchingPresetError):
            builder.build_edition()

        metrics = EditionMetrics.get_instance()
        assert builder.state == BuildState.IDLE
        assert builder.session.day == 0
        assert metrics.build_failures_total == 1
        assert metrics.failures_by_type == {"NoMatchingPresetError": 1}
        assert metrics.builds_total == 0

    @pytest.mark.unit
    def test_lock_released_after_failure(self) -> None:
        """Test that a failed build does not block the next one."""
        builder = _builder(presets=[TWO_SHORT_PRESET])
        with pytest.raises(NoMatchingPresetError):
            builder.build_edition()
        with pytest.raises(NoMatchingPresetError):
            builder.build_edition()

    @pytest.mark.unit
    def test_concurrent_build_rejected(self) -> None:
        """Test that a second build while one is running is rejected."""
        builder = _builder()
        builder._lock.acquire()
        try:
            with pytest.raises(BuildInProgressError):
                builder.build_edition()
            with pytest.raises(BuildInProgressError):
                builder.start_new_game()
            with pytest.raises(BuildInProgressError):
                builder.unlock_tag("local")
        finally:
            builder._lock.release()
        assert builder.build_edition().day == 1


class TestSessionControl:
    """Tests for new-game and unlock handling."""

    @pytest.mark.unit
    def test_start_new_game(self) -> None:
        """Test that a new game resets memory and reshuffles every pool."""
        builder = _builder()
        builder.build_edition()
        builder.build_edition()

        rebuilt = builder.start_new_game()

        assert rebuilt == ["politics", "science", "featured", "filler"]
        assert builder.session.day == 0
        assert builder.session.previous_genres == []
        assert len(builder.registry.genres["politics"].queue) == 6
        assert builder.build_edition().day == 1

    @pytest.mark.unit
    def test_custom_session(self) -> None:
        """Test that a supplied session is used for memory."""
        session = SelectionSession(previous_genres=["politics"], day=7)
        builder = EditionBuilder(
            make_effective_config(), make_registry(), session=session
        )
        assert builder.build_edition().day == 8
        assert builder.session is session

    @pytest.mark.unit
    def test_unlock_tag_on_open_gate(self) -> None:
        """Test that unlocking on an open gate changes nothing."""
        builder = _builder()
        assert builder.unlock_tag("local") == []
