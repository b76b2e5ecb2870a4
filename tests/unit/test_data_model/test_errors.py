"""Unit tests for domain errors and size counts."""

import pytest

from src.data_model.base import SizeCategory, SizeCounts
from src.data_model.errors import (
    BuildInProgressError,
    LayoutConsistencyError,
    NewsdeskError,
    NoMatchingPresetError,
    PoolExhaustedError,
)


class TestSizeCounts:
    """Tests for SizeCounts."""

    @pytest.mark.unit
    def test_from_categories(self) -> None:
        """Test counting categories from an iterable."""
        counts = SizeCounts.from_categories(
            [SizeCategory.SHORT, SizeCategory.LONG, SizeCategory.SHORT]
        )
        assert counts == SizeCounts(short=2, medium=0, long=1)
        assert counts.total == 3

    @pytest.mark.unit
    def test_get_and_as_dict(self) -> None:
        """Test per-category access."""
        counts = SizeCounts(short=1, medium=2, long=3)
        assert counts.get(SizeCategory.MEDIUM) == 2
        assert counts.as_dict() == {
            SizeCategory.SHORT: 1,
            SizeCategory.MEDIUM: 2,
            SizeCategory.LONG: 3,
        }

    @pytest.mark.unit
    def test_equality_is_per_category(self) -> None:
        """Test that equal totals with different mixes are not equal."""
        assert SizeCounts(short=1, long=1) != SizeCounts(short=2)


class TestErrors:
    """Tests for the error hierarchy."""

    @pytest.mark.unit
    def test_all_errors_share_base(self) -> None:
        """Test that every fatal error is a NewsdeskError."""
        errors = [
            PoolExhaustedError("featured"),
            NoMatchingPresetError({}, {}),
            LayoutConsistencyError("front", "Headline", SizeCategory.SHORT),
            BuildInProgressError("run-1"),
        ]
        for error in errors:
            assert isinstance(error, NewsdeskError)

    @pytest.mark.unit
    def test_pool_exhausted_message(self) -> None:
        """Test pool exhausted error attributes."""
        error = PoolExhaustedError("featured", needed=2)
        assert error.pool_name == "featured"
        assert error.needed == 2
        assert "featured" in str(error)

    @pytest.mark.unit
    def test_no_matching_preset_to_dict(self) -> None:
        """Test the required-vs-available breakdown."""
        error = NoMatchingPresetError(
            required={SizeCategory.SHORT: 1, SizeCategory.LONG: 1},
            available={"front": {SizeCategory.SHORT: 2}},
        )
        assert error.to_dict() == {
            "required": {"short": 1, "medium": 0, "long": 1},
            "available": {"front": {"short": 2, "medium": 0, "long": 0}},
        }
        assert "short=1, medium=0, long=1" in str(error)
        assert "checked 1 preset(s)" in str(error)

    @pytest.mark.unit
    def test_layout_consistency_message(self) -> None:
        """Test layout consistency error attributes."""
        error = LayoutConsistencyError("front", "Bridge opens", SizeCategory.MEDIUM)
        assert error.preset_name == "front"
        assert error.category == SizeCategory.MEDIUM
        assert "medium" in str(error)
        assert "Bridge opens" in str(error)

    @pytest.mark.unit
    def test_build_in_progress_carries_run_id(self) -> None:
        """Test build in progress error attributes."""
        error = BuildInProgressError("run-9")
        assert error.run_id == "run-9"
        assert "run-9" in str(error)
