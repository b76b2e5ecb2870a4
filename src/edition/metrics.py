"""Edition build metrics collection."""

from collections import Counter
from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class EditionMetrics:
    """Metrics for edition builds.

    Attributes:
        builds_total: Successful builds.
        build_failures_total: Failed builds.
        failures_by_type: Failed builds per exception type name.
        pool_rebuilds: Queue rebuilds per pool name.
        preset_usage: Successful builds per preset name.
        empty_slots_total: Placeholder assignments emitted.
        last_build_duration_ms: Duration of the most recent build.
    """

    builds_total: int = 0
    build_failures_total: int = 0
    failures_by_type: Counter[str] = field(default_factory=Counter)
    pool_rebuilds: Counter[str] = field(default_factory=Counter)
    preset_usage: Counter[str] = field(default_factory=Counter)
    empty_slots_total: int = 0
    last_build_duration_ms: float = 0.0

    _instance: ClassVar["EditionMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "EditionMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_build(self, preset_name: str, empty_slots: int, duration_ms: float) -> None:
        """Record a successful build.

        Args:
            preset_name: Matched preset.
            empty_slots: Placeholder assignments in the edition.
            duration_ms: Build duration in milliseconds.
        """
        self.builds_total += 1
        self.preset_usage[preset_name] += 1
        self.empty_slots_total += empty_slots
        self.last_build_duration_ms = duration_ms

    def record_failure(self, error_type: str) -> None:
        """Record a failed build.

        Args:
            error_type: Exception class name.
        """
        self.build_failures_total += 1
        self.failures_by_type[error_type] += 1

    def record_rebuilds(self, pool_names: list[str]) -> None:
        """Record queue rebuilds."""
        self.pool_rebuilds.update(pool_names)

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "builds_total": self.builds_total,
            "build_failures_total": self.build_failures_total,
            "failures_by_type": dict(self.failures_by_type),
            "pool_rebuilds": dict(self.pool_rebuilds),
            "preset_usage": dict(self.preset_usage),
            "empty_slots_total": self.empty_slots_total,
            "last_build_duration_ms": self.last_build_duration_ms,
        }
