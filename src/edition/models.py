"""Data models for built editions."""

import hashlib
import json
from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from src.layout.models import AssignmentKind, BlockAssignment
from src.selector.models import FifthSlotOutcome, PairKey


class EditionResult(BaseModel):
    """One fully built edition, handed to the renderer.

    Attributes:
        run_id: Unique build identifier.
        day: In-game day of the edition (1-based).
        preset_name: Name of the matched layout preset.
        assignments: Slot bindings in preset order.
        genres: Genre names chosen for the day.
        revealed_pairs: Genre and pair id of every revealed counterpart.
        fifth_slot: Outcome of the fifth slot.
        rebuilt_pools: Pools reshuffled during this build.
        checksum: SHA-256 of the normalized edition content.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    run_id: Annotated[str, Field(min_length=1)]
    day: Annotated[int, Field(ge=1)]
    preset_name: str
    assignments: list[BlockAssignment]
    genres: list[str]
    revealed_pairs: list[PairKey] = Field(default_factory=list)
    fifth_slot: FifthSlotOutcome = FifthSlotOutcome.DISABLED
    rebuilt_pools: list[str] = Field(default_factory=list)
    checksum: str = ""

    def content_dict(self) -> dict[str, object]:
        """Edition content without run identity, used for the checksum."""
        return self.model_dump(mode="json", exclude={"run_id", "checksum"})

    def compute_checksum(self) -> str:
        """Compute the SHA-256 of the normalized edition content."""
        normalized = json.dumps(
            self.content_dict(), sort_keys=True, separators=(",", ":")
        )
        return hashlib.sha256(normalized.encode("utf-8")).hexdigest()

    def with_checksum(self) -> "EditionResult":
        """Return a copy carrying its content checksum."""
        return self.model_copy(update={"checksum": self.compute_checksum()})

    def empty_slot_count(self) -> int:
        """Number of placeholder assignments."""
        return sum(1 for a in self.assignments if a.kind == AssignmentKind.EMPTY)


@dataclass
class GeneratedFile:
    """Information about a written edition file.

    Attributes:
        path: Relative path from output directory.
        absolute_path: Absolute path to file.
        bytes_written: Number of bytes written.
        sha256: SHA-256 checksum of content.
    """

    path: str
    absolute_path: str
    bytes_written: int
    sha256: str
