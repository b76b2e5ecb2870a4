"""Edition output writing.

Editions are written as deterministic JSON through an atomic
temp-file-then-rename writer so the renderer never reads a partial file.
"""

import hashlib
import json
from pathlib import Path

import structlog

from src.config.constants import COMPONENT_EDITION
from src.edition.models import EditionResult, GeneratedFile


logger = structlog.get_logger()

EDITION_FILE_TEMPLATE = "edition-day-{day:03d}.json"


class AtomicWriter:
    """Provides atomic file writing operations.

    Writes content to a temporary file first, then renames to the final path.
    """

    def __init__(self, base_dir: Path, run_id: str | None = None) -> None:
        """Initialize the atomic writer.

        Args:
            base_dir: Base directory for relative path calculation.
            run_id: Optional run ID for logging context.
        """
        self._base_dir = base_dir
        self._log = logger.bind(component="atomic_writer")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def write(self, path: Path, content: str) -> GeneratedFile:
        """Write content to file with atomic semantics.

        Args:
            path: Target file path.
            content: Content to write (will be encoded as UTF-8).

        Returns:
            GeneratedFile with path, checksum, and size information.
        """
        content_bytes = content.encode("utf-8")
        sha256 = hashlib.sha256(content_bytes).hexdigest()

        temp_path = path.with_suffix(path.suffix + ".tmp")
        temp_path.write_bytes(content_bytes)
        temp_path.replace(path)

        try:
            relative_path = str(path.relative_to(self._base_dir))
        except ValueError:
            relative_path = str(path)

        self._log.debug(
            "file_written",
            path=relative_path,
            bytes=len(content_bytes),
            sha256=sha256[:12],
        )

        return GeneratedFile(
            path=relative_path,
            absolute_path=str(path),
            bytes_written=len(content_bytes),
            sha256=sha256,
        )


class EditionWriter:
    """Writes built editions as JSON files, one per day."""

    def __init__(self, output_dir: Path, run_id: str | None = None) -> None:
        """Initialize the writer.

        Args:
            output_dir: Directory receiving edition files.
            run_id: Optional run ID for logging context.
        """
        self._output_dir = output_dir
        self._writer = AtomicWriter(output_dir, run_id)
        self._log = logger.bind(component=COMPONENT_EDITION)
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    @staticmethod
    def serialize(edition: EditionResult) -> str:
        """Serialize an edition with stable formatting."""
        return json.dumps(
            edition.model_dump(mode="json"),
            sort_keys=True,
            indent=2,
            ensure_ascii=False,
        )

    def write(self, edition: EditionResult) -> GeneratedFile:
        """Write one edition.

        Args:
            edition: Edition to write.

        Returns:
            GeneratedFile describing the written file.
        """
        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._output_dir / EDITION_FILE_TEMPLATE.format(day=edition.day)
        file_info = self._writer.write(path, self.serialize(edition))
        self._log.info(
            "edition_written",
            day=edition.day,
            file_path=file_info.path,
            bytes_written=file_info.bytes_written,
            sha256=file_info.sha256,
        )
        return file_info
