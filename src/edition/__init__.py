"""Edition build orchestration and output."""

from src.edition.builder import EditionBuilder, load_registry
from src.edition.io import AtomicWriter, EditionWriter
from src.edition.metrics import EditionMetrics
from src.edition.models import EditionResult, GeneratedFile
from src.edition.state_machine import BuildState, BuildStateError, BuildStateMachine


__all__ = [
    "AtomicWriter",
    "BuildState",
    "BuildStateError",
    "BuildStateMachine",
    "EditionBuilder",
    "EditionMetrics",
    "EditionResult",
    "EditionWriter",
    "GeneratedFile",
    "load_registry",
]
