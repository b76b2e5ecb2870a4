"""Observability module for logging."""

from src.observability.logging import bind_run_context, configure_logging, run_context


__all__ = [
    "bind_run_context",
    "configure_logging",
    "run_context",
]
