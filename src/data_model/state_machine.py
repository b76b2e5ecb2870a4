"""Table-driven state machine shared by config loading and edition builds."""

from enum import Enum
from typing import Any, ClassVar

import structlog


logger = structlog.get_logger()


class StateTransitionError(Exception):
    """Raised when a machine is asked for a move its table forbids."""

    machine: ClassVar[str] = "state"

    def __init__(self, from_state: Enum, to_state: Enum) -> None:
        """Initialize the error.

        Args:
            from_state: State the machine was in.
            to_state: State that was requested.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid {self.machine} state transition: "
            f"{from_state.name} -> {to_state.name}"
        )


class StateMachine:
    """Walks the members of an enum along an allowed-move table.

    Subclasses supply ``TRANSITIONS``, ``INITIAL``, the log ``COMPONENT``
    and the ``ERROR`` raised on a forbidden move. A state with no outgoing
    moves is terminal.
    """

    TRANSITIONS: ClassVar[dict[Any, frozenset[Any]]] = {}
    INITIAL: ClassVar[Any]
    COMPONENT: ClassVar[str] = "state"
    ERROR: ClassVar[type[StateTransitionError]] = StateTransitionError

    def __init__(self, run_id: str | None = None) -> None:
        self._state = self.INITIAL
        self.bind_run(run_id)

    @property
    def state(self) -> Any:
        """Get the current state."""
        return self._state

    def bind_run(self, run_id: str | None) -> None:
        """Attach a run identifier to subsequent log events."""
        self._log = logger.bind(component=self.COMPONENT)
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def can_transition(self, to_state: Any) -> bool:
        """Check whether the table allows a move from the current state."""
        return to_state in self.TRANSITIONS.get(self._state, frozenset())

    def is_terminal(self) -> bool:
        """Check whether the current state has no way out."""
        return not self.TRANSITIONS.get(self._state)

    def transition(self, to_state: Any) -> None:
        """Move to a new state.

        Raises:
            StateTransitionError: The subclass's ``ERROR``, if the move is
                not in the table. The state is left unchanged.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise self.ERROR(self._state, to_state)

        self._log.debug(
            "state_transition",
            from_state=self._state.name,
            to_state=to_state.name,
        )
        self._state = to_state
