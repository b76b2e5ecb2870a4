"""Edition build cycle states."""

from enum import Enum, auto

from src.config.constants import COMPONENT_EDITION
from src.data_model.state_machine import StateMachine, StateTransitionError


class BuildState(Enum):
    """Edition build cycle states.

    State transitions:
        IDLE -> QUEUES_REBUILT: Pools refreshed at cycle start
        QUEUES_REBUILT -> GENRES_SELECTED: Day's genres chosen
        GENRES_SELECTED -> ARTICLES_PICKED: Primary articles taken
        ARTICLES_PICKED -> HYPE_RESOLVED: Continuation slots and featured pick done
        HYPE_RESOLVED -> PRESET_MATCHED: Layout preset chosen
        PRESET_MATCHED -> SLOTS_ASSIGNED: Every slot bound
        SLOTS_ASSIGNED -> IDLE: Edition handed off
        Any non-idle -> FAILED: Fatal build error
        FAILED -> IDLE: Error surfaced, ready for the next build
    """

    IDLE = auto()
    QUEUES_REBUILT = auto()
    GENRES_SELECTED = auto()
    ARTICLES_PICKED = auto()
    HYPE_RESOLVED = auto()
    PRESET_MATCHED = auto()
    SLOTS_ASSIGNED = auto()
    FAILED = auto()


# The cycle in order; each step may only advance to the next one or fail
BUILD_CYCLE: tuple[BuildState, ...] = (
    BuildState.IDLE,
    BuildState.QUEUES_REBUILT,
    BuildState.GENRES_SELECTED,
    BuildState.ARTICLES_PICKED,
    BuildState.HYPE_RESOLVED,
    BuildState.PRESET_MATCHED,
    BuildState.SLOTS_ASSIGNED,
)


def _cycle_transitions() -> dict[BuildState, frozenset[BuildState]]:
    table = {BuildState.IDLE: frozenset({BuildState.QUEUES_REBUILT})}
    following = (*BUILD_CYCLE[2:], BuildState.IDLE)
    for current, nxt in zip(BUILD_CYCLE[1:], following):
        table[current] = frozenset({nxt, BuildState.FAILED})
    table[BuildState.FAILED] = frozenset({BuildState.IDLE})
    return table


class BuildStateError(StateTransitionError):
    """Raised when a build step runs out of order."""

    machine = "build"


class BuildStateMachine(StateMachine):
    """State of the edition builder; matching always follows a full selection."""

    TRANSITIONS = _cycle_transitions()
    INITIAL = BuildState.IDLE
    COMPONENT = COMPONENT_EDITION
    ERROR = BuildStateError
