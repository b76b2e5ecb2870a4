"""Lifecycle of a config directory load."""

from enum import Enum, auto

from src.config.constants import COMPONENT_CONFIG
from src.data_model.state_machine import StateMachine, StateTransitionError


class ConfigState(Enum):
    """Where a ConfigLoader is in its single load.

    UNLOADED -> LOADING -> VALIDATED -> READY, with FAILED reachable from
    every state before READY. READY and FAILED are both final.
    """

    UNLOADED = auto()
    LOADING = auto()
    VALIDATED = auto()
    READY = auto()
    FAILED = auto()


class ConfigStateError(StateTransitionError):
    """Raised when a loader is reused or a load step is skipped."""

    machine = "config"


class ConfigStateMachine(StateMachine):
    """State of one loader; a finished loader never loads again."""

    TRANSITIONS = {
        ConfigState.UNLOADED: frozenset({ConfigState.LOADING, ConfigState.FAILED}),
        ConfigState.LOADING: frozenset({ConfigState.VALIDATED, ConfigState.FAILED}),
        ConfigState.VALIDATED: frozenset({ConfigState.READY, ConfigState.FAILED}),
        ConfigState.READY: frozenset(),
        ConfigState.FAILED: frozenset(),
    }
    INITIAL = ConfigState.UNLOADED
    COMPONENT = COMPONENT_CONFIG
    ERROR = ConfigStateError
