"""
Plugin lifecycle state model.

ACTIVE <-> PAUSED, and either of them -> DESTROYED (terminal).
"""

from enum import Enum

from ..errors import LifecycleError


class PluginState(str, Enum):
    """Lifecycle states of a plugin instance."""
    ACTIVE = "active"
    PAUSED = "paused"
    DESTROYED = "destroyed"


ALLOWED_TRANSITIONS = {
    PluginState.ACTIVE: {PluginState.PAUSED, PluginState.DESTROYED},
    PluginState.PAUSED: {PluginState.ACTIVE, PluginState.DESTROYED},
    PluginState.DESTROYED: set(),
}


def can_transition(current: PluginState, target: PluginState) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def check_transition(current: PluginState, target: PluginState) -> None:
    """
    Raises:
        LifecycleError: If the transition is not allowed
    """
    if not can_transition(current, target):
        raise LifecycleError(
            f"Invalid lifecycle transition {current.value} -> {target.value}",
            current_state=current.value,
            attempted_transition=target.value,
        )
