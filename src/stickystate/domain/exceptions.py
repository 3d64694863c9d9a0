"""
Domain exceptions for sticky state trees.

Reference errors name a state that does not exist or is not suspended;
invariant violations target a state the transition itself is activating.
All of them abort the diff computation before the registry is touched.
"""


class StickyStateError(Exception):
    """Base class for sticky state failures."""

    def __init__(self, message: str, state_name: str | None = None):
        """
        Args:
            message: Human-readable error message
            state_name: Name of the offending state, if any
        """
        super().__init__(message)
        self.state_name = state_name


class StateNotFoundError(StickyStateError):
    """Raised when a state reference does not resolve to a registered state."""

    def __init__(self, state_name: str):
        super().__init__(f"State not found: {state_name}", state_name)


class StateNotInactiveError(StickyStateError):
    """Raised when eviction is requested for a state that is not suspended."""

    def __init__(self, state_name: str):
        super().__init__(f"State not inactive: {state_name}", state_name)


class ActiveStateEvictionError(StickyStateError):
    """
    Raised when eviction targets a state in the path being activated.

    The transition that carries the request is rejected as a whole.
    """

    def __init__(self, state_name: str):
        super().__init__(
            "Can not exit a sticky state that is currently active/activating: "
            + state_name,
            state_name,
        )


class DuplicateStateError(StickyStateError):
    """Raised when a state name is registered twice."""

    def __init__(self, state_name: str):
        super().__init__(f"State already registered: {state_name}", state_name)


class TransitionRejectedError(StickyStateError):
    """
    Raised by hosts that surface rejected transitions as exceptions.

    Wraps the original failure as ``cause``.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause
