"""A small flat finite state machine driven by integer events."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable


class FsmError(RuntimeError):
    """The state machine cannot process events."""


class FsmBusyError(FsmError):
    """An event was dispatched while another one was still being processed."""


class FsmTransition:
    """A transition towards a destination state, with an optional action.

    A transition without destination runs its action and stays in the
    current state. The action is the ``action`` attribute, a callable
    taking no arguments, or None for a transition without action.
    """

    def __init__(self, destination: FsmState | None = None) -> None:
        self.destination = destination
        self.action: Callable[[], None] | None = None

    def execute(self) -> None:
        """Run the action bound to this transition, if there is one."""
        if self.action is not None:
            self.action()


class FsmState(ABC):
    """A state of the machine."""

    @abstractmethod
    def process_event(self, event: int) -> FsmTransition | None:
        """Handle an event and return the transition to take, if any."""

    @abstractmethod
    def enter(self) -> None:
        """Called when the machine enters this state."""

    @abstractmethod
    def exit(self) -> None:
        """Called when the machine leaves this state."""


class FsmInitialState(FsmState):
    """The state a machine starts in; it is initialised once."""

    @abstractmethod
    def init(self) -> None:
        """One-time initialisation, run before the state is first entered."""


class Fsm:
    """Runs states and transitions in response to dispatched events."""

    def __init__(self, initial_state: FsmInitialState) -> None:
        self._initial_state = initial_state
        self._state: FsmState | None = None
        self._transitioning = False

    @property
    def state(self) -> FsmState | None:
        """The current state, or None before init()."""
        return self._state

    def init(self) -> None:
        """Initialise and enter the initial state."""
        self._initial_state.init()
        self._initial_state.enter()
        self._state = self._initial_state

    def dispatch(self, event: int) -> None:
        """Let the current state process an event and follow its transition."""
        if self._state is None:
            raise FsmError("state machine is not initialised")
        if self._transitioning:
            raise FsmBusyError("state machine is already processing an event")
        self._transitioning = True
        try:
            self._execute(self._state.process_event(event))
        finally:
            self._transitioning = False

    def _execute(self, transition: FsmTransition | None) -> None:
        if transition is None:
            return
        destination = transition.destination
        if destination is None:
            transition.execute()
            return
        assert self._state is not None
        self._state.exit()
        transition.execute()
        destination.enter()
        self._state = destination

    def is_in_state(self, state: FsmState) -> bool:
        """Whether the given state is the current one."""
        return state is self._state