"""Finite state machines built from specifications.

:func:`make_fsm` turns a specification into a :class:`StateMachine`
subclass with one method per declared event and its own error type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from typing import Any, ClassVar

from rsfsm.parsers import EventSpec, FiniteStateMachine, FsmParseError, parse_fsm

__all__ = [
    "FsmError",
    "Event",
    "State",
    "Transition",
    "StateMachine",
    "make_fsm",
]


class FsmError(Exception):
    """Error raised by a state while handling an event."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Event:
    """An event delivered to a state machine."""

    name: str
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


class State(ABC):
    """A state of a machine, with enter and exit hooks.

    The base hooks track whether the state is the machine's active one;
    subclasses that override them should call ``super()``.
    """

    @property
    def active(self) -> bool:
        """Whether a machine has entered this state and not yet left it."""
        return getattr(self, "_active", False)

    def enter(self) -> None:
        """Called when the machine enters this state."""
        self._active = True

    def exit(self) -> None:
        """Called when the machine leaves this state."""
        self._active = False

    @abstractmethod
    def handle_event(self, event: Event) -> Transition | None:
        """Handle an event; return a transition, or None to stay.

        Raise an :class:`FsmError` to report a failure.
        """


@dataclass(frozen=True)
class Transition:
    """A request to move the machine to a target state."""

    target: State

    @classmethod
    def to(cls, state: State) -> Transition:
        """Build a transition to ``state``."""
        if not isinstance(state, State):
            raise TypeError(f"{type(state).__name__} is not a State")
        return cls(state)


class StateMachine:
    """Runs events against the current state and performs transitions."""

    spec: ClassVar[FiniteStateMachine | None] = None
    Error: ClassVar[type[FsmError]] = FsmError

    def __init__(self, init: Transition) -> None:
        self._state = self._accept(init)
        self._state.enter()

    @property
    def current_state(self) -> State:
        """The state the machine is in."""
        return self._state

    def handle_event(self, event: Event) -> None:
        """Deliver ``event`` to the current state and follow any transition.

        Errors raised by the state propagate and leave the machine where it is.
        """
        self._check_event(event)
        transition = self._state.handle_event(event)
        if transition is None:
            return
        target = self._accept(transition)
        self._state.exit()
        self._state = target
        self._state.enter()

    def _accept(self, transition: Any) -> State:
        if not isinstance(transition, Transition):
            raise TypeError(f"expected a Transition, got {type(transition).__name__}")
        target = transition.target
        spec = type(self).spec
        if spec is not None and type(target).__name__ not in spec.state_names:
            raise TypeError(
                f"{type(target).__name__} is not a state of {spec.name}"
            )
        return target

    def _check_event(self, event: Any) -> None:
        if not isinstance(event, Event):
            raise TypeError(f"expected an Event, got {type(event).__name__}")
        spec = type(self).spec
        if spec is None:
            return
        for declared in spec.events:
            if declared.name == event.name:
                if declared.arity != len(event.args):
                    raise TypeError(
                        f"event {event.name} takes {declared.arity} argument(s), "
                        f"got {len(event.args)}"
                    )
                return
        raise TypeError(f"{event.name} is not an event of {spec.name}")


def _event_method(declared: EventSpec):
    name = declared.name
    arity = declared.arity

    def method(self: StateMachine, *args: Any) -> None:
        if len(args) != arity:
            raise TypeError(f"{name}() takes {arity} argument(s) ({len(args)} given)")
        self.handle_event(Event(name, args))

    method.__name__ = name
    signature = ", ".join(declared.parameters)
    method.__doc__ = f"Deliver the {name}({signature}) event."
    return method


def _check_unique(names: tuple[str, ...], kind: str) -> None:
    duplicates = [name for name, count in Counter(names).items() if count > 1]
    if duplicates:
        raise FsmParseError(f"duplicate {kind}: {', '.join(duplicates)}")


def make_fsm(spec: str | FiniteStateMachine) -> type[StateMachine]:
    """Build a state machine class from a specification.

    The class is named after the specification, carries an ``Error``
    subclass of :class:`FsmError` named ``<Name>Error`` and has one
    method per event.
    """
    if isinstance(spec, str):
        spec = parse_fsm(spec)
    _check_unique(spec.state_names, "state")
    _check_unique(spec.event_names, "event")

    namespace: dict[str, Any] = {
        "__doc__": f"State machine {spec.name}.",
        "spec": spec,
        "Error": type(f"{spec.name}Error", (FsmError,), {}),
    }
    for declared in spec.events:
        if hasattr(StateMachine, declared.name) or declared.name in namespace:
            raise FsmParseError(f"event name {declared.name} clashes with the machine")
        method = _event_method(declared)
        method.__qualname__ = f"{spec.name}.{declared.name}"
        namespace[declared.name] = method
    return type(spec.name, (StateMachine,), namespace)