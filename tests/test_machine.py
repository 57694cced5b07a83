import pytest

from rsfsm.machine import (
    Event,
    FsmError,
    State,
    StateMachine,
    Transition,
    make_fsm,
)
from rsfsm.parsers import FsmParseError, parse_fsm

SPEC = """
name: Door,
events: [open(), close(), knock(u8, String)],
states: [Closed, Opened]
"""

Door = make_fsm(SPEC)


class Closed(State):
    def __init__(self, log):
        self.log = log
        self.knocks = []

    def enter(self):
        self.log.append("enter Closed")

    def exit(self):
        self.log.append("exit Closed")

    def handle_event(self, event):
        match event:
            case Event("open"):
                return Transition.to(Opened(self.log))
            case Event("knock", (count, who)):
                self.knocks.append((count, who))
                return None
            case Event("close"):
                raise Door.Error("already closed")


class Opened(State):
    def __init__(self, log):
        self.log = log

    def enter(self):
        self.log.append("enter Opened")

    def exit(self):
        self.log.append("exit Opened")

    def handle_event(self, event):
        match event:
            case Event("close"):
                return Transition.to(Closed(self.log))
            case Event("knock"):
                return Transition.to(Stranger())
            case _:
                return None


class Stranger(State):
    def handle_event(self, event):
        return None


class Quiet(State):
    def __init__(self):
        self.seen = []

    def handle_event(self, event):
        self.seen.append(event)
        return "not a transition" if event.name == "bad" else None


def test_generated_class_names():
    assert Door.__name__ == "Door"
    assert Door.Error.__name__ == "DoorError"
    assert issubclass(Door, StateMachine)
    assert issubclass(Door.Error, FsmError)


def test_spec_is_attached():
    assert Door.spec == parse_fsm(SPEC)


def test_init_enters_initial_state():
    log = []
    initial = Closed(log)
    door = Door(Transition.to(initial))
    assert door.current_state is initial
    assert log == ["enter Closed"]


def test_transition_runs_exit_then_enter():
    log = []
    door = Door(Transition.to(Closed(log)))
    door.open()
    assert isinstance(door.current_state, Opened)
    assert log == ["enter Closed", "exit Closed", "enter Opened"]


def test_event_without_transition_keeps_state_and_passes_arguments():
    log = []
    initial = Closed(log)
    door = Door(Transition.to(initial))
    assert door.knock(2, "guest") is None
    assert door.current_state is initial
    assert initial.knocks == [(2, "guest")]
    assert log == ["enter Closed"]


def test_round_trip_returns_to_fresh_closed_state():
    log = []
    initial = Closed(log)
    door = Door(Transition.to(initial))
    door.open()
    door.close()
    assert isinstance(door.current_state, Closed)
    assert door.current_state is not initial
    assert log.count("enter Closed") == 2


def test_state_error_propagates_and_leaves_state():
    log = []
    initial = Closed(log)
    door = Door(Transition.to(initial))
    with pytest.raises(Door.Error) as info:
        door.close()
    assert str(info.value) == "already closed"
    assert info.value.message == "already closed"
    assert door.current_state is initial
    assert log == ["enter Closed"]


def test_wrong_argument_count_is_rejected():
    door = Door(Transition.to(Closed([])))
    with pytest.raises(TypeError):
        door.knock(1)
    with pytest.raises(TypeError):
        door.open(1)


def test_undeclared_event_is_rejected():
    door = Door(Transition.to(Closed([])))
    with pytest.raises(TypeError):
        door.handle_event(Event("ring"))
    with pytest.raises(TypeError):
        door.handle_event(Event("knock", (1,)))


def test_initial_state_must_be_declared():
    with pytest.raises(TypeError):
        Door(Transition.to(Stranger()))


def test_transition_target_must_be_declared():
    log = []
    door = Door(Transition.to(Closed(log)))
    door.open()
    opened = door.current_state
    with pytest.raises(TypeError):
        door.knock(1, "x")
    assert door.current_state is opened
    assert "exit Opened" not in log


def test_transition_requires_state():
    with pytest.raises(TypeError):
        Transition.to(object())


def test_state_without_handler_cannot_be_created():
    class Incomplete(State):
        pass

    with pytest.raises(TypeError):
        Transition.to(Incomplete())


def test_plain_machine_accepts_any_state_and_event():
    quiet = Quiet()
    machine = StateMachine(Transition.to(quiet))
    machine.handle_event(Event("anything", [1, 2]))
    assert quiet.seen == [Event("anything", (1, 2))]
    assert machine.current_state is quiet


def test_handler_returning_non_transition_is_rejected():
    machine = StateMachine(Transition.to(Quiet()))
    with pytest.raises(TypeError):
        machine.handle_event(Event("bad"))


def test_event_args_become_tuple():
    assert Event("x", [1]).args == (1,)
    assert Event("x").args == ()


def test_make_fsm_accepts_parsed_specification():
    spec = parse_fsm("name: Lamp, events: [toggle()], states: [Dark]")
    lamp_class = make_fsm(spec)
    assert lamp_class.spec is spec
    assert lamp_class.__name__ == "Lamp"
    assert callable(lamp_class.toggle)


def test_duplicate_names_are_rejected():
    with pytest.raises(FsmParseError):
        make_fsm("name: M, events: [a(), a()], states: [S]")
    with pytest.raises(FsmParseError):
        make_fsm("name: M, events: [a()], states: [S, S]")


def test_event_name_clashing_with_machine_is_rejected():
    with pytest.raises(FsmParseError):
        make_fsm("name: M, events: [handle_event()], states: [S]")


def test_machines_have_distinct_error_types():
    other = make_fsm("name: Other, events: [a()], states: [S]")
    assert other.Error is not Door.Error
    assert not issubclass(other.Error, Door.Error)