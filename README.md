# rsfsm

A small library for finite state machines. You describe a machine by its
name, the events it handles and the states it can be in. Each state has
`enter` and `exit` hooks and a `handle_event` method. That method either
stays in the current state, returns a transition to a new state, or raises
an error that propagates to the caller.

## Describing a machine

`rsfsm.parsers.parse_fsm` parses a compact text description into a frozen
`FiniteStateMachine` of `StateSpec` and `EventSpec` entries:

```python
from rsfsm.parsers import parse_fsm

spec = parse_fsm("""
    name: CoinMachine,
    events: [
        push(),
        insert_coins(u8),
        see_balance()
    ],
    states: [
        Locked,
        Unlocked
    ]
""")

spec.state_names            # ('Locked', 'Unlocked')
spec.events[1].parameters   # ('u8',)
```

The parser accepts groups delimited by `[]`, `()` or `{}`, trailing commas,
and `//` and `/* */` comments. If a key appears more than once, the later
value wins. It raises `FsmParseError` (a `ValueError`) in these cases:

- the name, the states or the events are missing;
- it meets an unknown key (`Undefined identifier`);
- brackets are unbalanced;
- the input is otherwise malformed.

## Building a machine class

`rsfsm.machine.make_fsm(spec)` takes either the text or a parsed
`FiniteStateMachine` and returns a `StateMachine` subclass named after the
machine. The class has:

- one method per event, for example `fsm.push()` or `fsm.insert_coins(2)`.
  Each method checks how many arguments it was given and delivers an
  `Event(name, args)`.
- an `Error` attribute, a subclass of `FsmError` named `<Name>Error`, for
  example `CoinMachineError`.

`make_fsm` raises `FsmParseError` in these cases:

- a state or event name is duplicated;
- an event name clashes with a `StateMachine` attribute.

A machine is created from an initial transition, and its `enter` hook runs
at once. `current_state` returns the active state. `handle_event(event)`
raises `TypeError` in these cases:

- the event is not one the machine declares;
- the event has the wrong number of arguments;
- a transition targets a state the machine does not declare.

## Writing states

States subclass `rsfsm.machine.State`:

- `handle_event` returns `None` to stay put, or `Transition.to(NextState(...))`
  to move on.
- To fail, it raises `FsmError` or the machine's `Error` class. The error
  propagates, and the machine stays in its current state.
- On a transition, the machine calls `exit` on the old state and then
  `enter` on the new one.
- The base hooks keep the `active` property up to date, so overrides should
  call `super()`.
- State objects can carry data across transitions.

## Examples

The package ships two example machines as commands:

```
rsfsm-blinky
rsfsm-coin-machine
```

- `rsfsm-blinky` (`rsfsm.blinky`): a blinking LED that toggles on each timer
  tick. A button press disables it and a second press enables it again,
  with the LED state remembered across the pause.
- `rsfsm-coin-machine` (`rsfsm.coin_machine`): a turnstile that unlocks once
  three coins are in and locks again when pushed. Asking for the balance
  while it is unlocked raises `CoinMachine.Error`, which the command prints
  as `Error occured: No balance available`.

## Tests

```
pip install -e .[test]
pytest
```