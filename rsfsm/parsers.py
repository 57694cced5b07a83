"""Parsing of textual finite state machine specifications.

A specification is a comma separated list of ``key: value`` expressions::

    name: CoinMachine,
    events: [push(), insert_coins(u8), see_balance()],
    states: [Locked, Unlocked]

Groups may be delimited by ``[]``, ``()`` or ``{}``, trailing commas are
allowed and ``//`` and ``/* */`` comments are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

__all__ = [
    "FsmParseError",
    "StateSpec",
    "EventSpec",
    "FiniteStateMachine",
    "parse_fsm",
]


class FsmParseError(ValueError):
    """Raised when a state machine specification is malformed."""

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class StateSpec:
    """A state named in a specification."""

    name: str


@dataclass(frozen=True)
class EventSpec:
    """An event named in a specification, with its parameter types."""

    name: str
    parameters: tuple[str, ...] = ()

    @property
    def arity(self) -> int:
        """Number of arguments the event carries."""
        return len(self.parameters)


@dataclass(frozen=True)
class FiniteStateMachine:
    """A parsed state machine specification."""

    name: str
    states: tuple[StateSpec, ...] = field(default_factory=tuple)
    events: tuple[EventSpec, ...] = field(default_factory=tuple)

    @property
    def state_names(self) -> tuple[str, ...]:
        return tuple(state.name for state in self.states)

    @property
    def event_names(self) -> tuple[str, ...]:
        return tuple(event.name for event in self.events)


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<line_comment>//[^\n]*)
    |(?P<block_comment>/\*.*?\*/)
    |(?P<bad_comment>/\*)
    |(?P<ident>[^\W\d]\w*)
    |(?P<number>\d[\w.]*)
    |(?P<open>[(\[{])
    |(?P<close>[)\]}])
    |(?P<punct>::|->|=>|.)
    """,
    re.VERBOSE | re.DOTALL,
)

_CLOSERS = {"(": ")", "[": "]", "{": "}"}
_WORD_KINDS = ("ident", "number")


@dataclass
class _Token:
    kind: str
    text: str
    start: int
    end: int


@dataclass
class _Group:
    open: str
    items: list
    start: int
    end: int = 0


def _tokenize(text: str):
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        if kind in ("ws", "line_comment", "block_comment"):
            continue
        if kind == "bad_comment":
            raise FsmParseError("unterminated block comment", match.start())
        yield _Token(kind, match.group(), match.start(), match.end())


def _build_tree(tokens) -> list:
    root: list = []
    stack: list[tuple[_Group, list]] = []
    current = root
    for token in tokens:
        if token.kind == "open":
            group = _Group(token.text, [], token.start)
            current.append(group)
            stack.append((group, current))
            current = group.items
        elif token.kind == "close":
            if not stack:
                raise FsmParseError(f"unexpected '{token.text}'", token.start)
            group, parent = stack.pop()
            if _CLOSERS[group.open] != token.text:
                raise FsmParseError(
                    f"mismatched '{token.text}' for '{group.open}'", token.start
                )
            group.end = token.end
            current = parent
        else:
            current.append(token)
    if stack:
        group, _ = stack[-1]
        raise FsmParseError(f"unclosed '{group.open}'", group.start)
    return root


def _is_punct(item, text: str) -> bool:
    return isinstance(item, _Token) and item.kind == "punct" and item.text == text


def _is_ident(item) -> bool:
    return isinstance(item, _Token) and item.kind == "ident"


def _split(items: list, angle_aware: bool = False) -> list[list]:
    """Split items on top level commas; a trailing comma is allowed."""
    segments: list[list] = [[]]
    depth = 0
    for item in items:
        if angle_aware and _is_punct(item, "<"):
            depth += 1
        elif angle_aware and _is_punct(item, ">") and depth > 0:
            depth -= 1
        if depth == 0 and _is_punct(item, ","):
            segments.append([])
        else:
            segments[-1].append(item)
    if not segments[-1]:
        segments.pop()
    for segment in segments:
        if not segment:
            raise FsmParseError("expected item before ','")
    return segments


def _render(items: list) -> str:
    parts: list[str] = []
    previous_word = False
    for item in items:
        if isinstance(item, _Group):
            parts.append(item.open + _render(item.items) + _CLOSERS[item.open])
            previous_word = False
            continue
        word = item.kind in _WORD_KINDS
        if word and previous_word:
            parts.append(" ")
        parts.append(item.text)
        if item.text == ",":
            parts.append(" ")
        previous_word = word
    return "".join(parts).rstrip()


def _position_after(segment: list) -> int | None:
    return segment[-1].end if segment else None


def _single_group(rest: list, segment: list) -> _Group:
    if len(rest) != 1 or not isinstance(rest[0], _Group):
        position = rest[0].start if rest else _position_after(segment)
        raise FsmParseError("expected a delimited group", position)
    return rest[0]


def _parse_state(segment: list) -> StateSpec:
    if len(segment) != 1 or not _is_ident(segment[0]):
        raise FsmParseError("expected state identifier", segment[0].start)
    return StateSpec(segment[0].text)


def _parse_event(segment: list) -> EventSpec:
    head, *rest = segment
    if not _is_ident(head):
        raise FsmParseError("expected event identifier", head.start)
    group = _single_group(rest, segment)
    parameters = tuple(_render(part) for part in _split(group.items, angle_aware=True))
    return EventSpec(head.text, parameters)


def _parse_expression(segment: list):
    key = segment[0]
    if not _is_ident(key):
        raise FsmParseError("expected identifier", key.start)
    if len(segment) < 2 or not _is_punct(segment[1], ":"):
        position = segment[1].start if len(segment) > 1 else key.end
        raise FsmParseError("expected ':'", position)
    rest = segment[2:]
    if key.text == "name":
        if len(rest) != 1 or not _is_ident(rest[0]):
            position = rest[0].start if rest else _position_after(segment)
            raise FsmParseError("expected identifier", position)
        return "name", rest[0].text
    if key.text == "events":
        group = _single_group(rest, segment)
        return "events", tuple(_parse_event(part) for part in _split(group.items))
    if key.text == "states":
        group = _single_group(rest, segment)
        return "states", tuple(_parse_state(part) for part in _split(group.items))
    raise FsmParseError("Undefined identifier", key.start)


def parse_fsm(text: str) -> FiniteStateMachine:
    """Parse a specification into a :class:`FiniteStateMachine`.

    Later expressions override earlier ones with the same key.
    """
    values: dict[str, object] = {}
    for segment in _split(_build_tree(_tokenize(text))):
        key, value = _parse_expression(segment)
        values[key] = value

    name = values.get("name")
    states = values.get("states", ())
    events = values.get("events", ())
    if name is None:
        raise FsmParseError("No name specified")
    if not states:
        raise FsmParseError("No states specified")
    if not events:
        raise FsmParseError("No events specified")
    return FiniteStateMachine(name, states, events)