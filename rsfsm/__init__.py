"""Finite state machines built from a text specification, with enter/exit hooks and errors."""

__version__ = "0.1.0"