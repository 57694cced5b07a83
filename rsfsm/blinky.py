"""A blinking LED that can be switched off and on again.

The machine toggles an LED on every timer tick while blinking. A button
press disables it, and the LED state is kept across the pause so that
blinking resumes where it left off.
"""

from __future__ import annotations

from dataclasses import dataclass

from rsfsm.machine import Event, State, Transition, make_fsm

__all__ = ["Blinky", "Blinking", "NotBlinking", "run_example", "main"]

Blinky = make_fsm(
    """
    name: Blinky,
    events: [
        timer_elapsed(),
        button_pressed()
    ],
    states: [
        Blinking,
        NotBlinking
    ]
    """
)


@dataclass
class Blinking(State):
    """The LED toggles on every timer tick."""

    led_on: bool = False

    def handle_event(self, event: Event) -> Transition | None:
        match event.name:
            case "timer_elapsed":
                self.led_on = not self.led_on
                print(f"💡 {'ON' if self.led_on else 'OFF'}")
                return None
            case "button_pressed":
                print("Turning off")
                return Transition.to(NotBlinking(stored_led_state=self.led_on))
            case _:
                raise Blinky.Error(f"unexpected event {event.name}")


@dataclass
class NotBlinking(State):
    """Blinking is disabled; the LED state from before is kept."""

    stored_led_state: bool = False

    def handle_event(self, event: Event) -> Transition | None:
        match event.name:
            case "timer_elapsed":
                print("    Ignored timer - machine is disabled")
                return None
            case "button_pressed":
                print("Turning on")
                return Transition.to(Blinking(led_on=self.stored_led_state))
            case _:
                raise Blinky.Error(f"unexpected event {event.name}")


def run_example() -> None:
    """Blink, pause, and resume blinking, printing each step."""
    fsm = Blinky(Transition.to(Blinking(led_on=False)))

    for _ in range(3):
        fsm.timer_elapsed()

    fsm.button_pressed()

    for _ in range(3):
        fsm.timer_elapsed()

    fsm.button_pressed()

    for _ in range(3):
        fsm.timer_elapsed()


def main(argv: list[str] | None = None) -> int:
    """Run the blinking example."""
    run_example()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())