"""A coin operated turnstile.

Three coins unlock the turnstile and a push locks it again. Asking for
the balance while unlocked is an error.
"""

from __future__ import annotations

from dataclasses import dataclass

from rsfsm.machine import Event, State, Transition, make_fsm

__all__ = ["CoinMachine", "Locked", "Unlocked", "run_example", "main"]

CoinMachine = make_fsm(
    """
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
    """
)

UNLOCK_COINS = 3
_MAX_COINS = 255


def _check_coin_count(value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"coin count must be an int, got {type(value).__name__}")
    if not 0 <= value <= _MAX_COINS:
        raise ValueError(f"coin count {value} is out of range 0..{_MAX_COINS}")
    return value


@dataclass
class Locked(State):
    """The turnstile is locked and collects coins."""

    coins: int = 0

    def enter(self) -> None:
        super().enter()
        print("=> 🔒(L)")

    def exit(self) -> None:
        super().exit()
        print("🔒(L) =>")

    def handle_event(self, event: Event) -> Transition | None:
        match event.name:
            case "insert_coins":
                (num,) = event.args
                _check_coin_count(num)
                print(f"Received & accepted {num} coins!")
                total = self.coins + num
                if total > _MAX_COINS:
                    raise OverflowError("coin balance overflow")
                self.coins = total
                if self.coins >= UNLOCK_COINS:
                    return Transition.to(Unlocked())
            case "see_balance":
                print(f"Current balance: {self.coins}")
            case _:
                print("Pushed while locked..")
        return None


@dataclass
class Unlocked(State):
    """The turnstile is unlocked until pushed."""

    def enter(self) -> None:
        super().enter()
        print("=> 🔓(U)")

    def exit(self) -> None:
        super().exit()
        print("🔓(U) =>")

    def handle_event(self, event: Event) -> Transition | None:
        match event.name:
            case "push":
                print("Pushed, locking!")
                return Transition.to(Locked(coins=0))
            case "insert_coins":
                (num,) = event.args
                _check_coin_count(num)
                print(f"Wasted {num} coins!! :(")
                return None
            case "see_balance":
                raise CoinMachine.Error("No balance available")
            case _:
                raise CoinMachine.Error(f"unexpected event {event.name}")


def run_example() -> None:
    """Drive the turnstile through a scripted sequence ending in an error."""
    fsm = CoinMachine(Transition.to(Locked(coins=0)))

    fsm.push()
    fsm.push()
    fsm.insert_coins(2)
    fsm.insert_coins(1)
    fsm.insert_coins(5)
    fsm.push()
    fsm.push()

    fsm.insert_coins(1)
    fsm.see_balance()
    fsm.insert_coins(2)

    fsm.see_balance()

    fsm.push()


def main(argv: list[str] | None = None) -> int:
    """Run the coin machine example and report its error."""
    try:
        run_example()
    except CoinMachine.Error as err:
        print(f"Error occured: {err}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())