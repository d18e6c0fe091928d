"""TransitionDraft - pending actions for the next bound transition."""
from __future__ import annotations

from tick_machine.types import Action


class TransitionDraft:
    """Accumulates exit/entry actions until a trigger binding consumes them.

    ``take()`` moves the current contents out and leaves the draft empty,
    so a rule never shares a list with later registrations.
    """

    def __init__(self) -> None:
        self._exit: list[Action] = []
        self._entry: list[Action] = []

    def add_exit(self, action: Action) -> None:
        self._exit.append(_check_action(action, "exit"))

    def add_entry(self, action: Action) -> None:
        self._entry.append(_check_action(action, "entry"))

    def take(self) -> tuple[tuple[Action, ...], tuple[Action, ...]]:
        """Return ``(exit_actions, entry_actions)`` and clear the draft."""
        taken = (tuple(self._exit), tuple(self._entry))
        self._exit = []
        self._entry = []
        return taken

    def pending(self) -> int:
        """Return the number of actions waiting for a binding."""
        return len(self._exit) + len(self._entry)


def _check_action(action: Action, kind: str) -> Action:
    if action is None:
        raise TypeError(f"{kind} action must not be None")
    if not callable(action):
        raise TypeError(
            f"{kind} action must be callable, got {type(action).__qualname__}"
        )
    return action
