"""Shared types and errors for tick-machine."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, TypeVar

S = TypeVar("S", bound=Hashable)
T = TypeVar("T", bound=Hashable)

Action = Callable[[], Any]


@dataclass(frozen=True, slots=True)
class RuleKey(Generic[S, T]):
    """Lookup key into a rule table: the originating state and the trigger."""

    source: S
    trigger: T


@dataclass(frozen=True, slots=True)
class Rule(Generic[S, T]):
    """One transition. Actions run in tuple order."""

    source: S
    target: S
    trigger: T
    exit_actions: tuple[Action, ...] = ()
    entry_actions: tuple[Action, ...] = ()

    @property
    def key(self) -> RuleKey[S, T]:
        return RuleKey(self.source, self.trigger)


class Phase(enum.Enum):
    """Which half of a transition an action belongs to."""

    EXIT = "exit"
    ENTRY = "entry"

    @property
    def state_changed(self) -> bool:
        """Entry actions only run after the state has been committed."""
        return self is Phase.ENTRY


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Result of running a single action: ``error`` is None on success."""

    action: Action
    index: int
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MachineError(Exception):
    """Base class for errors raised by tick-machine."""


class ConfigurationError(MachineError):
    """Raised while building a machine. The build call that raised is void."""


class DuplicateStateError(ConfigurationError):
    """Raised when a state is configured more than once on one builder."""

    def __init__(self, state: Any) -> None:
        self.state = state
        super().__init__(
            f"State {state!r} has already been configured; "
            "each state can only be configured once"
        )


class DuplicateTriggerError(ConfigurationError):
    """Raised when a trigger is bound twice for the same state."""

    def __init__(self, state: Any, trigger: Any) -> None:
        self.state = state
        self.trigger = trigger
        super().__init__(
            f"Trigger {trigger!r} is already bound for state {state!r}"
        )


class UnreachableInitialStateError(ConfigurationError):
    """Raised by ``build()`` when the initial state was never configured."""

    def __init__(self, state: Any) -> None:
        self.state = state
        super().__init__(
            f"Initial state {state!r} has no transitions configured"
        )


class TransitionActionError(MachineError):
    """One or more actions failed during a single transition phase.

    Every action of the phase has run by the time this is raised.
    ``state_changed`` tells the caller which side of the commit point the
    failure happened on: exit failures leave the machine in ``rule.source``,
    entry failures leave it in ``rule.target``.
    """

    def __init__(
        self,
        phase: Phase,
        rule: Rule[Any, Any],
        failures: tuple[ActionOutcome, ...],
    ) -> None:
        self.phase = phase
        self.rule = rule
        self.failures = failures
        tag = "state already changed" if phase.state_changed else "state unchanged"
        super().__init__(
            f"{len(failures)} {phase.value} action(s) failed on "
            f"{rule.source!r} --{rule.trigger!r}--> {rule.target!r} ({tag}): "
            + "; ".join(f"[{f.index}] {f.error!r}" for f in failures)
        )

    @property
    def state_changed(self) -> bool:
        return self.phase.state_changed

    @property
    def errors(self) -> tuple[Exception, ...]:
        """Underlying exceptions, in action registration order."""
        return tuple(f.error for f in self.failures if f.error is not None)


def require_hashable(value: Any, role: str) -> None:
    """Raise TypeError unless *value* can key a rule table."""
    try:
        hash(value)
    except TypeError:
        raise TypeError(
            f"{role} must be hashable, got {type(value).__qualname__}"
        ) from None
