"""Fluent builder for rule tables."""
from __future__ import annotations

import logging
from typing import Callable, Generic

from tick_machine.draft import TransitionDraft
from tick_machine.machine import StateMachine
from tick_machine.types import (
    Action,
    DuplicateStateError,
    DuplicateTriggerError,
    Rule,
    RuleKey,
    S,
    T,
    UnreachableInitialStateError,
    require_hashable,
)

logger = logging.getLogger(__name__)


class StateScope(Generic[S, T]):
    """Declares the outgoing transitions of one state.

    Actions registered with ``on_exit``/``on_enter`` belong to the next
    ``on(trigger).go_to(target)`` in the chain::

        (scope.on_exit(a).on_enter(b).on(Play).go_to(Playing)
              .on_enter(c).on(Stop).go_to(Stopped))

    Here ``Play`` runs ``a`` then ``b``; ``Stop`` runs only ``c``.
    """

    def __init__(self, state: S) -> None:
        self._state = state
        self._draft = TransitionDraft()
        self._rules: dict[T, Rule[S, T]] = {}

    @property
    def state(self) -> S:
        return self._state

    def on_exit(self, action: Action) -> StateScope[S, T]:
        self._draft.add_exit(action)
        return self

    def on_enter(self, action: Action) -> StateScope[S, T]:
        self._draft.add_entry(action)
        return self

    def on(self, trigger: T) -> TransitionBinder[S, T]:
        require_hashable(trigger, "trigger")
        return TransitionBinder(self, trigger)

    def _bind(self, trigger: T, target: S) -> StateScope[S, T]:
        if trigger in self._rules:
            raise DuplicateTriggerError(self._state, trigger)
        exit_actions, entry_actions = self._draft.take()
        self._rules[trigger] = Rule(
            source=self._state,
            target=target,
            trigger=trigger,
            exit_actions=exit_actions,
            entry_actions=entry_actions,
        )
        logger.debug(
            "Bound %r --%r--> %r (%d exit, %d entry)",
            self._state, trigger, target, len(exit_actions), len(entry_actions),
        )
        return self

    def _finish(self) -> dict[T, Rule[S, T]]:
        dangling = self._draft.pending()
        if dangling:
            logger.warning(
                "Discarding %d action(s) registered on state %r "
                "without a following on(...).go_to(...)",
                dangling, self._state,
            )
            self._draft.take()
        return self._rules


class TransitionBinder(Generic[S, T]):
    """Pending ``on(trigger)`` waiting for its target state."""

    def __init__(self, scope: StateScope[S, T], trigger: T) -> None:
        self._scope = scope
        self._trigger = trigger

    def go_to(self, target: S) -> StateScope[S, T]:
        """Bind the trigger to *target* using the scope's pending actions.

        Raises DuplicateTriggerError if the trigger is already bound for
        this state.
        """
        require_hashable(target, "target state")
        return self._scope._bind(self._trigger, target)


class MachineBuilder(Generic[S, T]):
    """Collects per-state transitions and freezes them into a StateMachine."""

    def __init__(self, initial_state: S) -> None:
        require_hashable(initial_state, "initial state")
        self._initial_state = initial_state
        self._states: dict[S, dict[T, Rule[S, T]]] = {}

    @property
    def initial_state(self) -> S:
        return self._initial_state

    def state(
        self,
        state: S,
        configure: Callable[[StateScope[S, T]], object],
    ) -> MachineBuilder[S, T]:
        """Configure the outgoing transitions of *state*.

        Raises DuplicateStateError if *state* (by equality) was configured
        before. If *configure* raises, nothing is recorded for *state*.
        """
        require_hashable(state, "state")
        if state in self._states:
            raise DuplicateStateError(state)
        scope: StateScope[S, T] = StateScope(state)
        configure(scope)
        self._states[state] = scope._finish()
        return self

    def build(self) -> StateMachine[S, T]:
        """Return a new StateMachine seeded with the initial state.

        Raises UnreachableInitialStateError if the initial state was never
        passed to ``state()``.
        """
        if self._initial_state not in self._states:
            raise UnreachableInitialStateError(self._initial_state)
        rules: dict[RuleKey[S, T], Rule[S, T]] = {}
        for transitions in self._states.values():
            for rule in transitions.values():
                rules[rule.key] = rule
        logger.debug(
            "Built machine: initial=%r, %d state(s), %d rule(s)",
            self._initial_state, len(self._states), len(rules),
        )
        return StateMachine(self._initial_state, rules)
