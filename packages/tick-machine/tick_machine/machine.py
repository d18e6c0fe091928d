"""StateMachine - trigger resolution and transition execution."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Generic

from tick_machine.types import (
    Action,
    ActionOutcome,
    Phase,
    Rule,
    RuleKey,
    S,
    T,
    TransitionActionError,
)

if TYPE_CHECKING:
    from tick_machine.builder import MachineBuilder

logger = logging.getLogger(__name__)


class StateMachine(Generic[S, T]):
    """Runs triggers against an immutable rule table.

    Not thread-safe: callers that share a machine across threads must
    serialize ``trigger()`` themselves.
    """

    def __init__(self, initial_state: S, rules: dict[RuleKey[S, T], Rule[S, T]]) -> None:
        self._rules = MappingProxyType(dict(rules))
        self._state = initial_state

    @staticmethod
    def with_initial_state(initial_state: S) -> MachineBuilder[S, T]:
        from tick_machine.builder import MachineBuilder

        return MachineBuilder(initial_state)

    @property
    def current_state(self) -> S:
        return self._state

    @property
    def rules(self) -> Mapping[RuleKey[S, T], Rule[S, T]]:
        return self._rules

    def trigger(self, trigger: T) -> bool:
        """Fire *trigger* from the current state.

        Returns False, with no side effects, if no rule matches. Otherwise
        runs every exit action, commits the target state, runs every entry
        action and returns True.

        Raises TransitionActionError after the exit phase if any exit action
        failed (state unchanged), or after the entry phase if any entry
        action failed (state already changed; not rolled back).
        """
        rule = self._rules.get(RuleKey(self._state, trigger))
        if rule is None:
            logger.debug("No rule for %r --%r-->", self._state, trigger)
            return False

        self._run_phase(Phase.EXIT, rule, rule.exit_actions)
        self._state = rule.target
        logger.debug("Transitioned %r --%r--> %r", rule.source, trigger, rule.target)
        self._run_phase(Phase.ENTRY, rule, rule.entry_actions)
        return True

    def _run_phase(
        self,
        phase: Phase,
        rule: Rule[S, T],
        actions: tuple[Action, ...],
    ) -> None:
        outcomes = [_run_action(i, action) for i, action in enumerate(actions)]
        failures = tuple(o for o in outcomes if not o.ok)
        if not failures:
            return
        logger.warning(
            "%d of %d %s action(s) failed on %r --%r--> %r",
            len(failures), len(actions), phase.value,
            rule.source, rule.trigger, rule.target,
        )
        raise TransitionActionError(phase, rule, failures) from failures[0].error


def _run_action(index: int, action: Action) -> ActionOutcome:
    try:
        action()
    except Exception as exc:
        return ActionOutcome(action, index, exc)
    return ActionOutcome(action, index)
