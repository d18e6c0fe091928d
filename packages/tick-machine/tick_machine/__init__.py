"""tick-machine - Fluent finite state machines with ordered exit/entry actions."""
from __future__ import annotations

from tick_machine.builder import MachineBuilder, StateScope, TransitionBinder
from tick_machine.draft import TransitionDraft
from tick_machine.machine import StateMachine
from tick_machine.types import (
    ActionOutcome,
    ConfigurationError,
    DuplicateStateError,
    DuplicateTriggerError,
    MachineError,
    Phase,
    Rule,
    RuleKey,
    TransitionActionError,
    UnreachableInitialStateError,
)

__all__ = [
    "ActionOutcome",
    "ConfigurationError",
    "DuplicateStateError",
    "DuplicateTriggerError",
    "MachineBuilder",
    "MachineError",
    "Phase",
    "Rule",
    "RuleKey",
    "StateMachine",
    "StateScope",
    "TransitionActionError",
    "TransitionBinder",
    "TransitionDraft",
    "UnreachableInitialStateError",
]
