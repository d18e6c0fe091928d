"""Integration tests for tick-machine."""
import enum
import logging

import pytest
from tick_machine import (
    DuplicateStateError,
    DuplicateTriggerError,
    RuleKey,
    StateMachine,
    TransitionActionError,
)


class ClassState:
    """State compared by name, so distinct instances can be equal."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __eq__(self, other):
        if not isinstance(other, ClassState):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"ClassState({self.name!r})"


class Player(enum.Enum):
    PAUSED = "paused"
    PLAYING = "playing"
    STOPPED = "stopped"


class Command(enum.Enum):
    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"


class TestCustomStates:
    """User-defined state classes with value equality."""

    def test_custom_class_state(self):
        """Machine cycles through states defined as plain classes."""
        # Arrange
        paused = ClassState("Paused")
        playing = ClassState("Playing")
        machine = (
            StateMachine.with_initial_state(paused)
            .state(paused, lambda s: s.on(Command.PLAY).go_to(playing))
            .state(playing, lambda s: s.on(Command.PAUSE).go_to(paused))
            .build()
        )

        # Act & Assert
        assert machine.current_state == paused
        machine.trigger(Command.PLAY)
        assert machine.current_state == playing
        machine.trigger(Command.PAUSE)
        assert machine.current_state == paused

    def test_equal_instances_share_rules(self):
        """Equal but distinct instances resolve to the same RuleKey."""
        # Arrange
        machine = (
            StateMachine.with_initial_state(ClassState("Paused"))
            .state(ClassState("Paused"), lambda s: s
                   .on(Command.PLAY).go_to(ClassState("Playing")))
            .state(ClassState("Playing"), lambda s: s
                   .on(Command.STOP).go_to(ClassState("Paused")))
            .build()
        )

        # Act & Assert
        assert RuleKey(ClassState("Paused"), Command.PLAY) in machine.rules
        assert machine.trigger(Command.PLAY) is True
        assert machine.trigger(Command.STOP) is True
        assert machine.current_state == ClassState("Paused")

    def test_equal_instances_count_as_duplicate_state(self):
        """Configuring an equal instance again raises DuplicateStateError."""
        builder = StateMachine.with_initial_state(ClassState("Paused"))
        builder.state(ClassState("Paused"), lambda s: None)

        with pytest.raises(DuplicateStateError):
            builder.state(ClassState("Paused"), lambda s: None)


class TestScenarios:
    """End-to-end media player scenarios."""

    def _build(self, log):
        return (
            StateMachine.with_initial_state(Player.PAUSED)
            .state(Player.PAUSED, lambda s: s
                   .on_exit(lambda: log.append("logA"))
                   .on_enter(lambda: log.append("logB"))
                   .on_enter(lambda: log.append("logC"))
                   .on(Command.PLAY).go_to(Player.PLAYING))
            .build()
        )

    def test_play_runs_actions_in_order(self):
        """PAUSED --PLAY--> PLAYING runs logA, logB, logC."""
        # Arrange
        log = []
        machine = self._build(log)

        # Act
        result = machine.trigger(Command.PLAY)

        # Assert
        assert result is True
        assert log == ["logA", "logB", "logC"]
        assert machine.current_state == Player.PLAYING

    def test_unconfigured_trigger_is_a_no_op(self):
        """STOP from PAUSED returns False with no side effects."""
        # Arrange
        log = []
        machine = self._build(log)

        # Act
        result = machine.trigger(Command.STOP)

        # Assert
        assert result is False
        assert log == []
        assert machine.current_state == Player.PAUSED

    def test_duplicate_trigger_in_one_scope(self):
        """Binding PLAY twice from PAUSED is rejected."""
        builder = StateMachine.with_initial_state(Player.PAUSED)

        with pytest.raises(DuplicateTriggerError):
            builder.state(Player.PAUSED, lambda s: s
                          .on(Command.PLAY).go_to(Player.PLAYING)
                          .on(Command.PLAY).go_to(Player.STOPPED))

    def test_recover_from_entry_failure(self):
        """After an entry failure the machine keeps running from the target."""
        # Arrange
        def broken_enter():
            raise ValueError("speaker unplugged")

        machine = (
            StateMachine.with_initial_state(Player.PAUSED)
            .state(Player.PAUSED, lambda s: s
                   .on_enter(broken_enter)
                   .on(Command.PLAY).go_to(Player.PLAYING))
            .state(Player.PLAYING, lambda s: s
                   .on(Command.STOP).go_to(Player.STOPPED))
            .build()
        )

        # Act
        with pytest.raises(TransitionActionError) as info:
            machine.trigger(Command.PLAY)
        stopped = machine.trigger(Command.STOP)

        # Assert
        assert isinstance(info.value.errors[0], ValueError)
        assert stopped is True
        assert machine.current_state == Player.STOPPED


class TestLogging:
    """Log records emitted through the stdlib logging tree."""

    def test_failed_phase_logs_warning(self, caplog):
        """A failing action phase emits one warning on tick_machine.machine."""
        # Arrange
        def broken():
            raise RuntimeError("boom")

        machine = (
            StateMachine.with_initial_state(Player.PAUSED)
            .state(Player.PAUSED, lambda s: s
                   .on_exit(broken)
                   .on(Command.PLAY).go_to(Player.PLAYING))
            .build()
        )

        # Act
        with caplog.at_level(logging.WARNING, logger="tick_machine"):
            with pytest.raises(TransitionActionError):
                machine.trigger(Command.PLAY)

        # Assert
        records = [r for r in caplog.records if r.name == "tick_machine.machine"]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING

    def test_transition_logged_at_debug(self, caplog):
        """Successful transitions are logged at DEBUG."""
        # Arrange
        machine = (
            StateMachine.with_initial_state(Player.PAUSED)
            .state(Player.PAUSED, lambda s: s.on(Command.PLAY).go_to(Player.PLAYING))
            .build()
        )

        # Act
        with caplog.at_level(logging.DEBUG, logger="tick_machine"):
            machine.trigger(Command.PLAY)

        # Assert
        assert any("Transitioned" in r.getMessage() for r in caplog.records)
