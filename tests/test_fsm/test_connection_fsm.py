"""
Testes do módulo FSM de conexão.

Cobre estados, mapa de transições, máquina e tipos.
Foco em cenários válidos + inválidos + bordas.
"""

import pytest

from fsm import (
    DEFAULT_INITIAL_STATE,
    QR_STATES,
    VALID_TRANSITIONS,
    ConnectionState,
    ConnectionStateMachine,
    StateTransition,
    TransitionResult,
    create_fsm,
    get_valid_targets,
    holds_qr_code,
    is_ready,
    is_transition_valid,
    is_valid_state,
    validate_transition_map,
)
from fsm.manager.machine import MAX_HISTORY


class TestConnectionState:
    """Enum de estados e helpers."""

    def test_enum_has_four_states_and_initializing_is_initial(self) -> None:
        assert {state.value for state in ConnectionState} == {
            "initializing",
            "qr_pending",
            "ready",
            "disconnected",
        }
        assert DEFAULT_INITIAL_STATE is ConnectionState.INITIALIZING

    def test_only_qr_pending_holds_qr_code(self) -> None:
        assert QR_STATES == frozenset({ConnectionState.QR_PENDING})
        assert holds_qr_code(ConnectionState.QR_PENDING) is True
        for state in ConnectionState:
            if state is not ConnectionState.QR_PENDING:
                assert holds_qr_code(state) is False

    def test_is_ready_and_is_valid_state(self) -> None:
        assert is_ready(ConnectionState.READY) is True
        assert is_ready(ConnectionState.DISCONNECTED) is False
        assert is_valid_state(ConnectionState.READY) is True
        assert is_valid_state("ready") is False


class TestTransitionMap:
    """VALID_TRANSITIONS e consultas."""

    def test_map_is_complete_and_consistent(self) -> None:
        assert set(VALID_TRANSITIONS) == set(ConnectionState)
        assert validate_transition_map() == []

    def test_nothing_returns_to_initializing(self) -> None:
        for state in ConnectionState:
            assert ConnectionState.INITIALIZING not in get_valid_targets(state)

    @pytest.mark.parametrize(
        ("from_state", "to_state"),
        [
            (ConnectionState.INITIALIZING, ConnectionState.QR_PENDING),
            (ConnectionState.INITIALIZING, ConnectionState.READY),
            (ConnectionState.INITIALIZING, ConnectionState.DISCONNECTED),
            (ConnectionState.QR_PENDING, ConnectionState.QR_PENDING),
            (ConnectionState.READY, ConnectionState.QR_PENDING),
            (ConnectionState.DISCONNECTED, ConnectionState.READY),
        ],
    )
    def test_adapter_driven_transitions_are_valid(
        self,
        from_state: ConnectionState,
        to_state: ConnectionState,
    ) -> None:
        assert is_transition_valid(from_state, to_state) is True


class TestConnectionStateMachine:
    """Máquina de estados por sessão."""

    def test_qr_then_ready_records_history(self) -> None:
        machine = create_fsm("default")
        assert isinstance(machine, ConnectionStateMachine)

        first = machine.transition(ConnectionState.QR_PENDING, "qr")
        second = machine.transition(ConnectionState.READY, "ready")

        assert first.success and second.success
        assert machine.current_state is ConnectionState.READY
        assert [t.trigger for t in machine.history] == ["qr", "ready"]
        assert machine.history[0].from_state is ConnectionState.INITIALIZING

    def test_rejected_transition_keeps_state(self) -> None:
        machine = create_fsm("default", ConnectionState.READY)

        result = machine.transition(ConnectionState.INITIALIZING, "restart")

        assert result.success is False
        assert "READY" in (result.error_reason or "")
        assert machine.current_state is ConnectionState.READY
        assert machine.history == []

    def test_can_transition_to_follows_current_state(self) -> None:
        machine = create_fsm("default")

        assert machine.can_transition_to(ConnectionState.QR_PENDING) is True
        assert machine.can_transition_to(ConnectionState.INITIALIZING) is False

        machine.transition(ConnectionState.READY, "ready")

        assert machine.can_transition_to(ConnectionState.DISCONNECTED) is True
        assert machine.can_transition_to(ConnectionState.INITIALIZING) is False

    def test_history_is_bounded(self) -> None:
        machine = create_fsm("default")
        for _ in range(MAX_HISTORY + 25):
            machine.transition(ConnectionState.QR_PENDING, "qr")

        assert len(machine.history) == MAX_HISTORY

    def test_summaries_are_log_safe(self) -> None:
        machine = create_fsm("vendas")
        machine.transition(ConnectionState.QR_PENDING, "qr", {"attempt": 1})

        summary = machine.get_state_summary()
        history = machine.get_history_summary()

        assert summary["session_name"] == "vendas"
        assert summary["current_state"] == "QR_PENDING"
        assert summary["transition_count"] == 1
        assert history[0]["metadata"] == {"attempt": 1}
        assert history[0]["to_state"] == "QR_PENDING"


class TestTransitionTypes:
    """Validações de StateTransition e TransitionResult."""

    def test_empty_trigger_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="trigger"):
            StateTransition(
                from_state=ConnectionState.INITIALIZING,
                to_state=ConnectionState.READY,
                trigger="  ",
            )

    def test_result_requires_consistent_fields(self) -> None:
        with pytest.raises(ValueError):
            TransitionResult(success=True)
        with pytest.raises(ValueError):
            TransitionResult(success=False)
