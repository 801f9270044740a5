"""
Máquina de estados de conexão (ConnectionStateMachine).

Controla transições de uma sessão e mantém histórico rastreável.
Não é thread-safe: cada sessão tem um único escritor (callbacks do
seu adapter, no event loop).
"""

from typing import Any

from fsm.states.session import DEFAULT_INITIAL_STATE, ConnectionState
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

# Histórico limitado: sessões longas reemitem QR a cada ~20s
MAX_HISTORY = 100


class ConnectionStateMachine:
    """
    Máquina de estados de uma sessão de mensageria.

    Attributes:
        current_state: Estado atual da máquina
        history: Últimas transições realizadas
    """

    __slots__ = ("_current_state", "_history", "_session_name")

    def __init__(
        self,
        session_name: str,
        initial_state: ConnectionState | None = None,
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._session_name = session_name

    @property
    def current_state(self) -> ConnectionState:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def session_name(self) -> str:
        return self._session_name

    def can_transition_to(self, target: ConnectionState) -> bool:
        """Verifica se pode transitar para o estado alvo."""
        return is_transition_valid(self._current_state, target)

    def get_valid_targets(self) -> frozenset[ConnectionState]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: ConnectionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Evento que originou a transição (ex: 'qr', 'disconnected')
            metadata: Dados adicionais para auditoria

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not self.can_transition_to(target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)
        if len(self._history) > MAX_HISTORY:
            del self._history[: len(self._history) - MAX_HISTORY]

        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo do estado atual para observability."""
        return {
            "session_name": self._session_name,
            "current_state": self._current_state.name,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]


def create_fsm(
    session_name: str,
    initial_state: ConnectionState | None = None,
) -> ConnectionStateMachine:
    """Factory function para criar uma máquina de estados de conexão."""
    return ConnectionStateMachine(
        session_name=session_name,
        initial_state=initial_state,
    )
