"""
Módulo FSM: Máquina de estados de conexão das sessões de mensageria.

Estrutura:
    - states/: Estados (ConnectionState enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - manager/: Máquina de estados (ConnectionStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

# Manager
from fsm.manager import (
    ConnectionStateMachine,
    create_fsm,
)

# Estados
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    QR_STATES,
    ConnectionState,
    holds_qr_code,
    is_ready,
    is_valid_state,
)

# Transições
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)

# Types
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "QR_STATES",
    "VALID_TRANSITIONS",
    "ConnectionState",
    "ConnectionStateMachine",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "get_valid_targets",
    "holds_qr_code",
    "is_ready",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
