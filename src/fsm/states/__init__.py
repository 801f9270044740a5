"""
Exports públicos do módulo fsm/states.

Estados canônicos de conexão de sessão.
"""

from fsm.states.session import (
    DEFAULT_INITIAL_STATE,
    QR_STATES,
    ConnectionState,
    holds_qr_code,
    is_ready,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "QR_STATES",
    "ConnectionState",
    "holds_qr_code",
    "is_ready",
    "is_valid_state",
]
