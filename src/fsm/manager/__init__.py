"""
Exports públicos do módulo fsm/manager.

Máquina de estados (ConnectionStateMachine) das sessões.
"""

from fsm.manager.machine import (
    MAX_HISTORY,
    ConnectionStateMachine,
    create_fsm,
)

__all__ = [
    "MAX_HISTORY",
    "ConnectionStateMachine",
    "create_fsm",
]
