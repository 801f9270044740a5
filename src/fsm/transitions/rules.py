"""
Regras de transição válidas entre estados de conexão.

Nenhum estado volta para INITIALIZING: uma sessão que precisa
reinicializar é removida e criada de novo.
"""

from fsm.states.session import ConnectionState

TransitionMap = dict[ConnectionState, frozenset[ConnectionState]]

# Chave: estado de origem / Valor: destinos permitidos
VALID_TRANSITIONS: TransitionMap = {
    # Sessão restaurada pode ir direto a READY (sem QR)
    ConnectionState.INITIALIZING: frozenset({
        ConnectionState.QR_PENDING,
        ConnectionState.READY,
        ConnectionState.DISCONNECTED,
    }),

    # QR expira e é reemitido: loop em QR_PENDING
    ConnectionState.QR_PENDING: frozenset({
        ConnectionState.QR_PENDING,
        ConnectionState.READY,
        ConnectionState.DISCONNECTED,
    }),

    # Logout remoto faz o adapter emitir novo QR
    ConnectionState.READY: frozenset({
        ConnectionState.READY,
        ConnectionState.QR_PENDING,
        ConnectionState.DISCONNECTED,
    }),

    # Reconexão do adapter
    ConnectionState.DISCONNECTED: frozenset({
        ConnectionState.QR_PENDING,
        ConnectionState.READY,
        ConnectionState.DISCONNECTED,
    }),
}


def get_valid_targets(state: ConnectionState) -> frozenset[ConnectionState]:
    """Retorna os estados de destino válidos para um estado de origem."""
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: ConnectionState, to_state: ConnectionState) -> bool:
    """Verifica se uma transição é permitida pelo mapa."""
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Nenhuma transição aponta para INITIALIZING
    - Nenhuma transição aponta para estado inexistente

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in ConnectionState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for from_state, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, ConnectionState):
                errors.append(f"Transição {from_state.name} → {target}: destino inválido")
            elif target is ConnectionState.INITIALIZING:
                errors.append(f"Transição {from_state.name} → INITIALIZING não permitida")

    return errors
