"""
Estados canônicos de conexão de uma sessão de mensageria.

Uma sessão nasce em INITIALIZING, passa por QR_PENDING enquanto aguarda
leitura do QR code e chega a READY. DISCONNECTED indica que o adapter
perdeu a conexão; a remoção da sessão do registro é explícita e não é
um estado da máquina.

AUTHENTICATED não é estado: o adapter sinaliza autenticação antes de
READY e o registro apenas atualiza last_activity_at.
"""

from enum import StrEnum


class ConnectionState(StrEnum):
    """
    Estados de conexão de uma sessão.

    Estados:
        - INITIALIZING: Adapter criado, inicialização em andamento
        - QR_PENDING: QR code emitido, aguardando leitura no aparelho
        - READY: Autenticada e apta a enviar/consultar
        - DISCONNECTED: Conexão perdida (pode voltar via novo QR/ready)
    """

    INITIALIZING = "initializing"
    QR_PENDING = "qr_pending"
    READY = "ready"
    DISCONNECTED = "disconnected"

    def __str__(self) -> str:
        return self.value


# Estado inicial de toda sessão nova
DEFAULT_INITIAL_STATE: ConnectionState = ConnectionState.INITIALIZING

# Único estado em que a sessão carrega QR code
QR_STATES: frozenset[ConnectionState] = frozenset({ConnectionState.QR_PENDING})


def is_ready(state: ConnectionState) -> bool:
    """Verifica se o estado permite envio e consultas."""
    return state is ConnectionState.READY


def holds_qr_code(state: ConnectionState) -> bool:
    """Verifica se o estado admite QR code armazenado."""
    return state in QR_STATES


def is_valid_state(state: object) -> bool:
    """Verifica se o valor é um estado válido do enum."""
    return isinstance(state, ConnectionState)
