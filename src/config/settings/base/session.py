"""Settings de sessões de mensageria.

Configurações do registro de sessões (nome padrão, adapter, políticas).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

DEFAULT_SESSION_NAME = "default"


@dataclass(frozen=True)
class SessionSettings:
    """Configurações de sessão.

    Attributes:
        default_session_name: Sessão criada no startup e usada quando o
            chamador não informa nome
        client_factory: Caminho "modulo:callable" da factory de adapters.
            Vazio usa o cliente em memória (apenas desenvolvimento)
        destroy_timeout_seconds: Tempo máximo aguardando teardown do adapter
        max_auth_failures: Falhas de autenticação consecutivas que forçam
            DISCONNECTED (0 = nunca força)
        default_fetch_limit: Limite padrão de mensagens em get_messages
    """

    default_session_name: str = DEFAULT_SESSION_NAME
    client_factory: str = ""
    destroy_timeout_seconds: float = 10.0
    max_auth_failures: int = 0
    default_fetch_limit: int = 50

    @property
    def uses_memory_client(self) -> bool:
        """True quando nenhum adapter real foi configurado."""
        return not self.client_factory

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de sessão.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.default_session_name.strip():
            errors.append("SESSION_NAME não pode ser vazio")

        if self.client_factory and ":" not in self.client_factory:
            errors.append("MESSAGING_CLIENT_FACTORY deve ter formato 'modulo:callable'")

        if self.uses_memory_client and not base.is_development:
            errors.append("cliente em memória proibido em staging/production")

        if self.destroy_timeout_seconds <= 0:
            errors.append("SESSION_DESTROY_TIMEOUT_SECONDS deve ser > 0")

        if self.max_auth_failures < 0:
            errors.append("SESSION_MAX_AUTH_FAILURES deve ser >= 0")

        if self.default_fetch_limit < 1:
            errors.append("SESSION_FETCH_LIMIT deve ser >= 1")

        return errors


def _load_session_from_env() -> SessionSettings:
    """Carrega SessionSettings de variáveis de ambiente."""
    return SessionSettings(
        default_session_name=os.getenv("SESSION_NAME", DEFAULT_SESSION_NAME),
        client_factory=os.getenv("MESSAGING_CLIENT_FACTORY", "").strip(),
        destroy_timeout_seconds=float(os.getenv("SESSION_DESTROY_TIMEOUT_SECONDS", "10")),
        max_auth_failures=int(os.getenv("SESSION_MAX_AUTH_FAILURES", "0")),
        default_fetch_limit=int(os.getenv("SESSION_FETCH_LIMIT", "50")),
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
