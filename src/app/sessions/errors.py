"""Erros do registro de sessões."""

from __future__ import annotations


class SessionError(Exception):
    """Erro base de operações sobre sessões."""

    code = "session_error"

    def __init__(self, session_name: str, message: str) -> None:
        super().__init__(message)
        self.session_name = session_name


class SessionNotFoundError(SessionError):
    """Operação referenciou sessão inexistente no registro."""

    code = "session_not_found"

    def __init__(self, session_name: str) -> None:
        super().__init__(session_name, f'Session "{session_name}" not found.')


class SessionNotReadyError(SessionError):
    """Envio ou consulta antes da sessão chegar a READY."""

    code = "session_not_ready"

    def __init__(self, session_name: str) -> None:
        super().__init__(
            session_name,
            f'Session "{session_name}" is not ready. Please authenticate first.',
        )


class AdapterInitError(SessionError):
    """Falha na inicialização do adapter durante create_session."""

    code = "adapter_init_failed"

    def __init__(self, session_name: str, reason: str) -> None:
        super().__init__(
            session_name,
            f'Failed to initialize session "{session_name}": {reason}',
        )
        self.reason = reason


class AdapterOperationError(SessionError):
    """Adapter levantou erro em envio ou consulta de uma sessão READY."""

    code = "adapter_operation_failed"

    def __init__(self, session_name: str, operation: str, reason: str) -> None:
        super().__init__(
            session_name,
            f'Error {operation} on session "{session_name}": {reason}',
        )
        self.operation = operation
        self.reason = reason
