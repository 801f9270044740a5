"""Registro de sessões de mensageria.

Dono do mapa nome → Session. Conduz a máquina de estados de cada sessão
a partir dos eventos do adapter e publica os eventos no EventBus.

Concorrência:
    - Tudo roda no mesmo event loop; callbacks do adapter são síncronos
      e processados na ordem de chegada (um escritor por sessão).
    - create_session serializa por nome (asyncio.Lock por sessão) para
      nunca construir dois adapters para o mesmo nome.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from collections.abc import Awaitable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from app.events import EventBus, EventKind, SessionEvent
from app.observability import record_latency, record_session_transition
from app.sessions.errors import (
    AdapterInitError,
    AdapterOperationError,
    SessionNotFoundError,
    SessionNotReadyError,
)
from app.sessions.models import (
    ChatRecord,
    ContactRecord,
    NormalizedMessage,
    QRCodeResult,
    QRCodeStatus,
    SendReceipt,
    Session,
    SessionStatus,
)
from app.sessions.normalizers import (
    normalize_chat,
    normalize_contact,
    normalize_message,
    serialize_id,
    to_chat_id,
)
from config.settings import DEFAULT_SESSION_NAME
from fsm import ConnectionState, holds_qr_code

if TYPE_CHECKING:
    from app.protocols.messaging_client import MessagingClientFactory

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

DEFAULT_DESTROY_TIMEOUT_SECONDS = 10.0
DEFAULT_FETCH_LIMIT = 50


class SessionRegistry:
    """Registro de sessões e máquina de estados dirigida por eventos."""

    def __init__(
        self,
        client_factory: MessagingClientFactory,
        bus: EventBus,
        *,
        default_session_name: str = DEFAULT_SESSION_NAME,
        destroy_timeout_seconds: float = DEFAULT_DESTROY_TIMEOUT_SECONDS,
        max_auth_failures: int = 0,
        default_fetch_limit: int = DEFAULT_FETCH_LIMIT,
    ) -> None:
        """Inicializa o registro.

        Args:
            client_factory: Cria um adapter novo para um nome de sessão
            bus: Barramento onde os eventos de sessão são publicados
            default_session_name: Nome usado quando o chamador omite
            destroy_timeout_seconds: Espera máxima pelo teardown do adapter
            max_auth_failures: Falhas consecutivas que forçam DISCONNECTED
                (0 mantém o estado inalterado em auth_failure)
            default_fetch_limit: Limite padrão de get_messages
        """
        self._client_factory = client_factory
        self._bus = bus
        self._default_session_name = default_session_name
        self._destroy_timeout_seconds = destroy_timeout_seconds
        self._max_auth_failures = max_auth_failures
        self._default_fetch_limit = default_fetch_limit
        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, name: object) -> bool:
        return name in self._sessions

    @property
    def default_session_name(self) -> str:
        return self._default_session_name

    def _resolve_name(self, name: str | None) -> str:
        return name or self._default_session_name

    # ──────────────────────────────────────────────────────────────────────
    # Ciclo de vida
    # ──────────────────────────────────────────────────────────────────────

    async def create_session(self, name: str | None = None) -> Session:
        """Retorna a sessão existente ou cria, registra e inicializa uma nova.

        Raises:
            AdapterInitError: Se a inicialização do adapter falhar. A entrada
                é removida e o adapter liberado para permitir nova tentativa.
        """
        session_name = self._resolve_name(name)
        existing = self._sessions.get(session_name)
        if existing is not None:
            return existing

        lock = self._locks.setdefault(session_name, asyncio.Lock())
        async with lock:
            existing = self._sessions.get(session_name)
            if existing is not None:
                return existing

            client = self._client_factory(session_name)
            session = Session.create(session_name, client)
            self._register_listeners(session)
            self._sessions[session_name] = session
            logger.info("session_created", extra={"session_name": session_name})

            started_at = time.perf_counter()
            try:
                await client.initialize()
            except Exception as exc:
                if self._sessions.get(session_name) is session:
                    del self._sessions[session_name]
                logger.error(
                    "session_initialize_failed",
                    extra={"session_name": session_name, "error_type": type(exc).__name__},
                )
                await self._release_client(session)
                raise AdapterInitError(session_name, str(exc) or type(exc).__name__) from exc

            record_latency(
                "session_registry",
                "initialize",
                (time.perf_counter() - started_at) * 1000,
            )
        return session

    async def disconnect(self, name: str | None = None) -> None:
        """Remove a sessão do registro e libera o adapter.

        A remoção acontece antes do teardown: eventos emitidos pelo adapter
        durante o destroy são ignorados.

        Raises:
            SessionNotFoundError: Se a sessão não existe.
        """
        session_name = self._resolve_name(name)
        session = self._sessions.pop(session_name, None)
        if session is None:
            raise SessionNotFoundError(session_name)

        lock = self._locks.get(session_name)
        if lock is not None and not lock.locked():
            del self._locks[session_name]

        await self._release_client(session)
        logger.info(
            "session_removed",
            extra={"session_name": session_name, "last_state": session.state.value},
        )

    async def shutdown(self) -> None:
        """Desconecta todas as sessões (encerramento do processo)."""
        names = list(self._sessions)
        if not names:
            return
        results = await asyncio.gather(
            *(self.disconnect(name) for name in names),
            return_exceptions=True,
        )
        for name, result in zip(names, results, strict=True):
            if isinstance(result, Exception):
                logger.warning(
                    "session_shutdown_failed",
                    extra={"session_name": name, "error_type": type(result).__name__},
                )

    async def _release_client(self, session: Session) -> None:
        """Teardown do adapter com timeout; segue mesmo sem confirmação."""
        try:
            await asyncio.wait_for(
                session.client.destroy(),
                timeout=self._destroy_timeout_seconds,
            )
        except TimeoutError:
            logger.warning(
                "session_destroy_timeout",
                extra={
                    "session_name": session.name,
                    "timeout_seconds": self._destroy_timeout_seconds,
                },
            )
        except Exception as exc:
            logger.warning(
                "session_destroy_failed",
                extra={"session_name": session.name, "error_type": type(exc).__name__},
            )

    # ──────────────────────────────────────────────────────────────────────
    # Consultas e comandos
    # ──────────────────────────────────────────────────────────────────────

    def get_session(self, name: str | None = None) -> Session | None:
        return self._sessions.get(self._resolve_name(name))

    def get_all_sessions(self) -> dict[str, Session]:
        return dict(self._sessions)

    def get_status(self, name: str | None = None) -> SessionStatus | None:
        """Status da sessão ou None se não existir."""
        session = self.get_session(name)
        return None if session is None else session.status()

    async def get_qr_code(self, name: str | None = None) -> QRCodeResult:
        """Garante a sessão (criando se preciso) e informa o QR corrente.

        Raises:
            AdapterInitError: Se a sessão precisou ser criada e falhou.
        """
        session = await self.create_session(name)
        if session.qr_code is not None:
            return QRCodeResult(session.name, QRCodeStatus.QR_AVAILABLE, session.qr_code)
        if session.is_ready:
            return QRCodeResult(session.name, QRCodeStatus.ALREADY_READY)
        return QRCodeResult(session.name, QRCodeStatus.INITIALIZING)

    async def send_message(self, to: str, body: str, name: str | None = None) -> SendReceipt:
        """Envia mensagem de texto pela sessão.

        Raises:
            SessionNotReadyError: Se a sessão não existe ou não está READY;
                o adapter não é acionado.
            AdapterOperationError: Se o adapter falhar no envio.
        """
        session = self._require_ready(name)
        chat_id = to_chat_id(to)
        started_at = time.perf_counter()
        raw = await self._call_adapter(
            session, "sending message", session.client.send_message(chat_id, body)
        )
        record_latency("session_registry", "send_message", (time.perf_counter() - started_at) * 1000)
        session.touch()
        receipt = SendReceipt(
            session_name=session.name,
            to=chat_id,
            message_id=serialize_id(raw.get("id")),
        )
        logger.info(
            "message_sent",
            extra={"session_name": session.name, "message_id": receipt.message_id},
        )
        return receipt

    async def get_contacts(self, name: str | None = None) -> list[ContactRecord]:
        session = self._require_ready(name)
        raw_contacts = await self._call_adapter(
            session, "fetching contacts", session.client.get_contacts()
        )
        return [normalize_contact(raw) for raw in raw_contacts]

    async def get_chats(self, name: str | None = None) -> list[ChatRecord]:
        session = self._require_ready(name)
        raw_chats = await self._call_adapter(
            session, "fetching chats", session.client.get_chats()
        )
        return [normalize_chat(raw) for raw in raw_chats]

    async def get_messages(
        self,
        chat_id: str,
        limit: int | None = None,
        name: str | None = None,
    ) -> list[NormalizedMessage]:
        """Busca as últimas mensagens de uma conversa."""
        session = self._require_ready(name)
        raw_messages = await self._call_adapter(
            session,
            "fetching messages",
            session.client.fetch_messages(chat_id, limit or self._default_fetch_limit),
        )
        return [normalize_message(raw) for raw in raw_messages]

    def _require_ready(self, name: str | None) -> Session:
        session_name = self._resolve_name(name)
        session = self._sessions.get(session_name)
        if session is None or not session.is_ready:
            raise SessionNotReadyError(session_name)
        return session

    async def _call_adapter(self, session: Session, operation: str, call: Awaitable[_T]) -> _T:
        """Aguarda a chamada ao adapter; qualquer erro vira AdapterOperationError."""
        try:
            return await call
        except Exception as exc:
            logger.warning(
                "session_adapter_call_failed",
                extra={
                    "session_name": session.name,
                    "operation": operation,
                    "error_type": type(exc).__name__,
                },
            )
            reason = str(exc) or type(exc).__name__
            raise AdapterOperationError(session.name, operation, reason) from exc

    # ──────────────────────────────────────────────────────────────────────
    # Eventos do adapter
    # ──────────────────────────────────────────────────────────────────────

    def _register_listeners(self, session: Session) -> None:
        handlers = {
            EventKind.QR: self._on_qr,
            EventKind.AUTHENTICATED: self._on_authenticated,
            EventKind.READY: self._on_ready,
            EventKind.AUTH_FAILURE: self._on_auth_failure,
            EventKind.DISCONNECTED: self._on_disconnected,
            EventKind.MESSAGE: functools.partial(self._on_message, EventKind.MESSAGE),
            EventKind.MESSAGE_CREATE: functools.partial(
                self._on_message, EventKind.MESSAGE_CREATE
            ),
        }
        for kind, handler in handlers.items():
            session.client.on(kind, functools.partial(self._guarded, handler, session, kind))

    def _guarded(self, handler: Any, session: Session, kind: EventKind, payload: Any = None) -> None:
        # Sessão removida (ou substituída): eventos tardios do adapter antigo
        if self._sessions.get(session.name) is not session:
            logger.debug(
                "session_event_ignored",
                extra={"session_name": session.name, "event": kind.value},
            )
            return
        handler(session, payload)

    def _set_state(
        self,
        session: Session,
        target: ConnectionState,
        trigger: str,
        qr_code: str | None = None,
    ) -> bool:
        from_state = session.state
        result = session.machine.transition(target, trigger)
        if not result.success:
            logger.warning(
                "session_transition_rejected",
                extra={"session_name": session.name, "reason": result.error_reason},
            )
            return False
        session.qr_code = qr_code if holds_qr_code(target) else None
        session.touch()
        if from_state is not target:
            record_session_transition(session.name, from_state.value, target.value, trigger)
        return True

    def _publish(self, session: Session, kind: EventKind, data: Mapping[str, Any] | None = None) -> None:
        self._bus.publish(SessionEvent(kind=kind, session_name=session.name, data=dict(data or {})))

    def _on_qr(self, session: Session, qr: Any) -> None:
        logger.info("session_qr_received", extra={"session_name": session.name})
        if self._set_state(session, ConnectionState.QR_PENDING, EventKind.QR.value, str(qr)):
            self._publish(session, EventKind.QR, {"qr": str(qr)})

    def _on_authenticated(self, session: Session, _payload: Any) -> None:
        logger.info("session_authenticated", extra={"session_name": session.name})
        session.touch()
        self._publish(session, EventKind.AUTHENTICATED)

    def _on_ready(self, session: Session, _payload: Any) -> None:
        logger.info("session_ready", extra={"session_name": session.name})
        if self._set_state(session, ConnectionState.READY, EventKind.READY.value):
            session.auth_failures = 0
            self._publish(session, EventKind.READY)

    def _on_auth_failure(self, session: Session, reason: Any) -> None:
        session.auth_failures += 1
        logger.error(
            "session_auth_failure",
            extra={"session_name": session.name, "consecutive_failures": session.auth_failures},
        )
        self._publish(session, EventKind.AUTH_FAILURE, {"reason": str(reason or "")})
        if self._max_auth_failures and session.auth_failures >= self._max_auth_failures:
            self._on_disconnected(session, "auth_failure")

    def _on_disconnected(self, session: Session, reason: Any) -> None:
        logger.info(
            "session_disconnected",
            extra={"session_name": session.name, "reason": str(reason or "")},
        )
        if self._set_state(session, ConnectionState.DISCONNECTED, EventKind.DISCONNECTED.value):
            self._publish(session, EventKind.DISCONNECTED, {"reason": str(reason or "")})

    def _on_message(self, kind: EventKind, session: Session, raw: Any) -> None:
        if not isinstance(raw, Mapping):
            logger.warning(
                "session_message_ignored",
                extra={"session_name": session.name, "payload_type": type(raw).__name__},
            )
            return
        session.touch()
        message = normalize_message(raw)
        self._publish(session, kind, {"message": message.to_dict()})
