"""Endpoints de sessões.

- GET    /qr/{session}: QR corrente (cria a sessão se não existir)
- GET    /status/{session}: status da sessão
- POST   /send: envio de mensagem de texto
- GET    /sessions: todas as sessões
- DELETE /sessions/{session}: desconecta e remove
- GET    /contacts/{session}, /chats/{session}, /messages/{session}/{chat_id}
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from api.routes.responses import get_container, missing_fields, session_error_response
from app.sessions import SessionError, SessionNotFoundError

router = APIRouter()


class SendMessageRequest(BaseModel):
    """Corpo de POST /send; aceita sessionName (camelCase) ou session_name."""

    model_config = ConfigDict(populate_by_name=True)

    to: str | None = None
    message: str | None = None
    session_name: str | None = Field(default=None, alias="sessionName")


@router.get("/qr/{session}")
async def get_qr_code(session: str, request: Request) -> Any:
    try:
        result = await get_container(request).sessions.get_qr_code(session)
    except SessionError as exc:
        return session_error_response(exc)
    return result.to_dict()


@router.get("/status/{session}")
async def get_status(session: str, request: Request) -> Any:
    session_status = get_container(request).sessions.get_status(session)
    if session_status is None:
        return session_error_response(SessionNotFoundError(session))
    return session_status.to_dict()


@router.post("/send")
async def send_message(request: Request, payload: SendMessageRequest | None = None) -> Any:
    if payload is None or not payload.to or not payload.message:
        return missing_fields("to", "message")
    try:
        receipt = await get_container(request).sessions.send_message(
            payload.to,
            payload.message,
            payload.session_name,
        )
    except SessionError as exc:
        return session_error_response(exc)
    return {"success": True, **receipt.to_dict()}


@router.get("/sessions")
async def list_sessions(request: Request) -> dict[str, Any]:
    sessions = get_container(request).sessions.get_all_sessions()
    return {"sessions": [session.status().to_dict() for session in sessions.values()]}


@router.delete("/sessions/{session}")
async def disconnect_session(session: str, request: Request) -> Any:
    try:
        await get_container(request).sessions.disconnect(session)
    except SessionError as exc:
        return session_error_response(exc)
    return {"session_name": session, "disconnected": True}


@router.get("/contacts/{session}")
async def get_contacts(session: str, request: Request) -> Any:
    try:
        contacts = await get_container(request).sessions.get_contacts(session)
    except SessionError as exc:
        return session_error_response(exc)
    return {"count": len(contacts), "contacts": [contact.to_dict() for contact in contacts]}


@router.get("/chats/{session}")
async def get_chats(session: str, request: Request) -> Any:
    try:
        chats = await get_container(request).sessions.get_chats(session)
    except SessionError as exc:
        return session_error_response(exc)
    return {"count": len(chats), "chats": [chat.to_dict() for chat in chats]}


@router.get("/messages/{session}/{chat_id}")
async def get_messages(
    session: str,
    chat_id: str,
    request: Request,
    limit: int | None = Query(default=None, ge=1, le=1000),
) -> Any:
    try:
        messages = await get_container(request).sessions.get_messages(chat_id, limit, session)
    except SessionError as exc:
        return session_error_response(exc)
    return {
        "chat_id": chat_id,
        "count": len(messages),
        "messages": [message.to_dict() for message in messages],
    }
