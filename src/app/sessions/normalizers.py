"""Normalização de registros crus do adapter para modelos canônicos.

Adapters no estilo whatsapp-web expõem ids como {"_serialized": "..."}
e flags em camelCase; ambos os formatos são aceitos.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.sessions.models import ChatRecord, ContactRecord, NormalizedMessage

USER_CHAT_SUFFIX = "@c.us"
UNKNOWN_CONTACT_NAME = "Unknown"


def serialize_id(raw_id: Any) -> str:
    """Extrai id serializado (string ou mapping com _serialized)."""
    if isinstance(raw_id, Mapping):
        return str(raw_id.get("_serialized") or "")
    return "" if raw_id is None else str(raw_id)


def _pick(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_message(raw: Mapping[str, Any]) -> NormalizedMessage:
    """Converte mensagem crua no registro canônico."""
    return NormalizedMessage(
        id=serialize_id(raw.get("id")),
        body=str(_pick(raw, "body", default="")),
        kind=str(_pick(raw, "type", "kind", default="chat")),
        timestamp=_optional_int(raw.get("timestamp")),
        sender=str(_pick(raw, "from", "sender", default="")),
        recipient=str(_pick(raw, "to", "recipient", default="")),
        is_outgoing=bool(_pick(raw, "fromMe", "is_outgoing", default=False)),
        has_media=bool(_pick(raw, "hasMedia", "has_media", default=False)),
        is_forwarded=bool(_pick(raw, "isForwarded", "is_forwarded", default=False)),
    )


def normalize_contact(raw: Mapping[str, Any]) -> ContactRecord:
    """Converte contato cru; nome cai para pushname e depois 'Unknown'."""
    name = _pick(raw, "name", "pushname") or UNKNOWN_CONTACT_NAME
    number = _pick(raw, "number")
    return ContactRecord(
        id=serialize_id(raw.get("id")),
        name=str(name),
        number=None if number is None else str(number),
        is_user=bool(_pick(raw, "isUser", "is_user", default=False)),
        is_group=bool(_pick(raw, "isGroup", "is_group", default=False)),
        is_wa_contact=bool(_pick(raw, "isWAContact", "is_wa_contact", default=False)),
    )


def normalize_chat(raw: Mapping[str, Any]) -> ChatRecord:
    """Converte conversa crua."""
    name = raw.get("name")
    return ChatRecord(
        id=serialize_id(raw.get("id")),
        name=None if name is None else str(name),
        is_group=bool(_pick(raw, "isGroup", "is_group", default=False)),
        is_read_only=bool(_pick(raw, "isReadOnly", "is_read_only", default=False)),
        unread_count=_optional_int(_pick(raw, "unreadCount", "unread_count")) or 0,
        timestamp=_optional_int(raw.get("timestamp")),
    )


def to_chat_id(to: str) -> str:
    """Normaliza destinatário em chat id.

    Número puro recebe o sufixo de usuário; ids com domínio
    (@c.us, @g.us) são preservados.
    """
    target = to.strip()
    if "@" in target:
        return target
    return f"{target}{USER_CHAT_SUFFIX}"
