"""Testes da normalização de registros do adapter."""

from __future__ import annotations

from app.sessions.normalizers import (
    UNKNOWN_CONTACT_NAME,
    normalize_chat,
    normalize_contact,
    normalize_message,
    serialize_id,
    to_chat_id,
)


class TestSerializeId:
    def test_accepts_mapping_string_and_none(self) -> None:
        assert serialize_id({"_serialized": "true_123@c.us_ABC"}) == "true_123@c.us_ABC"
        assert serialize_id("plain") == "plain"
        assert serialize_id(None) == ""


class TestNormalizeMessage:
    def test_camel_case_record(self) -> None:
        message = normalize_message(
            {
                "id": {"_serialized": "false_5511@c.us_X"},
                "body": "oi",
                "type": "chat",
                "timestamp": "1700000000",
                "from": "5511@c.us",
                "to": "5500@c.us",
                "fromMe": False,
                "hasMedia": True,
                "isForwarded": True,
            }
        )

        assert message.id == "false_5511@c.us_X"
        assert message.timestamp == 1700000000
        assert message.has_media is True
        assert message.to_dict()["from"] == "5511@c.us"
        assert message.to_dict()["to"] == "5500@c.us"

    def test_snake_case_record_and_defaults(self) -> None:
        message = normalize_message({"id": "m1", "sender": "a@c.us", "is_outgoing": True})

        assert message.body == ""
        assert message.kind == "chat"
        assert message.timestamp is None
        assert message.sender == "a@c.us"
        assert message.is_outgoing is True


class TestNormalizeContactAndChat:
    def test_contact_name_falls_back_to_pushname_then_unknown(self) -> None:
        assert normalize_contact({"id": "1", "pushname": "Zé"}).name == "Zé"
        assert normalize_contact({"id": "2"}).name == UNKNOWN_CONTACT_NAME

    def test_chat_defaults(self) -> None:
        chat = normalize_chat({"id": {"_serialized": "1-2@g.us"}, "isGroup": True, "unreadCount": None})

        assert chat.id == "1-2@g.us"
        assert chat.is_group is True
        assert chat.unread_count == 0
        assert chat.name is None


class TestToChatId:
    def test_bare_number_gets_user_suffix(self) -> None:
        assert to_chat_id(" 5511999998888 ") == "5511999998888@c.us"

    def test_existing_suffix_is_preserved(self) -> None:
        assert to_chat_id("5511999998888@c.us") == "5511999998888@c.us"
        assert to_chat_id("123-456@g.us") == "123-456@g.us"
