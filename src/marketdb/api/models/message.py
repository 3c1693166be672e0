"""Messages inside a chat."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from marketdb.api.models.base import Model, Record
from marketdb.parsing.statement_parser import Condition, OrderBy
from marketdb.store import MutationResult


@dataclass
class Message(Record):
    json_fields = ("order_data",)
    flag_fields = ("is_read",)

    id: str
    chat_id: str
    sender_id: str
    sender_name: str
    sender_type: str
    message: str
    message_type: str = "text"
    timestamp: str = ""
    is_read: bool = False
    order_data: dict[str, Any] | None = None


class MessageModel(Model[Message]):
    table = "messages"
    record_type = Message

    def create(self, message: Message) -> MutationResult:
        return self._insert(message)

    def find_by_chat(self, chat_id: str) -> list[Message]:
        """Messages in a chat, oldest first."""
        return self._select(Condition("chatId"), [chat_id], order_by=OrderBy("timestamp", "asc"))
