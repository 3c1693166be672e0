"""Buyer/seller conversations."""

from __future__ import annotations

from dataclasses import dataclass

from marketdb.api.models.base import Model, Record
from marketdb.parsing.statement_parser import CompoundCondition, Condition, OrderBy
from marketdb.store import MutationResult


@dataclass
class Chat(Record):
    flag_fields = ("is_active",)

    id: str
    buyer_id: str
    buyer_name: str
    seller_id: str
    seller_name: str
    order_id: str | None = None
    food_id: str | None = None
    food_name: str | None = None
    last_message: str = ""
    last_message_time: str = ""
    last_message_sender: str = ""
    buyer_unread_count: int = 0
    seller_unread_count: int = 0
    is_active: bool = True
    created_at: str = ""


class ChatModel(Model[Chat]):
    table = "chats"
    record_type = Chat

    def create(self, chat: Chat) -> MutationResult:
        return self._insert(chat)

    def find_by_id(self, chat_id: str) -> Chat | None:
        return self.find_by_key(chat_id)

    def find_by_user(self, user_id: str) -> list[Chat]:
        """Chats the user takes part in, most recent message first."""
        where = CompoundCondition(Condition("buyerId"), "or", Condition("sellerId"))
        return self._select(where, [user_id, user_id], order_by=OrderBy("lastMessageTime", "desc"))

    def find_existing(self, buyer_id: str, seller_id: str) -> Chat | None:
        where = CompoundCondition(Condition("buyerId"), "and", Condition("sellerId"))
        return self._select_one(where, [buyer_id, seller_id])

    def update_last_message(self, chat_id: str, message: str, time: str, sender_id: str) -> MutationResult:
        return self._update(
            chat_id,
            {"last_message": message, "last_message_time": time, "last_message_sender": sender_id},
        )
