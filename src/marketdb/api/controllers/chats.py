"""Chats between buyers and sellers, and their messages."""

from __future__ import annotations

from marketdb.api.models import Chat, ChatModel, Message, MessageModel
from marketdb.api.types import Request, Response, created, error, ok
from marketdb.errors import ApiError, NotFoundError
from marketdb.timestamps import utc_now_iso


class ChatController:
    def __init__(self, chats: ChatModel, messages: MessageModel) -> None:
        self.chats = chats
        self.messages = messages

    async def list(self, req: Request) -> Response:
        user_id = req.query.get("userId")
        if not user_id:
            return error(400, "userId is required")
        return ok([chat.to_dict() for chat in self.chats.find_by_user(user_id)])

    async def create(self, req: Request) -> Response:
        try:
            chat = Chat.from_payload(req.body)
        except ApiError as e:
            return error(e.status, e.message)

        existing = self.chats.find_existing(chat.buyer_id, chat.seller_id)
        if existing is not None:
            return ok(existing.to_dict())

        if not chat.created_at:
            chat.created_at = utc_now_iso()
        self.chats.create(chat)
        return created(chat.to_dict())

    async def get_messages(self, req: Request) -> Response:
        return ok([message.to_dict() for message in self.messages.find_by_chat(req.params["id"])])

    async def send_message(self, req: Request) -> Response:
        chat_id = req.params["id"]
        if not isinstance(req.body, dict):
            return error(400, "Request body must be an object")
        try:
            message = Message.from_payload({**req.body, "chatId": chat_id})
            if self.chats.find_by_id(chat_id) is None:
                raise NotFoundError("Chat not found")
        except ApiError as e:
            return error(e.status, e.message)

        if not message.timestamp:
            message.timestamp = utc_now_iso()
        self.messages.create(message)
        self.chats.update_last_message(chat_id, message.message, message.timestamp, message.sender_id)
        return created(message.to_dict())
