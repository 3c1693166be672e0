"""Entity models: one record type and one model class per table."""

from marketdb.api.models.base import Model, Record, to_camel
from marketdb.api.models.chat import Chat, ChatModel
from marketdb.api.models.food import Food, FoodModel
from marketdb.api.models.message import Message, MessageModel
from marketdb.api.models.order import ORDER_STATUSES, Order, OrderModel
from marketdb.api.models.review import Review, ReviewModel
from marketdb.api.models.user import User, UserModel

# Table name -> record type, used to encode seed data
RECORD_TYPES: dict[str, type[Record]] = {
    "users": User,
    "foods": Food,
    "orders": Order,
    "chats": Chat,
    "messages": Message,
    "reviews": Review,
}

__all__ = [
    "Chat",
    "ChatModel",
    "Food",
    "FoodModel",
    "Message",
    "MessageModel",
    "Model",
    "ORDER_STATUSES",
    "Order",
    "OrderModel",
    "RECORD_TYPES",
    "Record",
    "Review",
    "ReviewModel",
    "User",
    "UserModel",
    "to_camel",
]
