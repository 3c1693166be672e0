"""Route handlers, one controller per resource."""

from marketdb.api.controllers.auth import AuthController
from marketdb.api.controllers.chats import ChatController
from marketdb.api.controllers.foods import FoodController
from marketdb.api.controllers.orders import OrderController
from marketdb.api.controllers.reviews import ReviewController

__all__ = [
    "AuthController",
    "ChatController",
    "FoodController",
    "OrderController",
    "ReviewController",
]
