"""Route table for the marketplace API."""

from __future__ import annotations

from marketdb.api.controllers import (
    AuthController,
    ChatController,
    FoodController,
    OrderController,
    ReviewController,
)
from marketdb.api.models import ChatModel, FoodModel, MessageModel, OrderModel, ReviewModel, UserModel
from marketdb.api.router import Router
from marketdb.store import Store


def build_router(store: Store) -> Router:
    """Wire every controller to ``store`` and register its routes."""
    foods = FoodModel(store)
    auth = AuthController(UserModel(store))
    food = FoodController(foods)
    orders = OrderController(OrderModel(store))
    chats = ChatController(ChatModel(store), MessageModel(store))
    reviews = ReviewController(ReviewModel(store), foods)

    router = Router()

    # Auth
    router.post("/auth/register", auth.register)
    router.post("/auth/login", auth.login)
    router.get("/auth/me/:uid", auth.get_profile)

    # Foods
    router.get("/foods", food.get_all)
    router.post("/foods", food.create)
    router.get("/foods/:id", food.get_by_id)

    # Orders
    router.post("/orders", orders.create)
    router.get("/orders", orders.list)
    router.put("/orders/:id/status", orders.update_status)

    # Chats
    router.get("/chats", chats.list)
    router.post("/chats", chats.create)
    router.get("/chats/:id/messages", chats.get_messages)
    router.post("/chats/:id/messages", chats.send_message)

    # Reviews
    router.post("/reviews", reviews.create)
    router.get("/reviews", reviews.get_by_food)

    return router
