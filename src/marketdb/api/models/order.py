"""Orders placed by buyers."""

from __future__ import annotations

from dataclasses import dataclass

from marketdb.api.models.base import Model, Record
from marketdb.errors import ValidationError
from marketdb.parsing.statement_parser import Condition, OrderBy
from marketdb.store import MutationResult

ORDER_STATUSES = ("pending", "confirmed", "preparing", "ready", "delivered", "cancelled")


@dataclass
class Order(Record):
    id: str
    food_id: str
    buyer_id: str
    seller_id: str
    quantity: int
    total_price: float
    status: str = "pending"
    delivery_address: str = ""
    order_date: str = ""
    estimated_delivery_time: str | None = None


class OrderModel(Model[Order]):
    table = "orders"
    record_type = Order

    def create(self, order: Order) -> MutationResult:
        if order.status not in ORDER_STATUSES:
            raise ValidationError(f"Invalid order status: {order.status}")
        return self._insert(order)

    def find_by_user(self, user_id: str, role: str = "buyer") -> list[Order]:
        """Orders where the user is the buyer (or the seller), newest first."""
        if role not in ("buyer", "seller"):
            raise ValidationError(f"Invalid role: {role}")
        field = "buyerId" if role == "buyer" else "sellerId"
        return self._select(Condition(field), [user_id], order_by=OrderBy("orderDate", "desc"))

    def find_by_id(self, order_id: str) -> Order | None:
        return self.find_by_key(order_id)

    def update_status(self, order_id: str, status: str) -> MutationResult:
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Invalid order status: {status}")
        return self._update(order_id, {"status": status})
