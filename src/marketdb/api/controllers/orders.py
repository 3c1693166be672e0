"""Order placement, listing and status changes."""

from __future__ import annotations

from pydantic import ValidationError as PayloadError

from marketdb.api.models import Order, OrderModel
from marketdb.api.models.base import describe_errors
from marketdb.api.schemas import StatusUpdateRequest
from marketdb.api.types import Request, Response, created, error, ok
from marketdb.errors import ApiError, NotFoundError
from marketdb.timestamps import utc_now_iso


class OrderController:
    def __init__(self, orders: OrderModel) -> None:
        self.orders = orders

    async def create(self, req: Request) -> Response:
        try:
            order = Order.from_payload(req.body)
            if not order.order_date:
                order.order_date = utc_now_iso()
            self.orders.create(order)
        except ApiError as e:
            return error(e.status, e.message)
        return created(order.to_dict())

    async def list(self, req: Request) -> Response:
        user_id = req.query.get("userId")
        if not user_id:
            return error(400, "userId is required")
        try:
            orders = self.orders.find_by_user(user_id, req.query.get("type") or "buyer")
        except ApiError as e:
            return error(e.status, e.message)
        return ok([order.to_dict() for order in orders])

    async def update_status(self, req: Request) -> Response:
        order_id = req.params["id"]
        try:
            status = StatusUpdateRequest.model_validate(req.body if req.body is not None else {}).status
        except PayloadError as e:
            return error(400, f"Invalid request body: {describe_errors(e)}")
        try:
            result = self.orders.update_status(order_id, status)
            if not result.applied:
                raise NotFoundError("Order not found")
        except ApiError as e:
            return error(e.status, e.message)
        return ok({"id": order_id, "status": status})
