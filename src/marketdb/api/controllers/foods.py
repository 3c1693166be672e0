"""Food listing and creation."""

from __future__ import annotations

from marketdb.api.models import Food, FoodModel
from marketdb.api.types import Request, Response, created, error, ok
from marketdb.errors import ApiError
from marketdb.timestamps import utc_now_iso


class FoodController:
    def __init__(self, foods: FoodModel) -> None:
        self.foods = foods

    async def get_all(self, req: Request) -> Response:
        return ok([food.to_dict() for food in self.foods.find_all()])

    async def get_by_id(self, req: Request) -> Response:
        food = self.foods.find_by_id(req.params["id"])
        if food is None:
            return error(404, "Food not found")
        return ok(food.to_dict())

    async def create(self, req: Request) -> Response:
        try:
            food = Food.from_payload(req.body)
        except ApiError as e:
            return error(e.status, e.message)

        now = utc_now_iso()
        food.created_at = now
        food.updated_at = now
        self.foods.create(food)
        return created(food.to_dict())
