"""Reviews, and the running food rating they feed."""

from __future__ import annotations

import math

from marketdb.api.models import FoodModel, Review, ReviewModel
from marketdb.api.types import Request, Response, created, error, ok
from marketdb.errors import ApiError
from marketdb.timestamps import utc_now_iso


def running_average(average: float, count: int, value: float) -> float:
    """Fold ``value`` into an average over ``count`` items, rounded half up to one decimal."""
    new_average = (average * count + value) / (count + 1)
    return math.floor(new_average * 10 + 0.5) / 10


class ReviewController:
    def __init__(self, reviews: ReviewModel, foods: FoodModel) -> None:
        self.reviews = reviews
        self.foods = foods

    async def create(self, req: Request) -> Response:
        try:
            review = Review.from_payload(req.body)
        except ApiError as e:
            return error(e.status, e.message)

        now = utc_now_iso()
        review.created_at = review.created_at or now
        review.updated_at = review.updated_at or now
        self.reviews.create(review)

        food = self.foods.find_by_id(review.food_id)
        if food is not None:
            self.foods.update(
                food.id,
                rating=running_average(food.rating, food.review_count, review.rating),
                review_count=food.review_count + 1,
            )
        return created(review.to_dict())

    async def get_by_food(self, req: Request) -> Response:
        food_id = req.query.get("foodId")
        if not food_id:
            return error(400, "foodId is required")
        return ok([review.to_dict() for review in self.reviews.find_by_food(food_id)])
