"""Foods offered by sellers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from marketdb.api.models.base import Model, Record
from marketdb.parsing.statement_parser import OrderBy
from marketdb.store import MutationResult


@dataclass
class Food(Record):
    json_fields = ("ingredients",)
    flag_fields = ("is_available",)

    id: str
    name: str
    price: float
    cook_name: str
    category: str
    description: str = ""
    cook_id: str = ""
    image_url: str = ""
    ingredients: list[str] = field(default_factory=list)
    preparation_time: int = 0
    serving_size: int = 1
    is_available: bool = True
    rating: float = 0.0
    review_count: int = 0
    created_at: str = ""
    updated_at: str = ""


class FoodModel(Model[Food]):
    table = "foods"
    record_type = Food

    def find_all(self) -> list[Food]:
        """All foods, newest first."""
        return self._select(order_by=OrderBy("createdAt", "desc"))

    def find_by_id(self, food_id: str) -> Food | None:
        return self.find_by_key(food_id)

    def create(self, food: Food) -> MutationResult:
        return self._insert(food)

    def update(self, food_id: str, /, **updates: Any) -> MutationResult:
        return self._update(food_id, updates)

    def delete(self, food_id: str) -> MutationResult:
        return self._delete(food_id)
