"""Buyer reviews of foods."""

from __future__ import annotations

from dataclasses import dataclass, field

from marketdb.api.models.base import Model, Record
from marketdb.parsing.statement_parser import Condition, OrderBy
from marketdb.store import MutationResult


@dataclass
class Review(Record):
    json_fields = ("images",)
    flag_fields = ("is_verified_purchase",)

    id: str
    food_id: str
    food_name: str
    buyer_id: str
    buyer_name: str
    seller_id: str
    seller_name: str
    rating: float
    comment: str = ""
    buyer_avatar: str | None = None
    order_id: str | None = None
    images: list[str] = field(default_factory=list)
    helpful_count: int = 0
    report_count: int = 0
    is_verified_purchase: bool = False
    created_at: str = ""
    updated_at: str = ""


class ReviewModel(Model[Review]):
    table = "reviews"
    record_type = Review

    def create(self, review: Review) -> MutationResult:
        return self._insert(review)

    def find_by_food(self, food_id: str) -> list[Review]:
        """Reviews of a food, newest first."""
        return self._select(Condition("foodId"), [food_id], order_by=OrderBy("createdAt", "desc"))
