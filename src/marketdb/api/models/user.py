"""Users: buyers, sellers, or both."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from marketdb.api.models.base import Model, Record
from marketdb.parsing.statement_parser import Condition
from marketdb.store import MutationResult

USER_TYPES = ("buyer", "seller", "both")


@dataclass
class User(Record):
    uid: str
    email: str
    display_name: str
    user_type: str = "buyer"
    password: str = ""
    created_at: str = ""
    updated_at: str = ""

    def public_dict(self) -> dict[str, Any]:
        """Payload without the password."""
        data = self.to_dict()
        data.pop("password", None)
        return data


class UserModel(Model[User]):
    table = "users"
    key = "uid"
    record_type = User

    def find_by_id(self, uid: str) -> User | None:
        return self.find_by_key(uid)

    def find_by_email(self, email: str) -> User | None:
        return self._select_one(Condition("email"), [email])

    def create(self, user: User) -> MutationResult:
        return self._insert(user)

    def update(self, uid: str, /, **updates: Any) -> MutationResult:
        return self._update(uid, updates)
