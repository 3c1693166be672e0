"""Registration, login and profile lookup."""

from __future__ import annotations

import secrets

from pydantic import ValidationError as PayloadError

from marketdb.api.models import User, UserModel
from marketdb.api.models.base import describe_errors
from marketdb.api.models.user import USER_TYPES
from marketdb.api.schemas import LoginRequest
from marketdb.api.types import Request, Response, created, error, ok
from marketdb.errors import ApiError, ValidationError
from marketdb.timestamps import utc_now_iso


class AuthController:
    def __init__(self, users: UserModel) -> None:
        self.users = users

    async def register(self, req: Request) -> Response:
        try:
            user = User.from_payload(req.body)
            if user.user_type not in USER_TYPES:
                raise ValidationError(f"Invalid user type: {user.user_type}")
            if self.users.find_by_email(user.email) is not None:
                return error(400, "Email already in use")

            now = utc_now_iso()
            user.created_at = now
            user.updated_at = now
            # TODO: hash passwords before storing once login moves off plaintext comparison
            self.users.create(user)
            return created(user.public_dict())
        except ApiError as e:
            return error(e.status, e.message)

    async def login(self, req: Request) -> Response:
        try:
            credentials = LoginRequest.model_validate(req.body if req.body is not None else {})
        except PayloadError as e:
            return error(400, f"Email and password are required: {describe_errors(e)}")

        user = self.users.find_by_email(credentials.email)
        if user is None or not secrets.compare_digest(str(user.password).encode(), credentials.password.encode()):
            return error(401, "Invalid credentials")
        return ok(user.public_dict())

    async def get_profile(self, req: Request) -> Response:
        user = self.users.find_by_id(req.params["uid"])
        if user is None:
            return error(404, "User not found")
        return ok(user.public_dict())
