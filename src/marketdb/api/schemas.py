"""Request bodies for the endpoints that do not take a whole record."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str


class StatusUpdateRequest(BaseModel):
    """New status for an order."""

    status: str = Field(min_length=1)
