"""
Request/Response Models
"""
from typing import Any

from pydantic import BaseModel, ConfigDict


class UserBody(BaseModel):
    """
    User fields as sent by the client.

    Fields are deliberately untyped: type checks belong to the domain
    validation so that clients get its messages instead of schema errors.
    """
    model_config = ConfigDict(extra="ignore")

    userId: Any = None
    name: Any = None
    email: Any = None
    dateOfBirth: Any = None


class MessageResponse(BaseModel):
    msg: str


class ErrorResponse(BaseModel):
    error: Any
