"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class UserCreateRequest(BaseModel):
    """Request model for creating a user.

    Missing fields default to empty so the service reports them as required.
    Client-supplied id and joinDate are ignored.
    """
    email: Optional[str] = ""
    password: Optional[str] = ""
    first_name: Optional[str] = Field("", alias="firstName")
    last_name: Optional[str] = Field("", alias="lastName")


class UserResponse(BaseModel):
    """Response model for user. ``password`` is the stored bcrypt hash."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="User ID (ObjectId hex)")
    email: str
    password: str = Field(..., description="bcrypt hash of the password")
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    join_date: datetime = Field(..., alias="joinDate")


class MessageResponse(BaseModel):
    """Status envelope without payload."""
    status: int
    message: str


class UserEnvelope(MessageResponse):
    """Status envelope carrying a user."""
    data: UserResponse
