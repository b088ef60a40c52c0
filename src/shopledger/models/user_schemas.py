"""Pydantic schemas for shopkeeper accounts."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopledger.core.validators import validate_email


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        cleaned = validate_email(v)
        if cleaned is None:
            raise ValueError("Email is required")
        return cleaned


class UserResponse(BaseModel):
    id: UUID
    email: str
    name: str
    business_name: str | None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
