"""Pydantic DTOs (Data Transfer Objects) for the User feature."""

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for registering a new user."""

    username: str = Field(..., min_length=1, max_length=255, examples=["alovelace"])
    firstname: str | None = Field(None, max_length=255, examples=["Ada"])
    lastname: str | None = Field(None, max_length=255, examples=["Lovelace"])


class UserUpdate(BaseModel):
    """Schema for updating an existing user — all fields optional."""

    username: str | None = Field(None, min_length=1, max_length=255)
    firstname: str | None = Field(None, max_length=255)
    lastname: str | None = Field(None, max_length=255)
