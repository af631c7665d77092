"""Authentication and profile schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserRegister(BaseModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    name: str | None = Field(None, max_length=255)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
    user: "UserResponse"


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    age: int | None = None
    height: float | None = None
    weight: float | None = None
    health_conditions: str | None = None


class ProfileUpdate(BaseModel):
    """Update the profile used to personalize recipes. Blank clears a field."""

    name: str | None = Field(None, max_length=255)
    age: int | None = Field(None, ge=0, le=150)
    height: float | None = Field(None, gt=0, le=300)  # cm
    weight: float | None = Field(None, gt=0, le=700)  # kg
    health_conditions: str | None = Field(None, max_length=2000)

    @field_validator("age", "height", "weight", mode="before")
    @classmethod
    def blank_means_cleared(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
