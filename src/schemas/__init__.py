"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, ProfileUpdate, UserLogin, UserRegister, UserResponse
from src.schemas.inventory import (
    DashboardResponse,
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
)
from src.schemas.recipe import (
    Recipe,
    RecipeGenerateRequest,
    RecipeGenerateResponse,
    SavedRecipeResponse,
    SavedRecipeSave,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "AuthResponse",
    "UserResponse",
    "ProfileUpdate",
    "InventoryItemCreate",
    "InventoryItemUpdate",
    "InventoryItemResponse",
    "DashboardResponse",
    "Recipe",
    "RecipeGenerateRequest",
    "RecipeGenerateResponse",
    "SavedRecipeSave",
    "SavedRecipeResponse",
]
