"""Recipe generation and saved recipe schemas."""

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# --- Generated recipe ---


class RecipeIngredient(BaseModel):
    """Ingredient line of a generated recipe."""

    name: str = Field(..., min_length=1)
    quantity: float | str | None = None
    unit: str | None = None


class Nutrition(BaseModel):
    """Per-serving nutrition estimate."""

    calories: float
    protein: float
    carbs: float
    fat: float


class Recipe(BaseModel):
    """Recipe returned by the generator.

    Accepts the camelCase keys the model is prompted with and serializes
    with snake_case names like the rest of the API.
    """

    title: str = Field(..., min_length=1)
    description: str = ""
    prep_time: int = Field(..., validation_alias=AliasChoices("prepTime", "prep_time"), ge=0)
    cook_time: int = Field(..., validation_alias=AliasChoices("cookTime", "cook_time"), ge=0)
    difficulty: str
    servings: int = Field(..., ge=1)
    ingredients: list[RecipeIngredient] = Field(..., min_length=1)
    instructions: list[str] = Field(..., min_length=1)
    tags: list[str] = []
    nutrition: Nutrition


# --- Generation request ---


class RecipeSettings(BaseModel):
    """User-chosen recipe options."""

    cuisine: str = Field("any", max_length=50)
    meal_type: str = Field("any", max_length=50)
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    servings: int = Field(2, ge=1, le=20)


class SelectedItem(BaseModel):
    """An inventory item picked for the recipe."""

    item_id: str
    quantity: float = 1


class CustomIngredient(BaseModel):
    """A free-text ingredient that is not in inventory."""

    name: str = Field(..., max_length=255)
    quantity: float = 1
    unit: str | None = Field(None, max_length=50)


class SelectionIngredient(BaseModel):
    """Normalized ingredient handed to the generator."""

    name: str
    quantity: float
    unit: str


class RecipeGenerateRequest(BaseModel):
    """Generate a recipe from selected inventory items and custom ingredients."""

    items: list[SelectedItem] = []
    custom: list[CustomIngredient] = []
    dietary_flags: dict[str, bool] = {}
    settings: RecipeSettings = RecipeSettings()


class RecipeGenerateResponse(BaseModel):
    """Generated recipe together with the ingredient list it was built from."""

    ingredients: list[SelectionIngredient]
    recipe: Recipe


# --- Saved recipes ---


class SavedRecipeSave(BaseModel):
    """Save a recipe. Saving again with the same id replaces the stored copy."""

    id: str | None = Field(None, min_length=1, max_length=64)
    recipe: Recipe


class SavedRecipeResponse(BaseModel):
    """A saved recipe."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    recipe: Recipe
    created_at: datetime
    updated_at: datetime
