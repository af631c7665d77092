"""Recipe generation and saved recipe API endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_inventory_store, get_recipe_generator
from src.database import get_db
from src.models.saved_recipe import SavedRecipe
from src.models.user import User
from src.schemas.recipe import (
    RecipeGenerateRequest,
    RecipeGenerateResponse,
    SavedRecipeResponse,
    SavedRecipeSave,
    SelectionIngredient,
)
from src.services.ingredient_selection import IngredientSelection
from src.services.inventory_store import InventoryStore
from src.services.recipe_generator import RecipeGenerator, profile_for

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


def build_selection(
    request: RecipeGenerateRequest,
    store: InventoryStore,
    owner_id: int,
) -> IngredientSelection:
    """Rebuild the client's ingredient selection; inventory is only read."""
    selection = IngredientSelection()
    for selected in request.items:
        item = store.get_item(owner_id, selected.item_id)
        selection.select_item(item, selected.quantity)
    for custom in request.custom:
        selection.add_custom(custom.name, custom.quantity, custom.unit)
    return selection


@router.post("/generate", response_model=RecipeGenerateResponse)
async def generate_recipe(
    request: RecipeGenerateRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
    generator: Annotated[RecipeGenerator, Depends(get_recipe_generator)],
):
    """Generate a recipe from selected inventory items and custom ingredients."""
    selection = build_selection(request, store, current_user.id)
    ingredients = selection.to_ingredients()

    recipe = await generator.generate(
        ingredients,
        request.dietary_flags,
        request.settings,
        profile_for(current_user),
    )
    return RecipeGenerateResponse(
        ingredients=[SelectionIngredient(**ingredient) for ingredient in ingredients],
        recipe=recipe,
    )


# --- Saved recipes ---


@router.get("/saved", response_model=list[SavedRecipeResponse])
async def list_saved_recipes(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """List the user's saved recipes in the order they were first saved."""
    return (
        db.query(SavedRecipe)
        .filter(SavedRecipe.owner_id == current_user.id)
        .order_by(SavedRecipe.created_at, SavedRecipe.id)
        .all()
    )


@router.post("/saved", response_model=SavedRecipeResponse, status_code=status.HTTP_201_CREATED)
async def save_recipe(
    data: SavedRecipeSave,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Save a recipe, or replace the saved copy with the same id."""
    recipe_id = data.id or uuid.uuid4().hex
    payload = data.recipe.model_dump(mode="json")

    existing = db.query(SavedRecipe).filter(SavedRecipe.id == recipe_id).first()
    if existing:
        # Ids are global; another user's id is never overwritten
        if existing.owner_id != current_user.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Saved recipe not found"
            )
        existing.title = data.recipe.title
        existing.recipe = payload
        db.commit()
        db.refresh(existing)
        return existing

    saved = SavedRecipe(
        id=recipe_id,
        owner_id=current_user.id,
        title=data.recipe.title,
        recipe=payload,
    )
    db.add(saved)
    db.commit()
    db.refresh(saved)
    return saved


@router.delete("/saved/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_recipe(
    recipe_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Remove a saved recipe. Deleting one that is already gone succeeds."""
    saved = (
        db.query(SavedRecipe)
        .filter(SavedRecipe.id == recipe_id, SavedRecipe.owner_id == current_user.id)
        .first()
    )
    if saved:
        db.delete(saved)
        db.commit()
