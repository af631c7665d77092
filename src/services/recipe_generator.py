"""Recipe generation from a selected ingredient list."""

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from src.exceptions import ItemValidationError, RecipeGenerationError
from src.models.user import User
from src.schemas.recipe import Recipe, RecipeSettings
from src.services.llm import LLMService
from src.services.llm_prompts import get_recipe_generation_prompt

logger = logging.getLogger(__name__)


def profile_for(user: User) -> dict[str, Any]:
    """Profile fields used to personalize recipes."""
    return {
        "age": user.age,
        "height": user.height,
        "weight": user.weight,
        "health_conditions": user.health_conditions,
    }


class RecipeGenerator:
    """Turns an ingredient list into a structured recipe via the LLM.

    Recipe content is not judged here; the reply only has to parse into a
    Recipe. Anything else surfaces as RecipeGenerationError.
    """

    def __init__(self, llm_service: LLMService | None = None):
        self.llm_service = llm_service or LLMService()

    async def generate(
        self,
        ingredients: list[dict[str, Any]],
        dietary_flags: dict[str, bool],
        settings: RecipeSettings,
        profile: dict[str, Any] | None = None,
    ) -> Recipe:
        if not ingredients:
            raise ItemValidationError("Select at least one ingredient")
        if not self.llm_service.is_configured:
            raise RecipeGenerationError("Recipe generation is not configured")

        prompt = get_recipe_generation_prompt(
            ingredients, dietary_flags, settings.model_dump(), profile
        )
        try:
            data = await self.llm_service.generate_json(prompt=prompt, temperature=0.4)
        except (httpx.HTTPError, json.JSONDecodeError, ValueError) as e:
            logger.error(f"Recipe generation failed: {e}")
            raise RecipeGenerationError(f"Recipe generation failed: {e}") from e

        try:
            recipe = Recipe.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Generated recipe failed validation: {e}")
            raise RecipeGenerationError("Generated recipe was malformed") from e

        logger.info(f"Generated recipe '{recipe.title}' from {len(ingredients)} ingredient(s)")
        return recipe
