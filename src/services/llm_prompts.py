"""LLM prompt templates for recipe generation."""

from typing import Any

RECIPE_GENERATION_SYSTEM_PROMPT = """You are a home cooking assistant. Create one recipe that uses the ingredients the user has on hand.

Return ONLY a valid JSON object with this exact structure - no additional text, markdown, or explanations:
{
  "title": "Recipe Title",
  "description": "Brief description",
  "prepTime": 15,
  "cookTime": 20,
  "difficulty": "medium",
  "servings": 2,
  "ingredients": [
    {"name": "ingredient1", "quantity": 1, "unit": "cup"},
    {"name": "ingredient2", "quantity": 2, "unit": "tbsp"}
  ],
  "instructions": [
    "Step 1 instruction",
    "Step 2 instruction"
  ],
  "tags": ["tag1", "tag2"],
  "nutrition": {
    "calories": 300,
    "protein": 15,
    "carbs": 30,
    "fat": 10
  }
}

prepTime and cookTime are minutes. Nutrition values are per serving (grams for protein, carbs, fat)."""


def _format_quantity(quantity: float) -> str:
    return str(int(quantity)) if float(quantity).is_integer() else f"{quantity:g}"


def get_recipe_generation_prompt(
    ingredients: list[dict[str, Any]],
    dietary_flags: dict[str, bool],
    settings: dict[str, Any],
    profile: dict[str, Any] | None = None,
) -> str:
    """Generate prompt for a recipe from selected ingredients."""
    ingredients_str = ", ".join(
        f"{_format_quantity(ing['quantity'])} {ing['unit']} of {ing['name']}" for ing in ingredients
    )
    restrictions = ", ".join(name for name, active in dietary_flags.items() if active)

    personalization = []
    profile = profile or {}
    if profile.get("age"):
        personalization.append(f"age: {profile['age']}")
    if profile.get("weight"):
        personalization.append(f"weight: {profile['weight']}kg")
    if profile.get("height"):
        personalization.append(f"height: {profile['height']}cm")
    if profile.get("health_conditions"):
        personalization.append(f"health conditions: {profile['health_conditions']}")

    cuisine = settings.get("cuisine", "any")
    meal_type = settings.get("meal_type", "any")
    lines = [
        f"Generate a recipe using these ingredients: {ingredients_str}.",
        "",
        "Recipe specifications:",
        f"- Cuisine type: {cuisine if cuisine != 'any' else 'flexible'}",
        f"- Meal type: {meal_type if meal_type != 'any' else 'any meal'}",
        f"- Difficulty level: {settings.get('difficulty', 'medium')}",
        f"- Number of servings: {settings.get('servings', 2)}",
    ]
    if restrictions:
        lines.append(f"- Dietary restrictions: {restrictions}")
    if personalization:
        lines.append(f"- Personalize for someone with: {', '.join(personalization)}")

    return f"{RECIPE_GENERATION_SYSTEM_PROMPT}\n\n" + "\n".join(lines)
