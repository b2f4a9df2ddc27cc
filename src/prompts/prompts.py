"""Prompt templates for food photo analysis.

Provides a factory function that renders the analysis instruction for a given
serving count. The instruction describes the exact JSON shape Gemini must
return (mirroring ``RecipeDetails``) and requires ingredient quantities to be
precomputed for the requested servings.
"""

from src.models.models import NOT_A_FOOD_ITEM, UNKNOWN_DISH


def _get_schema_section(servings: int) -> str:
    """Describe the output object, field by field.

    Args:
        servings: Requested serving count, echoed back and used for scaling.

    Returns:
        str: Schema section of the prompt.
    """
    return f"""
## Output Schema

Return ONE JSON object with these fields (camelCase names exactly as written):

NutrientInfo:
- "name": string. Nutrient label, e.g. "Protein", "Total Carbohydrates", "Total Fat", "Saturated Fat", "Cholesterol", "Sodium", "Dietary Fiber", "Total Sugars", "Calcium", "Iron", "Potassium".
- "amount": string. Numeric amount PER SERVING, e.g. "10.5".
- "unit": string. e.g. "g", "mg".
- "percentDailyValue": string, optional. Percent of daily value without the % sign, e.g. "20".

Ingredient:
- "name": string. e.g. "Chicken Breast".
- "quantity": string. Quantity for ALL {servings} servings as a plain number, e.g. "200" when one serving needs 100 g and there are 2 servings. NEVER a formula.
- "unit": string. e.g. "g", "ml", "pieces", "tbsp".
- "notes": string, optional. e.g. "skinless, boneless", "finely chopped".

RecipeDetails (the top-level object):
- "dishName": string. Identified dish name, e.g. "Spaghetti Carbonara".
- "description": string, optional. A brief, appetizing description of the dish.
- "servings": number. Echo back the requested number of servings: {servings}.
- "caloriesPerServing": string. Estimated calories PER SERVING as a plain number, e.g. "450".
- "totalCalories": string, optional. Estimated calories for ALL {servings} servings, i.e. caloriesPerServing multiplied by {servings}.
- "nutrientsPerServing": array of NutrientInfo. Key nutrients PER SERVING, in display order.
- "ingredients": array of Ingredient. Quantities MUST be calculated for {servings} servings.
- "preparationSteps": array of strings. Step-by-step preparation guide.
- "preparationTime": string, optional. e.g. "20 minutes".
- "cookingTime": string, optional. e.g. "30 minutes".
"""


def _get_rules_section(servings: int) -> str:
    """Rules for identification, scaling and output format.

    Args:
        servings: Requested serving count.

    Returns:
        str: Rules section of the prompt.
    """
    return f"""
## Rules

1. Identify the main dish in the image. If it is unclear, set "dishName" to "{UNKNOWN_DISH}". If the image does not show food, set "dishName" to "{NOT_A_FOOD_ITEM}". In both cases still return a complete object with a suitable description and empty arrays where nothing applies.
2. Scale every ingredient quantity to {servings} servings and write the computed result. Example: if 1 serving needs 1 apple and there are 3 servings, return {{"name": "Apple", "quantity": "3", "unit": "medium"}}.
3. Provide a comprehensive list of common nutrients where you can estimate them.
4. Keep preparation steps clear and easy to follow, one action per step.
5. The entire response MUST be a single JSON object matching RecipeDetails. Do not write any text, markdown or explanation outside the JSON object.
"""


def get_recipe_analysis_prompt(servings: int) -> str:
    """Build the instruction sent alongside the food photo.

    Args:
        servings: Requested serving count. Embedded both as the value to echo in
            "servings" and as the scaling target for quantities and total calories.

    Returns:
        str: Complete prompt text.
    """
    intro = f"""You are NutriChef AI, an expert food analyst and recipe writer.
Analyze the provided food image. Based on the image and the requested number of servings ({servings}), produce a recipe with nutrition estimates strictly as JSON.
"""
    return intro + _get_schema_section(servings) + _get_rules_section(servings)
