"""Unit tests for Pydantic models validation."""

import pytest
from pydantic import ValidationError

from src.models.models import (
    NOT_A_FOOD_ITEM,
    UNKNOWN_DISH,
    Ingredient,
    NutrientInfo,
    RecipeDetails,
    RecipeRequest,
    UploadedImage,
)


def _recipe_payload(**overrides):
    payload = {
        "dishName": "Avocado Toast",
        "description": "Crisp sourdough with smashed avocado.",
        "servings": 2,
        "caloriesPerServing": "320",
        "totalCalories": "640",
        "nutrientsPerServing": [
            {"name": "Protein", "amount": "8", "unit": "g", "percentDailyValue": "16"},
            {"name": "Sodium", "amount": "410", "unit": "mg"},
        ],
        "ingredients": [
            {"name": "Sourdough bread", "quantity": "4", "unit": "slices"},
            {"name": "Avocado", "quantity": "2", "unit": "medium", "notes": "ripe"},
        ],
        "preparationSteps": ["Toast the bread.", "Smash the avocado and spread."],
        "preparationTime": "5 minutes",
        "cookingTime": "3 minutes",
    }
    payload.update(overrides)
    return payload


class TestRecipeDetails:
    """Test RecipeDetails parsing from the camelCase wire format."""

    def test_valid_full_payload(self):
        recipe = RecipeDetails.model_validate(_recipe_payload())

        assert recipe.dish_name == "Avocado Toast"
        assert recipe.servings == 2
        assert recipe.calories_per_serving == "320"
        assert recipe.nutrients_per_serving[0].percent_daily_value == "16"
        assert recipe.nutrients_per_serving[1].percent_daily_value is None
        assert recipe.ingredients[1].notes == "ripe"
        assert recipe.preparation_time == "5 minutes"

    def test_list_order_preserved(self):
        recipe = RecipeDetails.model_validate(_recipe_payload())

        assert [n.name for n in recipe.nutrients_per_serving] == ["Protein", "Sodium"]
        assert recipe.preparation_steps[0] == "Toast the bread."

    def test_optional_fields_may_be_missing(self):
        payload = _recipe_payload()
        for key in ("description", "totalCalories", "preparationTime", "cookingTime"):
            del payload[key]

        recipe = RecipeDetails.model_validate(payload)

        assert recipe.description is None
        assert recipe.total_calories is None
        assert recipe.cooking_time is None

    def test_empty_lists_allowed(self):
        recipe = RecipeDetails.model_validate(
            _recipe_payload(nutrientsPerServing=[], ingredients=[], preparationSteps=[])
        )

        assert recipe.ingredients == []
        assert recipe.preparation_steps == []

    @pytest.mark.parametrize(
        "missing", ["dishName", "servings", "caloriesPerServing", "nutrientsPerServing", "ingredients", "preparationSteps"]
    )
    def test_required_fields(self, missing):
        payload = _recipe_payload()
        del payload[missing]

        with pytest.raises(ValidationError):
            RecipeDetails.model_validate(payload)

    def test_extra_fields_ignored(self):
        recipe = RecipeDetails.model_validate(_recipe_payload(cuisine="Californian", confidence=0.9))

        assert not hasattr(recipe, "cuisine")

    def test_numbers_coerced_to_strings(self):
        payload = _recipe_payload(caloriesPerServing=450, totalCalories=900.0)
        payload["nutrientsPerServing"] = [{"name": "Fat", "amount": 10.5, "unit": "g", "percentDailyValue": 13}]
        payload["ingredients"] = [{"name": "Egg", "quantity": 3, "unit": "large"}]

        recipe = RecipeDetails.model_validate(payload)

        assert recipe.calories_per_serving == "450"
        assert recipe.total_calories == "900"
        assert recipe.nutrients_per_serving[0].amount == "10.5"
        assert recipe.nutrients_per_serving[0].percent_daily_value == "13"
        assert recipe.ingredients[0].quantity == "3"

    def test_servings_must_be_positive(self):
        with pytest.raises(ValidationError):
            RecipeDetails.model_validate(_recipe_payload(servings=0))

    def test_populate_by_field_name(self):
        recipe = RecipeDetails(
            dish_name="Soup",
            servings=1,
            calories_per_serving="200",
            nutrients_per_serving=[],
            ingredients=[],
            preparation_steps=[],
        )

        assert recipe.dish_name == "Soup"

    def test_dump_by_alias_uses_camel_case(self):
        dumped = RecipeDetails.model_validate(_recipe_payload()).model_dump(by_alias=True)

        assert dumped["dishName"] == "Avocado Toast"
        assert dumped["nutrientsPerServing"][0]["percentDailyValue"] == "16"


class TestRecipeSentinels:
    """Test detection of unidentified dishes."""

    def test_identified_dish(self):
        assert RecipeDetails.model_validate(_recipe_payload()).is_identified is True

    @pytest.mark.parametrize("name", [UNKNOWN_DISH, NOT_A_FOOD_ITEM])
    def test_sentinel_names(self, name):
        recipe = RecipeDetails.model_validate(_recipe_payload(dishName=name))

        assert recipe.is_identified is False


class TestEstimatedTotalCalories:
    """Test total calorie fallback."""

    def test_uses_reported_total(self):
        recipe = RecipeDetails.model_validate(_recipe_payload(totalCalories="700"))

        assert recipe.estimated_total_calories() == "700"

    def test_derives_total_from_per_serving(self):
        payload = _recipe_payload(caloriesPerServing="450", servings=3)
        del payload["totalCalories"]

        assert RecipeDetails.model_validate(payload).estimated_total_calories() == "1350"

    def test_non_numeric_per_serving(self):
        payload = _recipe_payload(caloriesPerServing="about 450")
        del payload["totalCalories"]

        assert RecipeDetails.model_validate(payload).estimated_total_calories() is None


class TestNutrientAndIngredient:
    """Test nested entry models."""

    def test_nutrient_requires_unit(self):
        with pytest.raises(ValidationError):
            NutrientInfo.model_validate({"name": "Protein", "amount": "8"})

    def test_ingredient_whitespace_stripped(self):
        ingredient = Ingredient.model_validate({"name": "  Basil ", "quantity": " 10 ", "unit": "leaves"})

        assert ingredient.name == "Basil"
        assert ingredient.quantity == "10"


class TestRecipeRequest:
    """Test RecipeRequest validation."""

    def test_valid_request(self):
        request = RecipeRequest(image_base64="aGVsbG8=", mime_type="image/png", servings=2)

        assert request.servings == 2

    def test_strips_data_url_prefix(self):
        request = RecipeRequest(image_base64="data:image/png;base64,aGVsbG8=", mime_type="image/png", servings=1)

        assert request.image_base64 == "aGVsbG8="

    @pytest.mark.parametrize("servings", [0, -5])
    def test_servings_minimum(self, servings):
        with pytest.raises(ValidationError):
            RecipeRequest(image_base64="aGVsbG8=", mime_type="image/png", servings=servings)

    def test_empty_image_rejected(self):
        with pytest.raises(ValidationError):
            RecipeRequest(image_base64="", mime_type="image/png", servings=1)

    def test_empty_mime_type_rejected(self):
        with pytest.raises(ValidationError):
            RecipeRequest(image_base64="aGVsbG8=", mime_type="", servings=1)


class TestUploadedImage:
    """Test UploadedImage validation."""

    def test_valid_image(self):
        image = UploadedImage(filename="toast.png", mime_type="image/png", data=b"\x89PNG")

        assert image.mime_type == "image/png"

    def test_non_image_type_rejected(self):
        with pytest.raises(ValidationError, match="Only image files"):
            UploadedImage(filename="notes.pdf", mime_type="application/pdf", data=b"%PDF")

    def test_empty_data_rejected(self):
        with pytest.raises(ValidationError):
            UploadedImage(filename="empty.png", mime_type="image/png", data=b"")
