"""Data models and schemas for NutriChef AI.

Defines Pydantic models for the analysis request, the uploaded image, and the
recipe returned by Gemini. Recipe models use camelCase aliases on the wire
(``dishName``, ``caloriesPerServing``) and snake_case attributes in Python.
Unknown fields in a model reply are ignored.
"""

from typing import Any, List, Optional, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


UNKNOWN_DISH = "Unknown Dish"
NOT_A_FOOD_ITEM = "Not a food item"


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(round(value, 2))


def _numeric_to_string(value: Any) -> Any:
    """Coerce JSON numbers to strings; leave everything else for normal validation."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_number(value)
    return value


def _parse_number(value: Optional[str]) -> Optional[float]:
    """Read a numeric-as-string field, tolerating thousands separators."""
    if value is None:
        return None
    try:
        return float(value.replace(",", "").strip())
    except ValueError:
        return None


class _WireModel(BaseModel):
    """Base for models exchanged with Gemini in camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class NutrientInfo(_WireModel):
    """One nutrient line, per serving (e.g. Protein 10.5 g, 20% DV)."""

    name: Annotated[str, Field(description='Nutrient label, e.g. "Protein", "Sodium"')]
    amount: Annotated[str, Field(description='Numeric amount as string, e.g. "10.5"')]
    unit: Annotated[str, Field(description='Unit, e.g. "g", "mg"')]
    percent_daily_value: Annotated[
        Optional[str], Field(None, description='Optional percent of daily value, e.g. "20"')
    ]

    @field_validator("amount", "percent_daily_value", mode="before")
    @classmethod
    def coerce_numbers(cls, value: Any) -> Any:
        return _numeric_to_string(value)


class Ingredient(_WireModel):
    """One ingredient with its quantity already scaled to the requested servings."""

    name: Annotated[str, Field(description='Ingredient name, e.g. "Chicken Breast"')]
    quantity: Annotated[str, Field(description="Precomputed quantity for all servings, never a formula")]
    unit: Annotated[str, Field(description='Unit, e.g. "g", "ml", "pieces"')]
    notes: Annotated[Optional[str], Field(None, description='Optional prep notes, e.g. "finely chopped"')]

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, value: Any) -> Any:
        return _numeric_to_string(value)


class RecipeDetails(_WireModel):
    """Recipe and nutrition estimate generated for a food photo.

    ``dish_name`` is set to ``UNKNOWN_DISH`` or ``NOT_A_FOOD_ITEM`` when the photo
    cannot be identified as a dish. List fields keep the order the model returned
    them in, which is also the display order.
    """

    dish_name: Annotated[str, Field(min_length=1, description="Identified dish name")]
    description: Annotated[Optional[str], Field(None, description="Brief description of the dish")]
    servings: Annotated[int, Field(ge=1, description="Number of servings the recipe is scaled to")]
    calories_per_serving: Annotated[str, Field(description='Estimated calories per serving, e.g. "450"')]
    total_calories: Annotated[
        Optional[str], Field(None, description="Estimated calories for all servings")
    ]
    nutrients_per_serving: Annotated[List[NutrientInfo], Field(description="Key nutrients per serving")]
    ingredients: Annotated[List[Ingredient], Field(description="Ingredients scaled to the servings")]
    preparation_steps: Annotated[List[str], Field(description="Step-by-step preparation guide")]
    preparation_time: Annotated[Optional[str], Field(None, description='e.g. "20 minutes"')]
    cooking_time: Annotated[Optional[str], Field(None, description='e.g. "30 minutes"')]

    @field_validator("calories_per_serving", "total_calories", mode="before")
    @classmethod
    def coerce_calories(cls, value: Any) -> Any:
        return _numeric_to_string(value)

    @property
    def is_identified(self) -> bool:
        """False when the model reported the photo as unidentifiable or not food."""
        return self.dish_name not in (UNKNOWN_DISH, NOT_A_FOOD_ITEM)

    def estimated_total_calories(self) -> Optional[str]:
        """Total calories for all servings.

        Uses ``total_calories`` when the model supplied it, otherwise multiplies the
        per-serving estimate by ``servings``. Returns None when neither is usable.
        """
        if self.total_calories:
            return self.total_calories
        per_serving = _parse_number(self.calories_per_serving)
        if per_serving is None:
            return None
        return _format_number(per_serving * self.servings)


class RecipeRequest(BaseModel):
    """Inputs for one analysis call, built at submission time and discarded after."""

    model_config = ConfigDict(str_strip_whitespace=True)

    image_base64: Annotated[str, Field(min_length=1, description="Base64 image data without data-URL prefix")]
    mime_type: Annotated[str, Field(min_length=1, description='Image media type, e.g. "image/jpeg"')]
    servings: Annotated[int, Field(ge=1, description="Requested serving count")]

    @field_validator("image_base64", mode="before")
    @classmethod
    def strip_data_url_prefix(cls, value: Any) -> Any:
        """Drop a ``data:<type>;base64,`` prefix if the caller passed a data URL."""
        if isinstance(value, str) and value.startswith("data:") and "," in value:
            return value.split(",", 1)[1]
        return value


class UploadedImage(BaseModel):
    """Image file selected by the user, held in memory."""

    filename: Annotated[str, Field(min_length=1)]
    mime_type: Annotated[str, Field(description="Detected media type, must be image/*")]
    data: Annotated[bytes, Field(min_length=1, repr=False)]

    @field_validator("mime_type")
    @classmethod
    def require_image_type(cls, value: str) -> str:
        if not value.startswith("image/"):
            raise ValueError(f"Only image files are supported, got: {value}")
        return value
