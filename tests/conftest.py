"""Shared fixtures for unit tests."""

from io import BytesIO

import pytest
from PIL import Image

from src.models.models import UploadedImage


def make_image_bytes(image_format: str = "PNG", color: str = "orange", size=(8, 8)) -> bytes:
    """Render a tiny solid-colour image in memory."""
    output = BytesIO()
    Image.new("RGB", size, color).save(output, format=image_format)
    return output.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG", color="brown")


@pytest.fixture
def png_upload(png_bytes) -> UploadedImage:
    return UploadedImage(filename="dish.png", mime_type="image/png", data=png_bytes)


@pytest.fixture
def jpeg_upload(jpeg_bytes) -> UploadedImage:
    return UploadedImage(filename="dish.jpg", mime_type="image/jpeg", data=jpeg_bytes)


@pytest.fixture
def recipe_payload() -> dict:
    """A complete camelCase recipe reply for two servings."""
    return {
        "dishName": "Tomato Bruschetta",
        "description": "Grilled bread topped with fresh tomatoes and basil.",
        "servings": 2,
        "caloriesPerServing": "210",
        "totalCalories": "420",
        "nutrientsPerServing": [
            {"name": "Protein", "amount": "5", "unit": "g", "percentDailyValue": "10"},
            {"name": "Total Fat", "amount": "9", "unit": "g"},
        ],
        "ingredients": [
            {"name": "Baguette", "quantity": "4", "unit": "slices"},
            {"name": "Tomato", "quantity": "2", "unit": "medium", "notes": "diced"},
            {"name": "Basil", "quantity": "6", "unit": "leaves"},
        ],
        "preparationSteps": ["Grill the bread.", "Mix tomato and basil.", "Spoon onto bread."],
        "preparationTime": "10 minutes",
        "cookingTime": "5 minutes",
    }
