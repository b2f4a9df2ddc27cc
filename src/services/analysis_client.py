"""Recipe analysis client for the Gemini generative API.

Sends one food photo plus a serving-scaled instruction to Gemini and turns the
reply into a validated ``RecipeDetails``.

Pipeline (one call per user action, no retries):
1. Fail fast with ConfigurationError when no API key is configured
2. Build the prompt for the requested servings
3. Dispatch image + prompt with a JSON response MIME type
4. Strip an optional markdown fence from the reply
5. Parse and validate into RecipeDetails (FormatError on failure)
6. Normalize "servings" and log any mismatch with the requested count

Every SDK or network failure is classified by classify_error() into one of
the user-facing errors in src.utils.errors.
"""

import asyncio
import base64
import binascii
import json
import math
import re
from typing import Any, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from src.models.models import RecipeDetails
from src.prompts.prompts import get_recipe_analysis_prompt
from src.utils.config import config
from src.utils.errors import (
    AuthError,
    ConfigurationError,
    FormatError,
    InputValidationError,
    RecipeAnalysisError,
    TransportError,
)
from src.utils.logger import logger


# Longest slice of a raw reply that may appear in an error message
RAW_EXCERPT_LENGTH = 200

_FENCE_PATTERN = re.compile(r"^```(?:[\w+-]+)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

_AUTH_MARKERS = ("API_KEY_INVALID", "API key not valid", "API key expired")
_AUTH_STATUSES = ("UNAUTHENTICATED", "PERMISSION_DENIED")


if not config.has_api_key:
    logger.error("GEMINI_API_KEY environment variable is not set. Recipe analysis will fail until it is configured.")


def strip_code_fence(text: str) -> str:
    """Remove a leading/trailing markdown code fence, with optional language tag.

    Args:
        text: Raw reply text, e.g. "```json\\n{...}\\n```".

    Returns:
        Inner text when fenced, otherwise the input with surrounding whitespace removed.
    """
    stripped = (text or "").strip()
    match = _FENCE_PATTERN.match(stripped)
    if match and match.group(1):
        return match.group(1).strip()
    return stripped


def excerpt(text: Optional[str], limit: int = RAW_EXCERPT_LENGTH) -> str:
    """Truncate raw reply text for diagnostics (never the full payload)."""
    text = text or ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def normalize_servings(value: Any, requested: int) -> int:
    """Coerce the reply's "servings" into a positive integer.

    Numbers pass through; numeric strings are converted. Anything else, and any
    non-positive or fractional value, falls back to the requested count.

    Args:
        value: Raw "servings" value from the parsed reply.
        requested: Serving count sent with the request.

    Returns:
        Positive integer serving count.
    """
    number: Optional[float]
    if isinstance(value, bool):
        number = None
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except (TypeError, ValueError):
            number = None

    if number is None or not math.isfinite(number) or number < 1 or not number.is_integer():
        logger.warning(f"Gemini returned unusable servings {value!r}; using requested {requested}")
        return requested
    return int(number)


def parse_recipe_response(raw_text: Optional[str], requested_servings: int) -> RecipeDetails:
    """Parse a raw Gemini reply into a validated RecipeDetails.

    Args:
        raw_text: Reply text, optionally wrapped in a markdown fence.
        requested_servings: Serving count sent with the request.

    Returns:
        Validated RecipeDetails. Its ``servings`` is the service's value, even if it
        differs from the requested count (the mismatch is logged).

    Raises:
        FormatError: If the text is not a JSON object matching RecipeDetails.
    """
    json_text = strip_code_fence(raw_text or "")

    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response from Gemini: {e}. Raw text: {excerpt(raw_text)}")
        raise FormatError(excerpt(raw_text)) from e

    if not isinstance(parsed, dict):
        logger.error(f"Gemini response is JSON but not an object: {type(parsed).__name__}")
        raise FormatError(excerpt(raw_text))

    parsed["servings"] = normalize_servings(parsed.get("servings"), requested_servings)
    if parsed["servings"] != requested_servings:
        logger.warning(
            f"Gemini returned servings {parsed['servings']}, expected {requested_servings}. "
            "Using Gemini's value."
        )

    try:
        return RecipeDetails.model_validate(parsed)
    except ValidationError as e:
        logger.error(f"Gemini response does not match recipe schema ({e.error_count()} errors): {e}")
        raise FormatError(excerpt(raw_text)) from e


def classify_error(exc: Exception) -> RecipeAnalysisError:
    """Map an SDK/network exception to a user-facing analysis error.

    Args:
        exc: Exception raised while calling Gemini.

    Returns:
        AuthError when the credential was rejected, the error itself when it is
        already classified, TransportError otherwise.
    """
    if isinstance(exc, RecipeAnalysisError):
        return exc

    text = str(exc)
    if any(marker in text for marker in _AUTH_MARKERS):
        return AuthError()
    if isinstance(exc, genai_errors.APIError):
        if exc.code in (401, 403) or exc.status in _AUTH_STATUSES:
            return AuthError()
    return TransportError()


class RecipeAnalysisClient:
    """Gemini-backed recipe analyzer.

    Args:
        api_key: Gemini API key. Defaults to config.GEMINI_API_KEY.
        model: Model id. Defaults to config.GEMINI_MODEL.
        client: Pre-built ``genai.Client`` (mainly for tests). Created lazily otherwise.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[genai.Client] = None,
    ) -> None:
        self.api_key = config.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or config.GEMINI_MODEL
        self._client = client

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    @staticmethod
    def _build_image_part(image_base64: str, mime_type: str) -> types.Part:
        try:
            image_bytes = base64.b64decode(image_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InputValidationError("The selected image could not be decoded. Please upload it again.") from e
        return types.Part.from_bytes(data=image_bytes, mime_type=mime_type)

    async def analyze(self, image_base64: str, mime_type: str, servings: int) -> RecipeDetails:
        """Analyze a food photo and return a recipe scaled to ``servings``.

        Args:
            image_base64: Base64 image data without data-URL prefix.
            mime_type: Image media type, e.g. "image/jpeg".
            servings: Requested serving count (validated by the caller).

        Returns:
            Validated RecipeDetails.

        Raises:
            ConfigurationError: No API key configured (no request is made).
            AuthError: API key rejected by Gemini.
            TransportError: Any other network or service failure.
            FormatError: Reply could not be parsed as a recipe.
            InputValidationError: Image data is not valid base64.
        """
        if not self.api_key:
            logger.error("Recipe analysis requested without a configured Gemini API key")
            raise ConfigurationError()

        image_part = self._build_image_part(image_base64, mime_type)
        prompt = get_recipe_analysis_prompt(servings)

        logger.info(f"Requesting recipe analysis from {self.model} ({mime_type}, servings={servings})")
        try:
            client = self._get_client()
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=self.model,
                contents=[image_part, prompt],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    temperature=config.TEMPERATURE,
                ),
            )
            raw_text = response.text
        except Exception as e:
            logger.error(f"Error calling Gemini API: {e}")
            raise classify_error(e) from e

        recipe = parse_recipe_response(raw_text, servings)
        logger.info(
            f"Recipe analysis complete: {recipe.dish_name} "
            f"({len(recipe.ingredients)} ingredients, {len(recipe.preparation_steps)} steps)"
        )
        return recipe
