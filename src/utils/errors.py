"""Error taxonomy for recipe analysis.

Every failure shown to the user is a ``RecipeAnalysisError`` subclass carrying a
user-safe ``message``. Raw SDK exceptions and full model replies never reach the
session state; they are logged and chained with ``raise ... from``.
"""

from typing import Optional


class RecipeAnalysisError(Exception):
    """Base class for user-visible analysis failures."""

    default_message = "An unknown error occurred during analysis."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(RecipeAnalysisError):
    """API credential is missing; raised before any network attempt."""

    default_message = (
        "Gemini API key is not configured. Please set the GEMINI_API_KEY environment variable."
    )


class AuthError(RecipeAnalysisError):
    """API credential is present but was rejected by the service."""

    default_message = "The Gemini API key is invalid or missing. Please check your configuration."


class TransportError(RecipeAnalysisError):
    """Network or service failure not classified more specifically."""

    default_message = (
        "Failed to get analysis from AI. Please check your connection or API key and try again."
    )


class FormatError(RecipeAnalysisError):
    """Reply received but not parseable as a recipe.

    The message includes a short excerpt of the raw reply, never the full text.
    """

    def __init__(self, raw_excerpt: str) -> None:
        self.raw_excerpt = raw_excerpt
        super().__init__(
            "The AI's response was not in the expected recipe format. "
            "Please try again, or try a clearer photo if the dish is complex. "
            f"Raw response: {raw_excerpt}"
        )


class InputValidationError(RecipeAnalysisError):
    """Local, pre-request validation failure (missing image, bad serving count)."""

    default_message = "Please upload an image first."


class ImageProcessingError(InputValidationError):
    """Selected file could not be read or encoded as an image."""

    default_message = "Failed to process image. Please try another one."
