"""Interactive analysis session (one per user).

AnalysisSession owns the state behind the upload form: the selected image, its
base64 encoding, the serving count, the busy flag, and the current result or
error. User actions map to three transitions:

- upload_image(): encode a new image, invalidating any previous result
- set_serving_count(): clamp the serving count to a minimum of 1
- submit(): run one analysis through the injected analyzer

Per submission: idle → busy → success | failed. A new upload or submit returns
the session to an idle-equivalent state. Only one submission is expected in
flight; the caller disables its submit trigger while ``is_loading`` is set.
"""

import asyncio
import uuid
from enum import Enum
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from src.models.models import RecipeDetails, RecipeRequest, UploadedImage
from src.services.analysis_client import RecipeAnalysisClient
from src.utils.config import config
from src.utils.errors import ImageProcessingError, InputValidationError, RecipeAnalysisError
from src.utils.images import encode_image
from src.utils.logger import logger


MIN_SERVINGS = 1


class RecipeAnalyzer(Protocol):
    """Anything that can turn an encoded photo into a recipe."""

    async def analyze(self, image_base64: str, mime_type: str, servings: int) -> RecipeDetails: ...


class AnalysisStatus(str, Enum):
    IDLE = "idle"
    BUSY = "busy"
    SUCCESS = "success"
    FAILED = "failed"


class AnalysisSession:
    """State and transitions for one user's photo-to-recipe workflow.

    Args:
        analyzer: Recipe analyzer to call on submit. Defaults to a Gemini-backed
            RecipeAnalysisClient.
    """

    def __init__(self, analyzer: Optional[RecipeAnalyzer] = None) -> None:
        self.analyzer: RecipeAnalyzer = analyzer or RecipeAnalysisClient()
        self.uploaded_image: Optional[UploadedImage] = None
        self.image_base64: Optional[str] = None
        self.servings: int = config.DEFAULT_SERVINGS
        self.recipe: Optional[RecipeDetails] = None
        self.error: Optional[RecipeAnalysisError] = None
        self.is_loading: bool = False
        self.requested_servings: Optional[int] = None
        # Bumped on every upload; results from an older upload are dropped
        self._upload_generation = 0

    @property
    def status(self) -> AnalysisStatus:
        if self.is_loading:
            return AnalysisStatus.BUSY
        if self.error is not None:
            return AnalysisStatus.FAILED
        if self.recipe is not None:
            return AnalysisStatus.SUCCESS
        return AnalysisStatus.IDLE

    @property
    def can_submit(self) -> bool:
        """Whether the submit trigger should be enabled."""
        return not self.is_loading and self.uploaded_image is not None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    @property
    def servings_mismatch(self) -> bool:
        """True when the returned recipe is scaled to a different serving count than requested."""
        if self.recipe is None or self.requested_servings is None:
            return False
        return self.recipe.servings != self.requested_servings

    def _clear_image(self) -> None:
        self.uploaded_image = None
        self.image_base64 = None

    async def upload_image(self, image: UploadedImage) -> None:
        """Select a new image and encode it for transport.

        Clears any previous result and error before encoding. On failure all
        image-derived state is cleared and an ImageProcessingError is stored.

        Args:
            image: Image selected by the user.
        """
        self._upload_generation += 1
        generation = self._upload_generation

        self.uploaded_image = image
        self.image_base64 = None
        self.recipe = None
        self.error = None
        self.requested_servings = None

        try:
            encoded = await asyncio.to_thread(encode_image, image.data)
        except ImageProcessingError as e:
            if generation != self._upload_generation:
                return
            logger.error(f"Error converting {image.filename} to base64: {e.message}")
            self._clear_image()
            self.error = e
            return
        except Exception as e:
            if generation != self._upload_generation:
                return
            logger.error(f"Unexpected error encoding {image.filename}: {e}", exc_info=True)
            self._clear_image()
            self.error = ImageProcessingError()
            return

        if generation != self._upload_generation:
            logger.debug(f"Discarding encoded {image.filename}: a newer image was uploaded")
            return

        self.image_base64 = encoded
        logger.info(f"Image ready: {image.filename} ({image.mime_type}, {len(image.data) / 1024:.1f}KB)")

    def set_serving_count(self, value: Any) -> int:
        """Set the serving count, clamped to at least 1.

        Args:
            value: Requested count as int or numeric string. Non-numeric input resets to 1.

        Returns:
            The serving count now in effect.
        """
        try:
            count = int(value)
        except (TypeError, ValueError, OverflowError):
            try:
                count = int(float(value))
            except (TypeError, ValueError, OverflowError):
                count = MIN_SERVINGS
        self.servings = max(MIN_SERVINGS, count)
        return self.servings

    async def submit(self) -> Optional[RecipeDetails]:
        """Run one analysis for the current image and serving count.

        Never raises: the outcome is stored in ``recipe`` or ``error``. The busy flag
        is always cleared once the call settles.

        Returns:
            The recipe on success, None otherwise.
        """
        if self.uploaded_image is None or not self.image_base64:
            self.error = InputValidationError("Please upload an image first.")
            return None
        if self.servings < MIN_SERVINGS:
            self.error = InputValidationError("Number of servings must be at least 1.")
            return None

        try:
            request = RecipeRequest(
                image_base64=self.image_base64,
                mime_type=self.uploaded_image.mime_type,
                servings=self.servings,
            )
        except ValidationError as e:
            logger.warning(f"Submission rejected: {e.error_count()} validation error(s)")
            self.error = InputValidationError("The selected image or serving count is invalid.")
            return None

        generation = self._upload_generation
        log_extra = {"analysis_id": uuid.uuid4().hex[:8]}

        self.is_loading = True
        self.error = None
        self.recipe = None
        self.requested_servings = request.servings

        logger.info(f"Analyzing {self.uploaded_image.filename} for {request.servings} serving(s)", extra=log_extra)
        try:
            recipe = await self.analyzer.analyze(request.image_base64, request.mime_type, request.servings)
        except RecipeAnalysisError as e:
            logger.error(f"Analysis failed ({type(e).__name__}): {e.message}", extra=log_extra)
            if generation == self._upload_generation:
                self.error = e
            return None
        except Exception as e:
            logger.error(f"Unexpected analysis failure: {e}", exc_info=True, extra=log_extra)
            if generation == self._upload_generation:
                self.error = RecipeAnalysisError()
            return None
        finally:
            self.is_loading = False

        if generation != self._upload_generation:
            logger.info("Ignoring analysis result for a replaced image", extra=log_extra)
            return None

        self.recipe = recipe
        if self.servings_mismatch:
            logger.warning(
                f"Recipe is scaled to {recipe.servings} serving(s), requested {request.servings}",
                extra=log_extra,
            )
        logger.info(f"Analysis succeeded: {recipe.dish_name}", extra=log_extra)
        return recipe
