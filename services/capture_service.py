"""
Capture Service - Orchestrates the question capture workflow.

Loads a photo into the crop editor, tracks the crop box through pointer
gestures, runs adaptive recognition and produces the final capture.
"""
from typing import Optional, Tuple

from config.recognition import RecognitionConfig
from core.constants import MESSAGES
from core.exceptions import ImageDecodeError, ImageNotReadyError, RecognitionError
from core.models import CaptureResult, CropBox, DragMode, EditorImage, RenderGeometry
from editor.crop_state import CropEditor, PointerCancel, PointerDown, PointerMove, PointerUp
from utils.image_utils import export_storage_crop, load_editor_image
from utils.text_utils import normalize_math_like_text
from .recognition_pipeline import RecognitionPipeline


class CaptureSession:
    """State of one capture screen: image, crop box and recognition."""

    def __init__(
        self,
        pipeline: RecognitionPipeline,
        config: Optional[RecognitionConfig] = None,
        logger=None
    ):
        """
        Initialize a capture session.

        Args:
            pipeline: Recognition pipeline
            config: Recognition configuration (defaults to the pipeline's)
            logger: Optional logger
        """
        self.pipeline = pipeline
        self.config = config or pipeline.config
        self.logger = logger

        self.editor = CropEditor()
        self.image: Optional[EditorImage] = None
        self.geometry: Optional[RenderGeometry] = None
        self.recognized_question = ''
        self.is_recognizing = False
        self.attempts = 0
        self.error_text = ''

    @property
    def has_image(self) -> bool:
        return self.image is not None

    @property
    def crop(self) -> CropBox:
        return self.editor.crop

    def load_image(self, data: bytes) -> EditorImage:
        """
        Load a new photo, replacing any previous one.

        Resets the crop box and clears recognition state.

        Raises:
            ImageDecodeError: If the data is not a readable image
        """
        self.error_text = ''
        self.recognized_question = ''
        try:
            image = load_editor_image(
                data,
                max_edge=self.config.max_editor_edge,
                quality=self.config.editor_quality
            )
        except ImageDecodeError:
            self.error_text = MESSAGES['read_failed']
            raise

        self.image = image
        self.editor.reset()
        self.attempts = 0
        if self.logger:
            width, height = image.natural_size
            self.logger.info(
                f"Loaded image {width}x{height} (downscaled={image.was_downscaled})"
            )
        return image

    def clear_image(self) -> None:
        """Discard the current photo and its recognition state."""
        self.image = None
        self.editor.reset()
        self.recognized_question = ''
        self.attempts = 0
        self.error_text = ''

    def set_geometry(self, geometry: RenderGeometry) -> None:
        """Record the on-screen size of the displayed image."""
        self.geometry = geometry

    # Pointer gestures

    def pointer_down(
        self,
        client_x: float,
        client_y: float,
        mode: DragMode = DragMode.MOVE
    ) -> CropBox:
        return self.editor.dispatch(PointerDown(client_x, client_y, mode))

    def pointer_move(self, client_x: float, client_y: float) -> CropBox:
        if self.geometry is None:
            return self.editor.crop
        return self.editor.dispatch(PointerMove(
            client_x,
            client_y,
            self.geometry.client_width,
            self.geometry.client_height
        ))

    def pointer_up(self) -> CropBox:
        return self.editor.dispatch(PointerUp())

    def pointer_cancel(self) -> CropBox:
        return self.editor.dispatch(PointerCancel())

    # Recognition

    def _require_layout(self) -> RenderGeometry:
        if self.image is None or self.geometry is None:
            raise ImageNotReadyError("Image not ready")
        return self.geometry

    async def _run_recognition(self, crop: Optional[CropBox] = None) -> Tuple[str, bool]:
        geometry = self._require_layout()
        self.is_recognizing = True
        try:
            result = await self.pipeline.run(self.image.image, crop or self.editor.crop, geometry)
        finally:
            self.is_recognizing = False
        self.attempts += 1
        return normalize_math_like_text(result.text), result.is_valid

    async def recognize(self) -> Optional[str]:
        """
        Recognize the question inside the current crop.

        Ignored (returns None) without an image or while a recognition is
        already in flight.

        Text that failed the validity heuristic on every candidate is still
        kept, with error_text asking the user to adjust the crop.

        Returns:
            Normalized question text, or None if nothing usable was recognized
        """
        if not self.has_image or self.is_recognizing:
            return None

        self.error_text = ''
        try:
            question, is_valid = await self._run_recognition()
        except RecognitionError as e:
            self.error_text = str(e) or MESSAGES['recognition_failed']
            if self.logger:
                self.logger.info(f"Recognition failed: {e}")
            return None

        if not question.strip():
            self.error_text = MESSAGES['incomplete']
            return None

        if not is_valid:
            self.error_text = MESSAGES['partial']
        self.recognized_question = question
        return question

    async def finish(self) -> Optional[CaptureResult]:
        """
        Produce the cropped image and question text for tagging.

        Runs recognition first when no question has been recognized yet.

        Returns:
            CaptureResult, or None with error_text set
        """
        if not self.has_image:
            self.error_text = MESSAGES['no_image']
            return None
        if self.is_recognizing:
            return None

        self.error_text = ''
        # Export, recognition and metadata all use the crop as of this call
        crop = self.editor.crop
        geometry = self._require_layout()
        captured = export_storage_crop(
            self.image.image,
            crop,
            geometry,
            max_edge=self.config.storage_max_edge,
            quality=self.config.storage_quality
        )

        question = self.recognized_question
        if not question.strip():
            try:
                question, is_valid = await self._run_recognition(crop)
            except RecognitionError as e:
                self.error_text = str(e) or MESSAGES['recognition_failed']
                return None
            self.recognized_question = question
            if question.strip() and not is_valid:
                self.error_text = MESSAGES['partial']

        if not question.strip():
            self.error_text = MESSAGES['not_recognized']
            return None

        return CaptureResult(
            captured_image=captured,
            recognized_question=question,
            metadata={
                'crop': crop.to_dict(),
                'attempts': self.attempts,
                'tier': self.config.tier,
            }
        )
