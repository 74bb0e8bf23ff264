"""
Adaptive multi-pass question recognition.

Tries an escalating sequence of crops (the user's crop, expanded crops,
the full image) and stops at the first result that looks like a complete
question. Only weak text advances to the next candidate; recognizer
errors end the sequence.
"""
import asyncio
from typing import List, Optional

from PIL import Image

from config.recognition import RecognitionConfig
from core.constants import MESSAGES
from core.exceptions import RecognitionError
from core.models import FULL_IMAGE_CROP, CropBox, OcrCandidate, OcrResult, RenderGeometry
from utils.bbox_utils import expand_crop
from utils.image_utils import export_recognition_crop, to_data_url
from utils.text_utils import looks_valid_ocr_text
from .ocr_service import BaseRecognizer


def build_candidates(crop: CropBox, config: RecognitionConfig) -> List[OcrCandidate]:
    """
    Build the ordered candidate list for a crop.

    Args:
        crop: User's current crop box
        config: Recognition configuration (expansion ratios per tier)

    Returns:
        Candidates from smallest to largest region
    """
    candidates = [OcrCandidate(label='crop', box=crop)]
    for ratio in config.expansion_ratios:
        candidates.append(
            OcrCandidate(label=f'expand-{ratio:g}', box=expand_crop(crop, ratio))
        )
    if config.include_full_image:
        candidates.append(OcrCandidate(label='full', box=FULL_IMAGE_CROP))
    return candidates


class RecognitionPipeline:
    """Runs the candidate sequence against a recognizer."""

    def __init__(
        self,
        recognizer: BaseRecognizer,
        config: Optional[RecognitionConfig] = None,
        logger=None
    ):
        """
        Initialize the pipeline.

        Args:
            recognizer: Recognizer used for every candidate
            config: Recognition configuration (defaults to the standard tier)
            logger: Optional logger
        """
        self.recognizer = recognizer
        self.config = config or RecognitionConfig.standard()
        self.logger = logger

    async def recognize_candidate(
        self,
        image: Image.Image,
        candidate: OcrCandidate,
        geometry: RenderGeometry
    ) -> str:
        """
        Rasterize one candidate and recognize it.

        Raises:
            RecognitionError: If the recognizer fails or times out
        """
        data = export_recognition_crop(
            image,
            candidate.box,
            geometry,
            max_edge=self.config.max_ocr_edge,
            max_pixels=self.config.max_ocr_pixels,
            quality=self.config.recognition_quality
        )
        try:
            text = await asyncio.wait_for(
                self.recognizer.recognize_question(to_data_url(data)),
                timeout=self.config.request_timeout
            )
        except asyncio.TimeoutError as e:
            raise RecognitionError(MESSAGES['timeout']) from e
        return text or ''

    async def run(
        self,
        image: Image.Image,
        crop: CropBox,
        geometry: RenderGeometry
    ) -> OcrResult:
        """
        Recognize the question inside a crop, widening the crop when needed.

        Args:
            image: Decoded editor image
            crop: User's crop box
            geometry: On-screen element size

        Returns:
            OcrResult with the first valid text, or the longest text seen
            (possibly empty) when no candidate passed the heuristic
        """
        max_chars = self.config.max_result_chars
        best_text = ''
        best_label = None
        attempts = 0

        for candidate in build_candidates(crop, self.config):
            text = await self.recognize_candidate(image, candidate, geometry)
            attempts += 1

            if self.config.candidate_pause > 0:
                await asyncio.sleep(self.config.candidate_pause)

            if looks_valid_ocr_text(text, self.config.min_text_length):
                if self.logger:
                    self.logger.info(
                        f"Accepted OCR candidate '{candidate.label}' after {attempts} attempt(s)"
                    )
                return OcrResult(
                    text=text[:max_chars],
                    is_valid=True,
                    attempts=attempts,
                    candidate_label=candidate.label
                )

            if self.logger:
                self.logger.info(
                    f"Rejected OCR candidate '{candidate.label}' ({len(text)} chars)"
                )
            if len(text) > len(best_text):
                best_text = text
                best_label = candidate.label

        return OcrResult(
            text=best_text[:max_chars],
            is_valid=False,
            attempts=attempts,
            candidate_label=best_label
        )
