"""
Recognition configuration resolved once per environment.

The capture pipeline receives a RecognitionConfig at construction time
instead of branching on the platform itself.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from core.constants import (
    DEFAULT_RECOGNITION_PARAMS,
    JPEG_QUALITY,
    PLATFORM_TIERS,
    STORAGE_MAX_EDGE,
    TIER_LIMITS
)


@dataclass(frozen=True)
class RecognitionConfig:
    """Raster caps and candidate policy for one platform tier."""
    tier: str = 'standard'
    max_editor_edge: int = 2200
    max_ocr_edge: int = 1400
    max_ocr_pixels: int = 1_500_000
    expansion_ratios: Tuple[float, ...] = (1.2, 1.4)
    include_full_image: bool = True
    storage_max_edge: int = STORAGE_MAX_EDGE
    editor_quality: float = JPEG_QUALITY['editor']
    storage_quality: float = JPEG_QUALITY['storage']
    recognition_quality: float = JPEG_QUALITY['recognition']
    min_text_length: int = DEFAULT_RECOGNITION_PARAMS['min_text_length']
    max_result_chars: int = DEFAULT_RECOGNITION_PARAMS['max_result_chars']
    candidate_pause: float = DEFAULT_RECOGNITION_PARAMS['candidate_pause']
    request_timeout: float = DEFAULT_RECOGNITION_PARAMS['request_timeout']

    @classmethod
    def for_tier(cls, tier: str, **overrides) -> 'RecognitionConfig':
        """
        Build the configuration for a platform tier.

        Args:
            tier: "standard" or "constrained"
            **overrides: Field values replacing the tier defaults

        Returns:
            RecognitionConfig instance
        """
        if tier not in PLATFORM_TIERS:
            raise ValueError(
                f"Unknown platform tier '{tier}', expected one of {PLATFORM_TIERS}"
            )
        limits = dict(TIER_LIMITS[tier])
        limits.update(overrides)
        return cls(tier=tier, **limits)

    @classmethod
    def standard(cls, **overrides) -> 'RecognitionConfig':
        return cls.for_tier('standard', **overrides)

    @classmethod
    def constrained(cls, **overrides) -> 'RecognitionConfig':
        return cls.for_tier('constrained', **overrides)


def resolve_recognition_config(settings: Optional[object] = None) -> RecognitionConfig:
    """
    Resolve the recognition configuration from application settings.

    Args:
        settings: Settings instance (defaults to config.settings.settings)

    Returns:
        RecognitionConfig for the configured tier
    """
    if settings is None:
        from config.settings import settings as app_settings
        settings = app_settings

    return RecognitionConfig.for_tier(
        settings.platform_tier.strip().lower(),
        request_timeout=settings.ocr_request_timeout
    )
