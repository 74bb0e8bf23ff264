"""
Configuration management using Pydantic Settings.

Environment variables:
- PLATFORM_TIER: "standard" or "constrained" (raster caps and OCR passes)
- OCR_ENDPOINT_URL: URL of the ocr-question endpoint used by the client
- OCR_ACCESS_TOKEN: Bearer token forwarded to the ocr-question endpoint
- OCR_REQUEST_TIMEOUT: Seconds before a single recognition call is abandoned
- VISION_API_KEY / VISION_BASE_URL / VISION_MODEL: OpenAI-compatible vision model
"""
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Device tier
    platform_tier: str = Field(default="standard", env="PLATFORM_TIER")

    # Recognition endpoint (client side)
    ocr_endpoint_url: str = Field(
        default="http://localhost:8003/ocr-question",
        env="OCR_ENDPOINT_URL"
    )
    ocr_access_token: Optional[str] = Field(default=None, env="OCR_ACCESS_TOKEN")
    ocr_request_timeout: float = Field(default=15.0, env="OCR_REQUEST_TIMEOUT")

    # Vision model (server side)
    vision_api_key: Optional[str] = Field(default=None, env="VISION_API_KEY")
    vision_base_url: str = Field(
        default="https://api.openai.com/v1",
        env="VISION_BASE_URL"
    )
    vision_model: str = Field(default="gpt-4o-mini", env="VISION_MODEL")
    vision_temperature: float = Field(default=0.2, env="VISION_TEMPERATURE")
    vision_max_tokens: int = Field(default=800, env="VISION_MAX_TOKENS")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", env="API_HOST")
    api_port: int = Field(default=8003, env="API_PORT")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def get_endpoint_config(self) -> dict:
        """Get recognition endpoint configuration as dictionary."""
        return {
            'endpoint_url': self.ocr_endpoint_url,
            'access_token': self.ocr_access_token,
            'timeout': self.ocr_request_timeout,
        }

    def get_vision_config(self) -> dict:
        """Get vision model configuration as dictionary."""
        return {
            'api_key': self.vision_api_key,
            'base_url': self.vision_base_url,
            'model': self.vision_model,
            'temperature': self.vision_temperature,
            'max_tokens': self.vision_max_tokens,
        }


# Global settings instance
settings = Settings()
