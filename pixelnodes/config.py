"""Application configuration."""

from pydantic import field_validator
from pydantic_settings import BaseSettings

SUPPORTED_IMAGE_FILETYPES = ["png", "bmp", "jpg", "jpeg", "gif"]
"List of image file types which can be read and written"


class Settings(BaseSettings):
    """Application settings."""

    # Artifacts
    IMAGE_EXTENSION: str = "png"  # Extension used when writing images by stem
    INTERMEDIATE_PREFIX: str = "output"  # Intermediate artifacts: output1, output2, ...
    FINAL_OUTPUT_NAME: str = "finalOutput"

    # Parsing
    STRICT_KEYWORDS: bool = False  # Unknown keywords raise instead of falling back

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = {"env_prefix": "PIXELNODES_"}

    @field_validator("IMAGE_EXTENSION")
    @classmethod
    def check_image_extension(cls, value: str) -> str:
        extension = value.lstrip(".").lower()
        if extension not in SUPPORTED_IMAGE_FILETYPES:
            raise ValueError(
                f"Unsupported image extension {value!r}, "
                f"expected one of {', '.join(SUPPORTED_IMAGE_FILETYPES)}"
            )
        return extension


settings = Settings()
