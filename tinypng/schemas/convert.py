"""Pydantic schemas for format conversion."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .base import API_MODEL_CONFIG

BACKGROUND_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class ConvertImageFormat(str, Enum):
    """Target formats, spelled the way the API expects them."""

    # The API picks the smallest of the supported formats.
    WILDCARD = "*/*"
    WEBP = "image/webp"
    JPEG = "image/jpeg"
    PNG = "image/png"


class ConvertType(BaseModel):
    model_config = API_MODEL_CONFIG

    type: ConvertImageFormat


class Transform(BaseModel):
    """Background applied when converting a transparent image to an opaque format."""

    model_config = API_MODEL_CONFIG

    background: str = Field(
        ...,
        pattern=BACKGROUND_PATTERN,
        description="Hex colour including the hash, e.g. #000FFF",
        examples=["#FFFFFF", "#000FFF"]
    )


class ConvertRequest(BaseModel):
    """Request body for a convert operation."""

    model_config = API_MODEL_CONFIG

    convert: ConvertType
    transform: Optional[Transform] = None
