"""Pydantic schemas for metadata preservation."""
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from .base import API_MODEL_CONFIG


class PreserveMetadata(str, Enum):
    """Metadata the API can copy from the original image to the compressed one."""

    COPYRIGHT = "copyright"
    CREATION = "creation"
    LOCATION = "location"


class PreserveRequest(BaseModel):
    """Request body for a preserve operation."""

    model_config = API_MODEL_CONFIG

    preserve: List[PreserveMetadata] = Field(
        ...,
        min_length=1,
        description="Metadata to keep",
        examples=[["copyright", "creation"]]
    )
