"""Pydantic schemas for resize operations.

A resize operation is one of three methods understood by the API:

- ``scale``: proportional resize to a target width *or* height.
- ``fit``: proportional resize so the image fits inside width x height.
- ``cover``: proportional resize and crop so the image covers width x height
  exactly. Both dimensions are required.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .base import API_MODEL_CONFIG


class ResizeType(str, Enum):
    """Resize method sent to the API."""

    FIT = "fit"
    SCALE = "scale"
    COVER = "cover"


class ResizeOperation(BaseModel):
    """Resize request for a previously compressed image.

    Zero in a dimension means "not specified" and is left out of the
    request body.
    """

    model_config = API_MODEL_CONFIG

    method: ResizeType = Field(
        ResizeType.FIT,
        description="Resize method"
    )

    width: Optional[int] = Field(
        None,
        ge=0,
        description="Target width in pixels",
        examples=[150]
    )

    height: Optional[int] = Field(
        None,
        ge=0,
        description="Target height in pixels",
        examples=[150]
    )

    @model_validator(mode="after")
    def validate_dimensions(self) -> "ResizeOperation":
        """Check the dimensions against the chosen method."""
        if self.width == 0:
            self.width = None
        if self.height == 0:
            self.height = None

        if self.method == ResizeType.COVER and (self.width is None or self.height is None):
            raise ValueError("Cover resize requires both width and height to be non-zero")

        if self.width is None and self.height is None:
            raise ValueError("A resize operation needs a width or a height")

        if self.method == ResizeType.SCALE and self.width is not None and self.height is not None:
            raise ValueError("Scale resize takes either a width or a height, not both")

        return self


class ScaleWidthResizeOperation(ResizeOperation):
    """Scale the image proportionally to the given width."""

    def __init__(self, width: int, **data):
        super().__init__(method=ResizeType.SCALE, width=width, **data)


class ScaleHeightResizeOperation(ResizeOperation):
    """Scale the image proportionally to the given height."""

    def __init__(self, height: int, **data):
        super().__init__(method=ResizeType.SCALE, height=height, **data)


class FitResizeOperation(ResizeOperation):
    """Scale the image down until it fits inside width x height."""

    def __init__(self, width: int, height: int, **data):
        super().__init__(method=ResizeType.FIT, width=width, height=height, **data)


class CoverResizeOperation(ResizeOperation):
    """Scale and crop the image so it covers exactly width x height."""

    def __init__(self, width: int, height: int, **data):
        super().__init__(method=ResizeType.COVER, width=width, height=height, **data)


class ResizeRequest(BaseModel):
    """Request body for a resize operation."""

    model_config = API_MODEL_CONFIG

    resize: ResizeOperation
