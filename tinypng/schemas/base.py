"""JSON serialization configuration shared by the request and response schemas."""
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# camelCase field names on the wire, snake_case in Python.
API_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
)


def dump_body(model: BaseModel) -> Dict[str, Any]:
    """Serialize a request model to a JSON-compatible dict.

    Enums are written by their string value and unset optional fields are
    left out of the body.
    """
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)
