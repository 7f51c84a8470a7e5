"""Shared fixtures and a fake TinyPNG API for the test suite."""
import io
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from PIL import Image

from tinypng import TinyPngClient

API_KEY = "lolwat"
SHRINK_URL = "https://api.tinify.com/shrink"
OUTPUT_URL = "https://api.tinify.com/output"
S3_LOCATION = "https://s3-ap-southeast-2.amazonaws.com/tinypng-test-bucket/path.jpg"

COMPRESSED_SIZE = 16646
RESIZED_SIZE = 5970
COMPRESSED_CAT = b"\xff\xd8" + b"\x01" * (COMPRESSED_SIZE - 4) + b"\xff\xd9"
RESIZED_CAT = b"\xff\xd8" + b"\x02" * (RESIZED_SIZE - 4) + b"\xff\xd9"

COMPRESS_RESULT = {
    "input": {"size": 18031, "type": "image/jpeg"},
    "output": {
        "size": COMPRESSED_SIZE,
        "type": "image/jpeg",
        "width": 400,
        "height": 400,
        "ratio": 0.9232,
        "url": OUTPUT_URL,
    },
}


class FakeResponseHandler:
    """Fake TinyPNG API keyed by method and URL, for use with httpx.MockTransport.

    Every request is recorded in ``requests``. Unknown routes answer 404 with
    an API style error body.
    """

    def __init__(self):
        self._responses: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []

    def add_fake_response(self, method: str, url: str, **response_kwargs) -> "FakeResponseHandler":
        self._responses[(method, url)] = response_kwargs
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response_kwargs = self._responses.get((request.method, str(request.url)))
        if response_kwargs is None:
            return httpx.Response(
                404,
                json={"error": "NotFound", "message": f"No fake for {request.method} {request.url}"},
            )
        return httpx.Response(**response_kwargs)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    # Canned API behaviour

    def compress(self, compression_count: Optional[str] = "99") -> "FakeResponseHandler":
        headers = {"Location": OUTPUT_URL}
        if compression_count is not None:
            headers["Compression-Count"] = compression_count
        return self.add_fake_response(
            "POST", SHRINK_URL, status_code=201, json=COMPRESS_RESULT, headers=headers
        )

    def compress_and_fail(self) -> "FakeResponseHandler":
        return self.add_fake_response(
            "POST", SHRINK_URL, status_code=400,
            json={"error": "title", "message": "message"},
        )

    def download(self) -> "FakeResponseHandler":
        return self.add_fake_response(
            "GET", OUTPUT_URL, status_code=200, content=COMPRESSED_CAT,
            headers={"Content-Type": "image/jpeg", "Compression-Count": "99"},
        )

    def download_and_fail(self) -> "FakeResponseHandler":
        return self.add_fake_response(
            "GET", OUTPUT_URL, status_code=500,
            json={"error": "Stuff's on fire yo!", "message": "This is the error message"},
        )

    def resize(self) -> "FakeResponseHandler":
        return self.add_fake_response(
            "POST", OUTPUT_URL, status_code=200, content=RESIZED_CAT,
            headers={"Content-Type": "image/jpeg", "Image-Width": "150", "Image-Height": "150"},
        )

    def convert(self, content_type: str = "image/webp") -> "FakeResponseHandler":
        return self.add_fake_response(
            "POST", OUTPUT_URL, status_code=200, content=COMPRESSED_CAT,
            headers={"Content-Type": content_type, "Image-Width": "400", "Image-Height": "400"},
        )

    def s3(self) -> "FakeResponseHandler":
        return self.add_fake_response(
            "POST", OUTPUT_URL, status_code=200, headers={"Location": S3_LOCATION}
        )

    def s3_and_fail(self) -> "FakeResponseHandler":
        return self.add_fake_response(
            "POST", OUTPUT_URL, status_code=400,
            json={"error": "Stuff's on fire yo!", "message": "This is the error message"},
        )


def make_client(handler: FakeResponseHandler, **kwargs) -> TinyPngClient:
    """Create a client whose transport is the fake API."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TinyPngClient(API_KEY, http_client=http_client, **kwargs)


def create_test_jpeg(width: int = 400, height: int = 400) -> bytes:
    """Create a JPEG image of the given size."""
    img = Image.new("RGB", (width, height), color=(200, 120, 40))
    img_bytes = io.BytesIO()
    img.save(img_bytes, format="JPEG")
    return img_bytes.getvalue()


@pytest.fixture
def cat(tmp_path):
    """Path to a 400x400 JPEG on disk."""
    image_path = tmp_path / "cat.jpg"
    image_path.write_bytes(create_test_jpeg())
    return str(image_path)


@pytest.fixture
def handler():
    return FakeResponseHandler()
