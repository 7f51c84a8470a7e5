"""Tests for storing compressed images in Amazon S3."""
import pytest

from tinypng import AmazonS3Configuration, InvalidOperationError, TinyPngApiError

from conftest import OUTPUT_URL, S3_LOCATION, make_client

ACCESS_KEY_ID = "lolwat"
SECRET_ACCESS_KEY = "lolwat"


@pytest.fixture
def amazon_settings():
    return AmazonS3Configuration(ACCESS_KEY_ID, SECRET_ACCESS_KEY, "tinypng-test-bucket", "ap-southeast-2")


class TestAmazonS3Configuration:
    """Tests for AmazonS3Configuration."""

    def test_store_payload(self, amazon_settings):
        """Test the payload sent under the 'store' key."""
        amazon_settings.path = "path.jpg"

        assert amazon_settings.to_store_payload() == {
            "service": "s3",
            "aws_access_key_id": ACCESS_KEY_ID,
            "aws_secret_access_key": SECRET_ACCESS_KEY,
            "region": "ap-southeast-2",
            "path": "tinypng-test-bucket/path.jpg",
        }

    def test_clone_is_independent(self, amazon_settings):
        """Test that overriding a clone leaves the original untouched."""
        amazon_settings.path = "original.jpg"

        clone = amazon_settings.clone()
        clone.path = "other.jpg"
        clone.region = "us-west-1"
        clone.bucket = "other-bucket"

        assert amazon_settings.path == "original.jpg"
        assert amazon_settings.region == "ap-southeast-2"
        assert amazon_settings.bucket == "tinypng-test-bucket"
        assert clone.aws_access_key_id == amazon_settings.aws_access_key_id
        assert clone.aws_secret_access_key == amazon_settings.aws_secret_access_key

    def test_service_is_not_a_field(self, amazon_settings):
        """Test that the service discriminator is a constant, not a setting."""
        assert "SERVICE" not in AmazonS3Configuration.model_fields
        assert AmazonS3Configuration.SERVICE == "s3"


class TestStoreToS3:
    """Tests for TinyPngClient.store_to_s3."""

    @pytest.mark.asyncio
    async def test_store_with_settings(self, handler, cat, amazon_settings):
        """Test storing with explicit settings returns the Location header."""
        client = make_client(handler.compress().s3())
        result = await client.compress(cat)

        location = await client.store_to_s3(result, "path.jpg", amazon_settings)

        assert location == S3_LOCATION
        assert str(handler.requests[1].url) == OUTPUT_URL
        assert handler.json_body() == {
            "store": {
                "service": "s3",
                "aws_access_key_id": ACCESS_KEY_ID,
                "aws_secret_access_key": SECRET_ACCESS_KEY,
                "region": "ap-southeast-2",
                "path": "tinypng-test-bucket/path.jpg",
            }
        }

    @pytest.mark.asyncio
    async def test_store_does_not_modify_explicit_settings(self, handler, cat, amazon_settings):
        """Test that the caller's settings object is not changed."""
        client = make_client(handler.compress().s3())
        result = await client.compress(cat)

        await client.store_to_s3(result, "path.jpg", amazon_settings)

        assert amazon_settings.path is None

    @pytest.mark.asyncio
    async def test_store_with_defaults(self, handler, cat, amazon_settings):
        """Test storing with the client's default settings."""
        client = make_client(handler.compress().s3(), amazon_s3_configuration=amazon_settings)

        location = await client.store_to_s3(client.compress(cat), "path.jpg")

        assert location == S3_LOCATION
        assert handler.json_body()["store"]["path"] == "tinypng-test-bucket/path.jpg"

    @pytest.mark.asyncio
    async def test_store_with_overrides(self, handler, cat, amazon_settings):
        """Test that overrides apply to this call only."""
        client = make_client(handler.compress().s3(), amazon_s3_configuration=amazon_settings)
        result = await client.compress(cat)

        await client.store_to_s3(
            result, "path.jpg", bucket_override="other-bucket", region_override="us-west-1"
        )

        store = handler.json_body()["store"]
        assert store["path"] == "other-bucket/path.jpg"
        assert store["region"] == "us-west-1"
        assert client.amazon_s3_configuration.bucket == "tinypng-test-bucket"
        assert client.amazon_s3_configuration.region == "ap-southeast-2"
        assert client.amazon_s3_configuration.path is None

    @pytest.mark.asyncio
    async def test_store_without_configuration(self, handler, cat):
        """Test that storing without any settings is an invalid operation."""
        client = make_client(handler.compress().s3())
        result = await client.compress(cat)

        with pytest.raises(InvalidOperationError, match="has not been configured"):
            client.store_to_s3(result, "bucket/path.jpg")
        with pytest.raises(InvalidOperationError):
            client.store_to_s3(result, "")

        # Only the compression reached the API
        assert len(handler.requests) == 1

    def test_store_requires_result(self, handler, amazon_settings):
        """Test that a missing result fails before any request."""
        client = make_client(handler.compress().s3(), amazon_s3_configuration=amazon_settings)

        with pytest.raises(ValueError, match="Compress result cannot be None"):
            client.store_to_s3(None, "bucket/path.jpg")
        with pytest.raises(ValueError):
            client.store_to_s3(None, "path.jpg", amazon_settings)

    @pytest.mark.asyncio
    async def test_store_requires_path(self, handler, cat, amazon_settings):
        """Test that an empty path fails when settings are available."""
        client = make_client(handler.compress().s3(), amazon_s3_configuration=amazon_settings)
        result = await client.compress(cat)

        with pytest.raises(ValueError, match="path cannot be empty"):
            client.store_to_s3(result, "")
        with pytest.raises(ValueError, match="path cannot be empty"):
            client.store_to_s3(result, "", amazon_settings)

    @pytest.mark.asyncio
    async def test_store_api_error(self, handler, cat, amazon_settings):
        """Test that a failed store raises TinyPngApiError."""
        client = make_client(handler.compress().s3_and_fail())
        result = await client.compress(cat)

        with pytest.raises(TinyPngApiError) as exc_info:
            await client.store_to_s3(result, "path.jpg", amazon_settings)

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_title == "Stuff's on fire yo!"

    @pytest.mark.asyncio
    async def test_store_without_location(self, handler, cat, amazon_settings):
        """Test that a response without Location yields None."""
        handler.compress().add_fake_response("POST", OUTPUT_URL, status_code=200)
        client = make_client(handler)
        result = await client.compress(cat)

        assert await client.store_to_s3(result, "path.jpg", amazon_settings) is None

    @pytest.mark.asyncio
    async def test_rejected_store_leaves_pending_usable(self, handler, cat, amazon_settings):
        """Test that a rejected store does not consume the pending compression."""
        client = make_client(handler.compress().s3())
        pending = client.compress(cat)

        with pytest.raises(InvalidOperationError):
            client.store_to_s3(pending, "path.jpg")
        with pytest.raises(ValueError, match="path cannot be empty"):
            client.store_to_s3(pending, "", amazon_settings)

        location = await client.store_to_s3(pending, "path.jpg", amazon_settings)

        assert location == S3_LOCATION
        assert len(handler.requests) == 2
