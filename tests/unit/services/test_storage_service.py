"""Unit tests for the Supabase storage collaborator."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.core.exceptions import ConfigurationError, StorageError
from app.services.storage_service import StorageService


def mock_client(response=None, error=None):
    client = AsyncMock()
    if error is not None:
        client.get.side_effect = error
    else:
        client.get.return_value = response
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=client)
    context.__aexit__ = AsyncMock(return_value=False)
    return client, context


@pytest.fixture
def storage():
    return StorageService(url="https://example.supabase.co", service_role_key="secret", bucket="scripts")


class TestDownloadFile:
    """Object download over the storage REST API."""

    @pytest.mark.asyncio
    async def test_returns_bytes(self, storage):
        """Test a successful download and the request shape."""
        client, context = mock_client(MagicMock(status_code=200, content=b"<FinalDraft/>"))

        with patch("app.services.storage_service.httpx.AsyncClient", return_value=context):
            data = await storage.download_file("prod/v2.fdx")

        assert data == b"<FinalDraft/>"
        url = client.get.call_args.args[0]
        assert url == "https://example.supabase.co/storage/v1/object/scripts/prod/v2.fdx"
        assert client.get.call_args.kwargs["headers"]["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_explicit_bucket(self, storage):
        """Test that a bucket argument overrides the default."""
        client, context = mock_client(MagicMock(status_code=200, content=b"x"))

        with patch("app.services.storage_service.httpx.AsyncClient", return_value=context):
            await storage.download_file("a.pdf", bucket="archive")

        assert "/object/archive/a.pdf" in client.get.call_args.args[0]

    @pytest.mark.asyncio
    async def test_missing_object_raises(self, storage):
        """Test that a non-200 response raises StorageError."""
        _, context = mock_client(MagicMock(status_code=404, text="not found"))

        with patch("app.services.storage_service.httpx.AsyncClient", return_value=context):
            with pytest.raises(StorageError, match="404"):
                await storage.download_file("missing.pdf")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, storage):
        """Test that connection failures raise StorageError."""
        _, context = mock_client(error=httpx.ConnectError("connection refused"))

        with patch("app.services.storage_service.httpx.AsyncClient", return_value=context):
            with pytest.raises(StorageError) as exc_info:
                await storage.download_file("v1.pdf")

        assert isinstance(exc_info.value.original_error, httpx.ConnectError)


class TestStorageConfiguration:
    """Downloads need a configured storage endpoint."""

    @pytest.mark.asyncio
    async def test_missing_credentials_raise(self):
        """Test that an unconfigured service refuses to download."""
        storage = StorageService(url="", service_role_key="", bucket="scripts")

        with patch("app.services.storage_service.httpx.AsyncClient") as client_cls:
            with pytest.raises(ConfigurationError):
                await storage.download_file("prod/v2.fdx")

        client_cls.assert_not_called()
