"""Storage service for reading uploaded scripts from Supabase storage."""

from typing import Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ConfigurationError, StorageError
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class StorageService:
    """Service for fetching files from Supabase storage."""

    def __init__(
        self,
        url: Optional[str] = None,
        service_role_key: Optional[str] = None,
        bucket: Optional[str] = None,
    ):
        self.url = url if url is not None else settings.supabase_url
        self.service_role_key = (
            service_role_key if service_role_key is not None else settings.supabase_service_role_key
        )
        self.bucket = bucket or settings.storage.bucket
        self.base_api_url = f"{self.url}/storage/v1"
        self.headers = {
            "Authorization": f"Bearer {self.service_role_key}",
            "apikey": self.service_role_key,
        }

    async def download_file(self, path: str, bucket: Optional[str] = None) -> bytes:
        """Download an object's bytes.

        Args:
            path: Object path within the bucket (the script's storage key).
            bucket: Bucket name; defaults to the configured scripts bucket.

        Returns:
            Raw file content.

        Raises:
            StorageError: If the object is missing or storage is unreachable.
            ConfigurationError: If no storage URL or key is configured.
        """
        if not self.url or not self.service_role_key:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        bucket = bucket or self.bucket
        download_url = f"{self.base_api_url}/object/{bucket}/{path}"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    download_url,
                    headers=self.headers,
                    timeout=settings.http_timeout,
                )
        except httpx.HTTPError as e:
            LOGGER.error(
                f"Error downloading file from Supabase: {str(e)}",
                exc_info=True,
                extra={"bucket": bucket, "path": path},
            )
            raise StorageError(f"Storage download error: {str(e)}", original_error=e)

        if response.status_code != 200:
            LOGGER.error(
                f"Failed to download file from Supabase: {response.text}",
                extra={"bucket": bucket, "path": path, "status_code": response.status_code},
            )
            raise StorageError(
                f"Download failed for {bucket}/{path} with status {response.status_code}"
            )

        LOGGER.debug(
            "Downloaded file from storage",
            extra={"bucket": bucket, "path": path, "size": len(response.content)},
        )
        return response.content
