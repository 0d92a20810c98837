"""Object storage collaborators for submitted images.

Only the reference returned by ``upload`` is persisted; the database never
holds image bytes.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from pathlib import Path
from typing import Protocol

import httpx

from photo_contest.core.settings import settings
from photo_contest.services.errors import InvalidImageError, UploadFailedError
from photo_contest.services.imaging import DecodedImage

# Configure logger for this module
logger = logging.getLogger(__name__)

HTTP_BAD_REQUEST = 400


class ImageStorage(Protocol):
    """Interface shared by the storage backends."""

    async def upload(self, image: DecodedImage) -> str:
        """Store the image and return its public reference."""
        ...

    async def delete(self, reference: str) -> None:
        """Remove a previously stored image."""
        ...


def _object_key(image: DecodedImage) -> str:
    return f"{secrets.token_hex(16)}.{image.extension}"


class LocalImageStorage:
    """Store images as files below a directory served under a public prefix."""

    def __init__(self, directory: str | Path, public_base_url: str) -> None:
        self.directory = Path(directory)
        self.public_base_url = public_base_url.rstrip("/")

    async def upload(self, image: DecodedImage) -> str:
        key = _object_key(image)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / key).write_bytes(image.data)
        except OSError as exc:
            logger.error("Writing image %s failed", key, exc_info=True)
            raise UploadFailedError("Image storage is unavailable, please try again") from exc
        return f"{self.public_base_url}/{key}"

    async def delete(self, reference: str) -> None:
        prefix = f"{self.public_base_url}/"
        if not reference.startswith(prefix):
            return
        key = reference[len(prefix):]
        # Keys are flat; anything with a separator was not written here.
        if "/" in key or "\\" in key or key in {"", ".", ".."}:
            return
        (self.directory / key).unlink(missing_ok=True)


class HttpImageStorage:
    """Upload images to an HTTP object-storage endpoint.

    The endpoint accepts a multipart ``POST`` and answers with
    ``{"url": ...}``; ``DELETE`` with a ``url`` query parameter removes it.
    """

    def __init__(self, base_url: str, *, token: str | None = None, timeout_seconds: float = 15.0) -> None:
        self.base_url = base_url
        self.token = token
        self.timeout_seconds = timeout_seconds
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
                self._client = httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=httpx.Timeout(self.timeout_seconds),
                    headers=headers,
                )
        return self._client

    async def upload(self, image: DecodedImage) -> str:
        client = await self._ensure_client()
        key = _object_key(image)
        try:
            response = await client.post(
                "",
                files={"file": (key, image.data, image.content_type)},
            )
        except httpx.HTTPError as exc:
            logger.error("Image upload %s failed", key, exc_info=True)
            raise UploadFailedError("Image storage is unavailable, please try again") from exc

        if response.status_code >= HTTP_BAD_REQUEST:
            logger.error("Image storage rejected %s with status %s", key, response.status_code)
            raise UploadFailedError(f"Image storage rejected the upload ({response.status_code})")

        try:
            url = response.json()["url"]
        except (ValueError, KeyError, TypeError) as exc:
            raise UploadFailedError("Image storage returned no URL for the upload") from exc
        return str(url)

    async def delete(self, reference: str) -> None:
        client = await self._ensure_client()
        try:
            response = await client.delete("", params={"url": reference})
        except httpx.HTTPError as exc:
            raise UploadFailedError(f"Could not delete {reference}") from exc
        if response.status_code >= HTTP_BAD_REQUEST:
            raise UploadFailedError(f"Image storage refused to delete {reference} ({response.status_code})")

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class RemoteImageFetcher:
    """Download images that submitters link instead of embedding.

    The bytes are streamed with a size cap so they can be measured and
    re-hosted in the configured storage; the source URL is never stored.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=httpx.Timeout(self.timeout_seconds),
                    follow_redirects=True,
                    transport=self._transport,
                )
        return self._client

    async def fetch(self, url: str, *, max_bytes: int) -> bytes:
        """Return the body of ``url``.

        Raises:
            InvalidImageError: If the URL cannot be downloaded or is too large
        """
        client = await self._ensure_client()
        chunks: list[bytes] = []
        received = 0
        try:
            async with client.stream("GET", url) as response:
                if response.status_code >= HTTP_BAD_REQUEST:
                    raise InvalidImageError(f"Could not download image ({response.status_code})")
                async for chunk in response.aiter_bytes():
                    received += len(chunk)
                    if received > max_bytes:
                        raise InvalidImageError(f"Image exceeds the {max_bytes // (1024 * 1024)} MB limit")
                    chunks.append(chunk)
        except httpx.HTTPError as exc:
            logger.info("Downloading %s failed: %s", url, exc)
            raise InvalidImageError("Could not download image from image_url") from exc
        return b"".join(chunks)

    async def close(self) -> None:
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


def build_image_storage() -> ImageStorage:
    """Create the storage backend selected in settings."""
    if settings.storage_backend == "http":
        if not settings.storage_http_url:
            raise RuntimeError("STORAGE_HTTP_URL is required when STORAGE_BACKEND=http")
        return HttpImageStorage(
            settings.storage_http_url,
            token=settings.storage_http_token,
            timeout_seconds=settings.storage_http_timeout_seconds,
        )
    return LocalImageStorage(settings.storage_local_dir, settings.storage_public_base_url)


class _ImageStorageSingleton:
    """Singleton wrapper for the configured storage backend."""

    _instance: ImageStorage | None = None

    @classmethod
    def get_instance(cls) -> ImageStorage:
        if cls._instance is None:
            cls._instance = build_image_storage()
        return cls._instance


def get_image_storage() -> ImageStorage:
    """Return the process-wide image storage backend."""
    return _ImageStorageSingleton.get_instance()


class _ImageFetcherSingleton:
    """Singleton wrapper for the shared download client."""

    _instance: RemoteImageFetcher | None = None

    @classmethod
    def get_instance(cls) -> RemoteImageFetcher:
        if cls._instance is None:
            cls._instance = RemoteImageFetcher(timeout_seconds=settings.storage_http_timeout_seconds)
        return cls._instance


def get_image_fetcher() -> RemoteImageFetcher:
    """Return the process-wide downloader for linked images."""
    return _ImageFetcherSingleton.get_instance()
