from __future__ import annotations

from urllib.parse import urlsplit

import httpx

from domain.errors import ImageFetchError


DEFAULT_MIME_TYPE = "image/jpeg"

MIME_BY_EXTENSION = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
}


def _extension(url_or_name: str) -> str | None:
    path = urlsplit(url_or_name).path or url_or_name
    last = path.rsplit("/", 1)[-1]
    if "." not in last:
        return None
    return last.rsplit(".", 1)[-1].lower() or None


def mime_type_for(url_or_name: str) -> str:
    return MIME_BY_EXTENSION.get(_extension(url_or_name) or "", DEFAULT_MIME_TYPE)


def mime_type_for_image(url: str, name: str) -> str:
    # storage URLs are often opaque ids; the display name still has the extension
    if _extension(url) is None:
        return mime_type_for(name)
    return mime_type_for(url)


class ImageFetcher:
    """Downloads uploaded images straight from their storage URL."""

    def __init__(self, client: httpx.AsyncClient, *, timeout: float = 5.0) -> None:
        self._client = client
        self.timeout = timeout

    async def fetch(self, url: str) -> bytes:
        try:
            resp = await self._client.get(url, timeout=self.timeout, follow_redirects=True)
        except httpx.HTTPError as e:
            raise ImageFetchError(f"Failed to fetch image: {str(e) or type(e).__name__}") from e
        if not resp.is_success:
            raise ImageFetchError(f"Failed to fetch image: {resp.status_code} {resp.reason_phrase}")
        return resp.content
