import httpx
import pytest

from domain.errors import ImageFetchError
from services.vision.photo_pipeline import ImageFetcher, mime_type_for, mime_type_for_image


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("meal.png", "image/png"),
        ("meal.jpg", "image/jpeg"),
        ("meal.JPEG", "image/jpeg"),
        ("meal.webp", "image/webp"),
        ("meal.bmp", "image/jpeg"),
        ("meal.gif", "image/gif"),
        ("meal", "image/jpeg"),
        ("https://files.example/u/42/meal.png?sig=abc.jpg", "image/png"),
        ("https://files.example/dir.v2/meal", "image/jpeg"),
    ],
)
def test_mime_type_for(name: str, expected: str) -> None:
    assert mime_type_for(name) == expected


def test_mime_type_for_image_prefers_url_extension() -> None:
    assert mime_type_for_image("https://files.example/a.png", "a.webp") == "image/png"
    assert mime_type_for_image("https://utfs.io/f/abc123", "a.webp") == "image/webp"
    assert mime_type_for_image("https://utfs.io/f/abc123", "noext") == "image/jpeg"


class TestImageFetcher:
    @pytest.mark.asyncio
    async def test_returns_body_bytes(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == "https://files.example/a.jpg"
            return httpx.Response(200, content=b"\xff\xd8\xffjpeg")

        fetcher = ImageFetcher(httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        assert await fetcher.fetch("https://files.example/a.jpg") == b"\xff\xd8\xffjpeg"

    @pytest.mark.asyncio
    async def test_non_success_status_raises(self) -> None:
        fetcher = ImageFetcher(httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404))))

        with pytest.raises(ImageFetchError, match="404 Not Found"):
            await fetcher.fetch("https://files.example/missing.jpg")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("name resolution failed", request=request)

        fetcher = ImageFetcher(httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(ImageFetchError, match="name resolution failed"):
            await fetcher.fetch("https://files.example/a.jpg")
