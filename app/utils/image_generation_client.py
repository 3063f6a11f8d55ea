"""
Client for the external image-generation endpoint.
"""
from urllib.parse import quote, urlencode

import httpx

from app.core.config import settings
from app.core.exceptions import GenerationError
from app.core.logging import logger


class ImageGenerationClient:
    """
    Client for a Pollinations-style endpoint where the prompt is part of the
    URL path and the rendered image is returned by a GET on that URL.
    """

    def __init__(self, base_url: str = None, timeout: float = None, transport: httpx.AsyncBaseTransport = None):
        self.base_url = (base_url or settings.IMAGE_GENERATION_URL).rstrip('/')
        self.client = httpx.AsyncClient(
            timeout=timeout or settings.GENERATION_TIMEOUT,
            follow_redirects=True,
            transport=transport,
        )

    def build_locator(self, prompt: str, seed: int, width: int = None, height: int = None) -> str:
        """
        URL that renders ``prompt`` with the given seed and size.

        Args:
            prompt: Text prompt
            seed: Variation seed
            width: Image width (default: IMAGE_SIZE)
            height: Image height (default: IMAGE_SIZE)

        Returns:
            The image locator
        """
        query = urlencode({
            "seed": seed,
            "width": width or settings.IMAGE_SIZE,
            "height": height or settings.IMAGE_SIZE,
            "nologo": "true",
        })
        return f"{self.base_url}/{quote(prompt, safe='')}?{query}"

    async def generate(self, prompt: str, seed: int, width: int = None, height: int = None) -> str:
        """
        Ask the endpoint to render an image and return its locator.

        The same prompt and seed usually give a similar image, but the bytes
        are not guaranteed to be identical between calls, so callers must
        re-fetch the locator rather than cache by prompt.

        Raises:
            GenerationError: non-success status, non-image body, or network failure
        """
        locator = self.build_locator(prompt, seed, width, height)
        logger.info(f"Requesting logo render (seed={seed})")
        logger.debug(f"Generation locator: {locator}")

        try:
            response = await self.client.get(locator, headers={"Cache-Control": "no-cache"})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_msg = f"Image generation returned HTTP {e.response.status_code}"
            logger.error(error_msg)
            raise GenerationError(error_msg, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error(f"Network error calling image generation: {str(e)}")
            raise GenerationError(f"Image generation request failed: {str(e)}") from e

        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            raise GenerationError(f"Image generation returned non-image content ({content_type or 'unknown'})")

        return locator

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
