import logging
from typing import Optional

import aiohttp

from ...core.config import settings
from ...application.ports.image_host import ImageHost

logger = logging.getLogger(__name__)


class ImageHostError(Exception):
    pass


def strip_data_url(image_base64: str) -> str:
    """Drop a ``data:image/png;base64,`` style prefix if the client sent one."""
    value = image_base64.strip()
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


class FreeImageHost(ImageHost):
    """Uploads base64 images to freeimage.host and returns the public URL."""

    def __init__(self, api_key: Optional[str] = None, upload_url: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.api_key = api_key if api_key is not None else settings.FREEIMAGE_API_KEY
        self.upload_url = upload_url or settings.FREEIMAGE_UPLOAD_URL
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.UPSTREAM_TIMEOUT_SECONDS)

    async def upload(self, image_base64: str) -> str:
        if not self.api_key:
            raise ImageHostError("FREEIMAGE_API_KEY not configured")

        form = {
            "key": self.api_key,
            "action": "upload",
            "source": strip_data_url(image_base64),
            "format": "json",
        }
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(self.upload_url, data=form) as response:
                if response.status != 200:
                    body = await response.text()
                    raise ImageHostError(f"Image host returned HTTP {response.status}: {body[:200]}")
                payload = await response.json(content_type=None)

        image = payload.get("image") if isinstance(payload, dict) else None
        url = image.get("url") if isinstance(image, dict) else None
        if not url:
            raise ImageHostError("Image host response did not include an image URL")
        logger.info(f"Uploaded image to {url}")
        return url
