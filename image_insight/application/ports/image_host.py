from typing import Protocol


class ImageHost(Protocol):
    async def upload(self, image_base64: str) -> str:
        """Store the image publicly and return its URL."""
        ...
