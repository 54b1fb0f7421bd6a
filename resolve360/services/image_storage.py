# resolve360/services/image_storage.py
import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict

from ..utils.errors import ImageUploadError
from ..utils.file_upload import image_extension, save_issue_image

logger = logging.getLogger(__name__)

class StoredImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    image_url: str
    upload_success: bool

class ImageStorage:
    """
    Uploads issue photos to the image host.
    When the host is not configured or the upload fails the photo is kept on
    local disk instead and ``upload_success`` is False, so readers know the
    reference may not outlive this deployment.
    """

    def __init__(
        self,
        upload_url: str,
        upload_preset: str,
        upload_dir: str,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.upload_url = upload_url
        self.upload_preset = upload_preset
        self.upload_dir = upload_dir
        self.timeout = timeout
        self.client = client

    async def _upload(self, data: bytes, content_type: str, filename: str) -> str:
        if not self.upload_url:
            raise ImageUploadError("image host not configured")

        files = {"file": (filename, data, content_type)}
        form = {"upload_preset": self.upload_preset}
        if self.client is not None:
            response = await self.client.post(self.upload_url, data=form, files=files)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.upload_url, data=form, files=files)
        response.raise_for_status()

        url = response.json().get("secure_url")
        if not url:
            raise ImageUploadError("image host response has no secure_url")
        return url

    async def store(self, data: bytes, content_type: str, filename: Optional[str] = None) -> StoredImage:
        ext = image_extension(content_type)
        filename = filename or f"issue.{ext}"
        try:
            url = await self._upload(data, content_type, filename)
            logger.info(f"Image uploaded: {url}")
            return StoredImage(image_url=url, upload_success=True)
        except (httpx.HTTPError, ImageUploadError, ValueError) as e:
            logger.warning(f"Image upload failed, keeping local copy: {e}")

        local_url = save_issue_image(data, content_type, self.upload_dir)
        return StoredImage(image_url=local_url, upload_success=False)
