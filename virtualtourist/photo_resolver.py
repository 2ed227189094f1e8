"""
Photo resolution chain: memory cache, then disk, then network
"""
import io
import logging

from PIL import Image, UnidentifiedImageError

from virtualtourist.exceptions import (
    FileDownloadException,
    FileNotFoundException,
    ImageConversionException,
)

logger = logging.getLogger("main")

DOWNLOAD_ATTEMPTS = 2


def verify_image(data: bytes) -> str:
    """
    Check that bytes decode as an image.

    Returns:
        The image format reported by Pillow (e.g. "JPEG")

    Raises:
        ImageConversionException: the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.verify()
            return image.format
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ImageConversionException(f"cannot convert image data: {e}")


class PhotoResolver:
    def __init__(self, image_cache, flickr_client):
        self.image_cache = image_cache
        self.flickr_client = flickr_client

    def download(self, image_url: str) -> bytes:
        """Download with exactly one retry on failure"""
        last_error = None
        for attempt in range(1, DOWNLOAD_ATTEMPTS + 1):
            try:
                return self.flickr_client.download(image_url)
            except FileDownloadException as e:
                last_error = e
                logger.warning(f"Image download attempt {attempt}/{DOWNLOAD_ATTEMPTS} failed for {image_url}")
        raise FileDownloadException(f"Image download failed: {last_error.message}")

    def resolve(self, photo) -> bytes:
        """
        Acquire the image bytes for a photo.

        The photo only needs `image_url` and `flickr_id` attributes. Bytes
        fetched from the network are verified before they are cached.
        """
        image_url, flickr_id = photo.image_url, photo.flickr_id

        data = self.image_cache.get_memory(image_url)
        if data is not None:
            logger.debug("image loaded from cache")
            return data

        data = self.image_cache.get_disk(flickr_id)
        if data is not None:
            logger.debug("image loaded from file system")
            self.image_cache.remember(image_url, data)
            return data

        if not image_url:
            raise FileNotFoundException(f"No cached image and no URL for photo {flickr_id}")

        data = self.download(image_url)
        verify_image(data)
        self.image_cache.store(image_url, flickr_id, data)
        logger.debug(f"image downloaded from server: {image_url}")
        return data
