"""
Tests for the memory / disk / network photo resolution chain
"""
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from virtualtourist.exceptions import (
    FileDownloadException,
    FileNotFoundException,
    ImageConversionException,
)
from virtualtourist.image_cache import ImageCache
from virtualtourist.photo_resolver import PhotoResolver, verify_image

IMAGE_URL = "https://live.staticflickr.com/65535/52841234_m.jpg"


@pytest.fixture
def photo():
    return SimpleNamespace(image_url=IMAGE_URL, flickr_id="52841234")


@pytest.fixture
def cache(images_dir):
    return ImageCache(str(images_dir), memory_max_items=5)


@pytest.fixture
def flickr(jpeg_bytes):
    client = MagicMock()
    client.download.return_value = jpeg_bytes
    return client


@pytest.fixture
def resolver(cache, flickr):
    return PhotoResolver(cache, flickr)


class TestVerifyImage:
    def test_jpeg(self, jpeg_bytes):
        assert verify_image(jpeg_bytes) == "JPEG"

    def test_garbage(self):
        with pytest.raises(ImageConversionException) as exc_info:
            verify_image(b"<html>not an image</html>")
        assert exc_info.value.error_number == 9004


class TestResolve:
    def test_memory_hit_skips_disk_and_network(self, resolver, cache, flickr, photo):
        cache.remember(IMAGE_URL, b"from-memory")

        assert resolver.resolve(photo) == b"from-memory"
        flickr.download.assert_not_called()
        assert cache.get_stats()["disk_hits"] == 0

    def test_disk_hit_promoted_to_memory(self, resolver, cache, flickr, photo, jpeg_bytes):
        cache.disk.save("52841234", jpeg_bytes)

        assert resolver.resolve(photo) == jpeg_bytes
        flickr.download.assert_not_called()
        assert IMAGE_URL in cache.memory

    def test_network_fill_writes_both_tiers(self, resolver, cache, flickr, photo, jpeg_bytes, images_dir):
        assert resolver.resolve(photo) == jpeg_bytes

        flickr.download.assert_called_once_with(IMAGE_URL)
        assert (images_dir / "52841234").read_bytes() == jpeg_bytes
        assert cache.memory.get(IMAGE_URL) == jpeg_bytes

        # Second resolve is served from memory
        resolver.resolve(photo)
        assert flickr.download.call_count == 1

    def test_one_retry_after_failure(self, resolver, flickr, photo, jpeg_bytes):
        flickr.download.side_effect = [FileDownloadException("timed out"), jpeg_bytes]

        assert resolver.resolve(photo) == jpeg_bytes
        assert flickr.download.call_count == 2

    def test_two_failures_raise(self, resolver, cache, flickr, photo, images_dir):
        flickr.download.side_effect = FileDownloadException("connection reset")

        with pytest.raises(FileDownloadException):
            resolver.resolve(photo)

        assert flickr.download.call_count == 2
        assert not (images_dir / "52841234").exists()
        assert IMAGE_URL not in cache.memory

    def test_invalid_bytes_not_cached(self, resolver, cache, flickr, photo, images_dir):
        flickr.download.return_value = b"not an image"

        with pytest.raises(ImageConversionException):
            resolver.resolve(photo)

        assert not (images_dir / "52841234").exists()
        assert IMAGE_URL not in cache.memory

    def test_no_url_and_no_cached_file(self, resolver, flickr):
        photo = SimpleNamespace(image_url=None, flickr_id="52841234")

        with pytest.raises(FileNotFoundException):
            resolver.resolve(photo)
        flickr.download.assert_not_called()

    def test_no_url_but_cached_file(self, resolver, cache, jpeg_bytes):
        cache.disk.save("52841234", jpeg_bytes)
        photo = SimpleNamespace(image_url=None, flickr_id="52841234")

        assert resolver.resolve(photo) == jpeg_bytes
