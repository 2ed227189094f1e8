"""
Pytest fixtures and configuration for VirtualTourist tests
"""
import io

import pytest
from unittest.mock import MagicMock
from PIL import Image

from virtualtourist.app import create_app
from virtualtourist.constants import DEFAULT_SETTINGS
from virtualtourist.db import db
from virtualtourist.flickr import FlickrClient, FlickrSearchResult, PhotoMetadata
from virtualtourist.services import get_services
from virtualtourist.settings import merge_settings

PHOTOS_PER_PAGE = 3
FAKE_PAGES = 2


def fake_page(page):
    return [
        PhotoMetadata(
            url=f"https://live.staticflickr.com/{page}/{page}{i:02d}_m.jpg",
            title=f"Photo {page}-{i}",
            id=f"{page}{i:02d}",
        )
        for i in range(PHOTOS_PER_PAGE)
    ]


@pytest.fixture
def jpeg_bytes():
    """A tiny but real JPEG image"""
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), (200, 30, 30)).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def images_dir(tmp_path):
    return tmp_path / "images"


@pytest.fixture
def test_settings(images_dir):
    return merge_settings(
        DEFAULT_SETTINGS,
        {
            "flickr": {"api_key": "test-api-key-1234"},
            "cache": {"images_dir": str(images_dir), "memory_max_items": 10},
        },
    )


@pytest.fixture
def fake_flickr(jpeg_bytes):
    """Flickr client serving two pages of three photos each"""
    client = MagicMock(spec=FlickrClient)

    def search(latitude, longitude, page=1, on_count=None):
        photos = fake_page(page)
        if on_count:
            on_count(len(photos))
        return FlickrSearchResult(
            photos=photos,
            page=page,
            pages=FAKE_PAGES,
            total=FAKE_PAGES * PHOTOS_PER_PAGE,
            next_page=page % FAKE_PAGES + 1,
        )

    client.search_photos.side_effect = search
    client.download.return_value = jpeg_bytes
    return client


@pytest.fixture
def app(test_settings, tmp_path, fake_flickr, monkeypatch):
    monkeypatch.delenv("FLICKR_API_KEY", raising=False)
    _app = create_app(settings=test_settings, data_dir=str(tmp_path / "data"), flickr_client=fake_flickr)
    _app.config.update(TESTING=True)

    with _app.app_context():
        yield _app
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def services(app):
    return get_services()
