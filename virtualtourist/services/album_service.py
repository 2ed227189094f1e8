"""
Album Service - photos of a pin: search, new collection, deletion, images
"""

import structlog
from typing import List

from virtualtourist.db import save_context
from virtualtourist.exceptions import NotFoundException
from virtualtourist.models.photo import Photo
from virtualtourist.repositories.photo_repository import PhotoRepository
from virtualtourist.repositories.pin_repository import PinRepository

logger = structlog.get_logger("album")


class AlbumService:
    def __init__(self, flickr_client, photo_resolver):
        self.flickr_client = flickr_client
        self.photo_resolver = photo_resolver

    @staticmethod
    def _get_pin(pin_id):
        pin = PinRepository.get_by_id(pin_id)
        if pin is None:
            raise NotFoundException(f"Pin with ID '{pin_id}' not found")
        return pin

    def _search(self, pin):
        return self.flickr_client.search_photos(
            pin.latitude,
            pin.longitude,
            page=pin.flickr_page,
            on_count=lambda count: logger.info(f"Pin {pin.id}: {count} photos to fetch"),
        )

    def fetch_photos_for_pin(self, pin) -> List[Photo]:
        """Search Flickr at the pin's cursor, persist the photos and advance the cursor"""
        result = self._search(pin)
        photos = PhotoRepository.add_for_pin(pin, result.photos)
        pin.flickr_page = result.next_page
        save_context()
        return photos

    def load_album(self, pin_id) -> List[Photo]:
        """Photos of a pin, fetched from Flickr the first time the album is empty"""
        pin = self._get_pin(pin_id)
        if not pin.photos:
            logger.info(f"Pin {pin.id} has no photos, fetching from Flickr")
            self.fetch_photos_for_pin(pin)
        return list(pin.photos)

    def new_collection(self, pin_id) -> List[Photo]:
        """
        Replace all photos of a pin with the next page of results.

        The search runs first, so a failed search leaves the current
        collection in place. Replaced photos lose their cached images.
        """
        pin = self._get_pin(pin_id)
        result = self._search(pin)

        removed = PhotoRepository.delete_many(list(pin.photos))
        photos = PhotoRepository.add_for_pin(pin, result.photos)
        pin.flickr_page = result.next_page
        save_context()

        logger.info(f"Pin {pin.id}: replaced {removed} photos with {len(photos)} from page {result.page}")
        return photos

    def delete_photo(self, photo_id) -> bool:
        photo = PhotoRepository.get_by_id(photo_id)
        if photo is None:
            return False
        PhotoRepository.delete_many([photo])
        save_context()
        return True

    def delete_photos(self, photo_ids) -> int:
        """Delete the selected photos; unknown ids are ignored"""
        photos = PhotoRepository.get_by_ids(photo_ids)
        removed = PhotoRepository.delete_many(photos)
        save_context()
        return removed

    def get_photo_image(self, photo_id) -> bytes:
        photo = PhotoRepository.get_by_id(photo_id)
        if photo is None:
            raise NotFoundException(f"Photo with ID '{photo_id}' not found")

        image_url, flickr_id = photo.image_url, photo.flickr_id
        data = self.photo_resolver.resolve(photo)

        # The photo may have been deleted while its image was downloading
        if not PhotoRepository.exists(photo_id):
            for url, name in PhotoRepository.unreferenced_images([(image_url, flickr_id)]):
                self.photo_resolver.image_cache.purge(url, name)
            raise NotFoundException(f"Photo with ID '{photo_id}' was deleted")
        return data
