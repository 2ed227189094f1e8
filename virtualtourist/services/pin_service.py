"""
Pin Service - dropping, finding and deleting map pins
"""

import structlog

from virtualtourist.db import db, save_context
from virtualtourist.exceptions import VirtualTouristException
from virtualtourist.models.pin import Pin
from virtualtourist.repositories.pin_repository import PinRepository
from virtualtourist.services.validation import validate_coordinate

logger = structlog.get_logger("pins")


class PinService:
    def __init__(self, album_service):
        self.album_service = album_service

    def drop_pin(self, latitude, longitude, prefetch=True) -> Pin:
        """
        Persist a new pin and pre-fetch its first page of photos.

        A failed pre-fetch is logged and the pin is kept; its album is
        fetched again the first time it is opened.
        """
        latitude, longitude = validate_coordinate(latitude, longitude)
        pin = Pin(latitude=latitude, longitude=longitude, flickr_page=1)
        db.session.add(pin)
        save_context()
        logger.info(f"Pin {pin.id} dropped at ({latitude}, {longitude})")

        if prefetch:
            try:
                self.album_service.fetch_photos_for_pin(pin)
            except VirtualTouristException as e:
                logger.warning(f"Photo pre-fetch failed for pin {pin.id}: {e.message}")
        return pin

    @staticmethod
    def find_pin_at(latitude, longitude):
        latitude, longitude = validate_coordinate(latitude, longitude)
        return PinRepository.get_at_coordinate(latitude, longitude)

    @staticmethod
    def list_pins():
        return PinRepository.get_all()

    @staticmethod
    def get_pin(pin_id):
        return PinRepository.get_by_id(pin_id)

    @staticmethod
    def delete_pin(pin_id) -> bool:
        """Delete a pin; its photos and their cached images go with it"""
        deleted = PinRepository.delete(pin_id)
        if deleted:
            logger.info(f"Pin {pin_id} deleted")
        return deleted
