"""
Service layer

The application factory builds one instance of each service and stores
them on app.extensions; request handlers reach them through get_services().
"""

from dataclasses import dataclass

from flask import current_app

from virtualtourist.services.album_service import AlbumService
from virtualtourist.services.map_region_service import MapRegionService
from virtualtourist.services.pin_service import PinService

EXTENSION_KEY = "virtualtourist"


@dataclass
class Services:
    pins: PinService
    album: AlbumService
    map_region: MapRegionService


def build_services(flickr_client, photo_resolver) -> Services:
    album = AlbumService(flickr_client, photo_resolver)
    return Services(pins=PinService(album), album=album, map_region=MapRegionService())


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
