"""
Models package

- pin.py: Pin, a dropped map location
- photo.py: Photo, Flickr metadata owned by a Pin (plus the deletion hook)
- mapregion.py: MapRegion, the last-viewed viewport
"""

from .pin import Pin
from .photo import Photo
from .mapregion import MapRegion

__all__ = [
    "Pin",
    "Photo",
    "MapRegion",
]
