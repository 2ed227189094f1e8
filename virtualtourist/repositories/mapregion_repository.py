"""
Repository for MapRegion database operations
"""

from virtualtourist.db import db
from virtualtourist.models.mapregion import MapRegion


class MapRegionRepository:
    """Repository for the singleton MapRegion row"""

    @staticmethod
    def get():
        return MapRegion.query.order_by(MapRegion.id).first()

    @staticmethod
    def create(**kwargs):
        """Stage a new MapRegion. The caller commits."""
        item = MapRegion(**kwargs)
        db.session.add(item)
        return item

    @staticmethod
    def update(item, **kwargs):
        for key, value in kwargs.items():
            if hasattr(item, key):
                setattr(item, key, value)
        return item
