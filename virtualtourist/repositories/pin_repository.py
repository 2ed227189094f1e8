"""
Repository for Pin database operations
"""

from virtualtourist.db import db, save_context
from virtualtourist.models.pin import Pin


class PinRepository:
    """Repository for Pin database operations"""

    @staticmethod
    def get_all():
        """Get all pins, latitude then longitude descending"""
        return Pin.query.order_by(Pin.latitude.desc(), Pin.longitude.desc()).all()

    @staticmethod
    def get_by_id(id):
        return db.session.get(Pin, id)

    @staticmethod
    def get_at_coordinate(latitude, longitude):
        """
        First pin at exactly this coordinate.

        Several pins may share a coordinate; callers act on one pin per
        request, so only the first match is returned.
        """
        return (
            Pin.query.filter(Pin.latitude == latitude, Pin.longitude == longitude)
            .order_by(Pin.id)
            .first()
        )

    @staticmethod
    def delete(id):
        """Delete Pin record and, through the cascade, its photos"""
        item = db.session.get(Pin, id)
        if not item:
            return False

        db.session.delete(item)
        save_context()
        return True

    @staticmethod
    def count():
        return Pin.query.count()
