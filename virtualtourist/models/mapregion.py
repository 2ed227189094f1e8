"""
Model: MapRegion
Last-viewed map viewport. One row per database.
"""

from virtualtourist.db import db
from virtualtourist.utils import now_utc


class MapRegion(db.Model):
    __tablename__ = "map_regions"

    id = db.Column(db.Integer, primary_key=True)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    span_latitude = db.Column(db.Float, nullable=False)
    span_longitude = db.Column(db.Float, nullable=False)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    @property
    def center(self):
        return (self.latitude, self.longitude)

    @property
    def span(self):
        return (self.span_latitude, self.span_longitude)

    def to_dict(self):
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "span_latitude": self.span_latitude,
            "span_longitude": self.span_longitude,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
