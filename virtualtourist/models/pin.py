"""
Model: Pin
A user-placed map location and the Flickr page cursor for its album
"""

from virtualtourist.db import db
from virtualtourist.utils import now_utc


class Pin(db.Model):
    __tablename__ = "pins"

    id = db.Column(db.Integer, primary_key=True)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    # Page to request on the next Flickr search for this pin
    flickr_page = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=now_utc)

    photos = db.relationship(
        "Photo",
        back_populates="pin",
        cascade="all, delete-orphan",
        order_by="Photo.id",
    )

    __table_args__ = (db.Index("idx_pins_coordinate", "latitude", "longitude"),)

    @property
    def coordinate(self):
        return (self.latitude, self.longitude)

    def same_location(self, other):
        return other is not None and self.coordinate == other.coordinate

    def to_dict(self, include_photos=False):
        data = {
            "id": self.id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "flickr_page": self.flickr_page,
            "photo_count": len(self.photos),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_photos:
            data["photos"] = [photo.to_dict() for photo in self.photos]
        return data

    def __repr__(self):
        return f"<Pin {self.id} ({self.latitude}, {self.longitude}) page={self.flickr_page}>"
