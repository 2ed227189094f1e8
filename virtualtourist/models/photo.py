"""
Model: Photo
Flickr photo metadata belonging to a Pin. Image bytes live in the image
cache (memory and disk), never in the database.
"""

import logging

from sqlalchemy import event, or_, select
from sqlalchemy.orm import Session

from virtualtourist.db import db
from virtualtourist.image_cache import get_image_cache
from virtualtourist.utils import now_utc

logger = logging.getLogger("main")

PENDING_PURGE_KEY = "virtualtourist.pending_photo_purge"


class Photo(db.Model):
    __tablename__ = "photos"

    id = db.Column(db.Integer, primary_key=True)
    pin_id = db.Column(db.Integer, db.ForeignKey("pins.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = db.Column(db.String(512))
    title = db.Column(db.String)
    # Flickr id doubles as the cached image filename
    flickr_id = db.Column(db.String(64), index=True)
    created_at = db.Column(db.DateTime, default=now_utc)

    pin = db.relationship("Pin", back_populates="photos")

    def same_flickr_photo(self, other):
        return other is not None and self.flickr_id == other.flickr_id

    def to_dict(self):
        return {
            "id": self.id,
            "pin_id": self.pin_id,
            "image_url": self.image_url,
            "title": self.title,
            "flickr_id": self.flickr_id,
        }

    def __repr__(self):
        return f"<Photo {self.id} flickr_id={self.flickr_id}>"


def unreferenced_images(connection, images):
    """
    Filter (image_url, flickr_id) pairs down to those no stored photo uses.

    Nearby pins often share Flickr photos, and their cached files share
    a name, so an image is only purged once its last photo is gone.
    """
    images = list(dict.fromkeys(images))
    urls = [url for url, _ in images if url]
    flickr_ids = [flickr_id for _, flickr_id in images if flickr_id]
    if not urls and not flickr_ids:
        return images

    rows = connection.execute(
        select(Photo.image_url, Photo.flickr_id).where(
            or_(Photo.image_url.in_(urls), Photo.flickr_id.in_(flickr_ids))
        )
    )
    used_urls, used_ids = set(), set()
    for url, flickr_id in rows:
        used_urls.add(url)
        used_ids.add(flickr_id)
    return [(url, flickr_id) for url, flickr_id in images if url not in used_urls and flickr_id not in used_ids]


@event.listens_for(Session, "after_flush")
def collect_deleted_photos(session, flush_context):
    """Remember cached artifacts of photos deleted in this flush (cascades included)"""
    for obj in session.deleted:
        if isinstance(obj, Photo):
            session.info.setdefault(PENDING_PURGE_KEY, []).append((obj.image_url, obj.flickr_id))


@event.listens_for(Session, "after_commit")
def purge_deleted_photos(session):
    pending = session.info.pop(PENDING_PURGE_KEY, None)
    if not pending:
        return

    cache = get_image_cache()
    if cache is None:
        logger.debug(f"No image cache configured, {len(pending)} deleted photo(s) not purged")
        return

    # The committed session cannot emit SQL, so check on a fresh connection
    with session.get_bind(mapper=Photo.__mapper__).connect() as connection:
        purgeable = unreferenced_images(connection, pending)

    for image_url, flickr_id in purgeable:
        cache.purge(image_url, flickr_id)
    kept = len(set(pending)) - len(purgeable)
    if kept:
        logger.debug(f"Kept {kept} cached image(s) still used by other photos")


@event.listens_for(Session, "after_rollback")
def discard_pending_purge(session):
    session.info.pop(PENDING_PURGE_KEY, None)
