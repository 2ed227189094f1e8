"""
Repository for Photo database operations
"""

from virtualtourist.db import db
from virtualtourist.models.photo import Photo, unreferenced_images


class PhotoRepository:
    """Repository for Photo database operations"""

    @staticmethod
    def get_by_id(id):
        return db.session.get(Photo, id)

    @staticmethod
    def get_by_ids(ids):
        if not ids:
            return []
        return Photo.query.filter(Photo.id.in_(ids)).order_by(Photo.id).all()

    @staticmethod
    def exists(id):
        return db.session.query(Photo.id).filter_by(id=id).first() is not None

    @staticmethod
    def unreferenced_images(images):
        """(image_url, flickr_id) pairs no stored photo uses any more"""
        return unreferenced_images(db.session.connection(), images)

    @staticmethod
    def add_for_pin(pin, metadata):
        """
        Stage Photo rows for search result metadata. The caller commits.

        Args:
            pin: Owning Pin
            metadata: Iterable of PhotoMetadata (url, title, id)
        """
        photos = [Photo(pin=pin, image_url=item.url, title=item.title, flickr_id=item.id) for item in metadata]
        db.session.add_all(photos)
        return photos

    @staticmethod
    def delete_many(photos):
        """Stage deletion of photos. The caller commits."""
        for photo in photos:
            db.session.delete(photo)
        return len(photos)

    @staticmethod
    def count():
        return Photo.query.count()
