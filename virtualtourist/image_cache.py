"""
Image Cache Module
Memory cache keyed by image URL and on-disk store keyed by Flickr id
"""

import os
import logging
import threading
from collections import OrderedDict
from typing import Dict, Optional

from virtualtourist.exceptions import ValidationException
from virtualtourist.utils import format_size_py, safe_write_bytes

logger = logging.getLogger("main")

_image_cache = None
_image_cache_lock = threading.Lock()


class MemoryImageCache:
    """Thread-safe LRU of image bytes keyed by URL"""

    def __init__(self, max_items: int = 200):
        if max_items <= 0:
            raise ValueError("max_items must be positive")
        self.max_items = max_items
        self._items: "OrderedDict[str, bytes]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            data = self._items.get(key)
            if data is not None:
                self._items.move_to_end(key)
            return data

    def set(self, key: str, data: bytes) -> None:
        with self._lock:
            self._items[key] = data
            self._items.move_to_end(key)
            while len(self._items) > self.max_items:
                evicted, _ = self._items.popitem(last=False)
                logger.debug(f"Memory cache evicted {evicted}")

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._items.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def size_bytes(self) -> int:
        with self._lock:
            return sum(len(data) for data in self._items.values())

    def __contains__(self, key) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class DiskImageStore:
    """Raw image files named after their Flickr id"""

    def __init__(self, images_dir: str):
        self.images_dir = images_dir
        os.makedirs(images_dir, exist_ok=True)

    def path_for(self, flickr_id: str) -> str:
        if not flickr_id or os.sep in flickr_id or (os.altsep and os.altsep in flickr_id) or flickr_id in (".", ".."):
            raise ValidationException(f"Invalid image file name: {flickr_id!r}")
        return os.path.join(self.images_dir, flickr_id)

    def exists(self, flickr_id: str) -> bool:
        return os.path.isfile(self.path_for(flickr_id))

    def load(self, flickr_id: str) -> Optional[bytes]:
        path = self.path_for(flickr_id)
        if not os.path.isfile(path):
            return None
        with open(path, "rb") as f:
            return f.read()

    def save(self, flickr_id: str, data: bytes) -> str:
        path = self.path_for(flickr_id)
        safe_write_bytes(path, data)
        return path

    def delete(self, flickr_id: str) -> bool:
        path = self.path_for(flickr_id)
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False

    def count(self) -> int:
        return sum(1 for entry in os.scandir(self.images_dir) if entry.is_file())


class ImageCache:
    """Memory cache in front of the disk store, with hit/miss statistics"""

    def __init__(self, images_dir: str, memory_max_items: int = 200):
        self.memory = MemoryImageCache(memory_max_items)
        self.disk = DiskImageStore(images_dir)
        self._stats_lock = threading.Lock()
        self._stats = {
            "memory_hits": 0,
            "disk_hits": 0,
            "misses": 0,
            "stores": 0,
            "purges": 0,
        }

    def _count(self, stat: str) -> None:
        with self._stats_lock:
            self._stats[stat] += 1

    def get_memory(self, image_url: Optional[str]) -> Optional[bytes]:
        if not image_url:
            return None
        data = self.memory.get(image_url)
        if data is not None:
            self._count("memory_hits")
            logger.debug(f"Image cache HIT (memory): {image_url}")
        return data

    def get_disk(self, flickr_id: Optional[str]) -> Optional[bytes]:
        if not flickr_id:
            return None
        data = self.disk.load(flickr_id)
        if data is not None:
            self._count("disk_hits")
            logger.debug(f"Image cache HIT (disk): {flickr_id}")
        else:
            self._count("misses")
        return data

    def remember(self, image_url: Optional[str], data: bytes) -> None:
        """Put bytes in the memory tier only"""
        if image_url:
            self.memory.set(image_url, data)

    def store(self, image_url: Optional[str], flickr_id: Optional[str], data: bytes) -> None:
        """Put freshly downloaded bytes in both tiers"""
        if flickr_id:
            self.disk.save(flickr_id, data)
        self.remember(image_url, data)
        self._count("stores")

    def purge(self, image_url: Optional[str], flickr_id: Optional[str]) -> None:
        removed_memory = self.memory.delete(image_url) if image_url else False
        removed_disk = False
        if flickr_id:
            try:
                removed_disk = self.disk.delete(flickr_id)
            except ValidationException:
                logger.warning(f"Skipping purge of invalid image file name {flickr_id!r}")
        self._count("purges")
        logger.debug(f"Purged image {flickr_id} (memory={removed_memory}, disk={removed_disk})")

    def clear_memory(self) -> None:
        self.memory.clear()
        logger.info("Image memory cache cleared")

    def get_stats(self) -> Dict:
        with self._stats_lock:
            stats = dict(self._stats)
        memory_bytes = self.memory.size_bytes()
        stats.update(
            {
                "memory_items": len(self.memory),
                "memory_max_items": self.memory.max_items,
                "memory_size": format_size_py(memory_bytes),
                "disk_items": self.disk.count(),
                "images_dir": self.disk.images_dir,
            }
        )
        return stats


def configure_image_cache(images_dir: str, memory_max_items: int = 200) -> ImageCache:
    """Create the process-wide image cache"""
    global _image_cache
    with _image_cache_lock:
        _image_cache = ImageCache(images_dir, memory_max_items)
        logger.info(f"Image cache initialized at {images_dir} (memory max {memory_max_items} items)")
        return _image_cache


def get_image_cache() -> Optional[ImageCache]:
    return _image_cache
