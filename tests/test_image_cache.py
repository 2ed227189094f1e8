"""
Tests for the memory and disk image caches
"""
import os

import pytest

from virtualtourist.exceptions import ValidationException
from virtualtourist.image_cache import DiskImageStore, ImageCache, MemoryImageCache


class TestMemoryImageCache:
    def test_get_missing_returns_none(self):
        assert MemoryImageCache(2).get("https://example.com/a.jpg") is None

    def test_least_recently_used_evicted(self):
        cache = MemoryImageCache(max_items=2)
        cache.set("a", b"1")
        cache.set("b", b"2")
        cache.get("a")
        cache.set("c", b"3")

        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache
        assert len(cache) == 2

    def test_overwrite_keeps_single_entry(self):
        cache = MemoryImageCache(max_items=2)
        cache.set("a", b"1")
        cache.set("a", b"22")

        assert len(cache) == 1
        assert cache.get("a") == b"22"
        assert cache.size_bytes() == 2

    def test_delete_and_clear(self):
        cache = MemoryImageCache(max_items=3)
        cache.set("a", b"1")
        cache.set("b", b"2")

        assert cache.delete("a") is True
        assert cache.delete("a") is False
        cache.clear()
        assert len(cache) == 0

    @pytest.mark.parametrize("max_items", [0, -1])
    def test_max_items_must_be_positive(self, max_items):
        with pytest.raises(ValueError):
            MemoryImageCache(max_items)


class TestDiskImageStore:
    def test_creates_directory(self, images_dir):
        DiskImageStore(str(images_dir))
        assert images_dir.is_dir()

    def test_save_load_delete(self, images_dir, jpeg_bytes):
        store = DiskImageStore(str(images_dir))

        path = store.save("52841234", jpeg_bytes)

        assert path == os.path.join(str(images_dir), "52841234")
        assert store.exists("52841234")
        assert store.load("52841234") == jpeg_bytes
        assert store.count() == 1
        assert store.delete("52841234") is True
        assert store.load("52841234") is None
        assert store.delete("52841234") is False

    def test_save_leaves_no_temp_files(self, images_dir, jpeg_bytes):
        store = DiskImageStore(str(images_dir))
        store.save("1", jpeg_bytes)
        store.save("1", b"replaced")

        assert sorted(os.listdir(images_dir)) == ["1"]
        assert store.load("1") == b"replaced"

    @pytest.mark.parametrize("name", ["", ".", "..", "../escape", "a/b"])
    def test_rejects_unsafe_names(self, images_dir, name):
        store = DiskImageStore(str(images_dir))
        with pytest.raises(ValidationException):
            store.path_for(name)


class TestImageCache:
    @pytest.fixture
    def cache(self, images_dir):
        return ImageCache(str(images_dir), memory_max_items=5)

    def test_store_fills_both_tiers(self, cache, jpeg_bytes):
        cache.store("https://live.staticflickr.com/1_m.jpg", "1", jpeg_bytes)

        assert cache.get_memory("https://live.staticflickr.com/1_m.jpg") == jpeg_bytes
        assert cache.get_disk("1") == jpeg_bytes

    def test_remember_skips_disk(self, cache, jpeg_bytes):
        cache.remember("https://live.staticflickr.com/1_m.jpg", jpeg_bytes)

        assert cache.get_disk("1") is None
        assert cache.get_memory("https://live.staticflickr.com/1_m.jpg") == jpeg_bytes

    def test_missing_keys(self, cache):
        assert cache.get_memory(None) is None
        assert cache.get_disk(None) is None
        assert cache.get_disk("404") is None

    def test_purge_removes_both_tiers(self, cache, images_dir, jpeg_bytes):
        cache.store("https://live.staticflickr.com/1_m.jpg", "1", jpeg_bytes)

        cache.purge("https://live.staticflickr.com/1_m.jpg", "1")

        assert cache.get_memory("https://live.staticflickr.com/1_m.jpg") is None
        assert not (images_dir / "1").exists()

    def test_purge_unknown_is_harmless(self, cache):
        cache.purge("https://live.staticflickr.com/none.jpg", "none")
        cache.purge(None, "../etc")
        assert cache.get_stats()["purges"] == 2

    def test_stats(self, cache, jpeg_bytes):
        cache.store("u1", "1", jpeg_bytes)
        cache.get_memory("u1")
        cache.get_disk("1")
        cache.get_disk("2")

        stats = cache.get_stats()

        assert stats["stores"] == 1
        assert stats["memory_hits"] == 1
        assert stats["disk_hits"] == 1
        assert stats["misses"] == 1
        assert stats["memory_items"] == 1
        assert stats["memory_max_items"] == 5
        assert stats["disk_items"] == 1

    def test_clear_memory_keeps_disk(self, cache, jpeg_bytes):
        cache.store("u1", "1", jpeg_bytes)

        cache.clear_memory()

        assert cache.get_memory("u1") is None
        assert cache.get_disk("1") == jpeg_bytes
