"""
System routes - health and cache statistics
"""

from flask import Blueprint

from virtualtourist import __version__
from virtualtourist.api_responses import success_response
from virtualtourist.image_cache import get_image_cache
from virtualtourist.repositories.photo_repository import PhotoRepository
from virtualtourist.repositories.pin_repository import PinRepository

system_bp = Blueprint("system", __name__, url_prefix="/api/system")


@system_bp.route("/health")
def health():
    return success_response(
        {
            "status": "healthy",
            "version": __version__,
            "pins": PinRepository.count(),
            "photos": PhotoRepository.count(),
        }
    )


@system_bp.route("/cache")
def cache_stats():
    cache = get_image_cache()
    if cache is None:
        return success_response({"status": "disabled"})
    return success_response(cache.get_stats())
