"""
Map region routes
"""

from flask import Blueprint, request

from virtualtourist.api_responses import success_response, validation_error_response
from virtualtourist.services import get_services

map_region_bp = Blueprint("map_region", __name__, url_prefix="/api")

REGION_FIELDS = ("latitude", "longitude", "span_latitude", "span_longitude")


@map_region_bp.route("/map-region")
def get_map_region():
    region = get_services().map_region.get_map_region()
    return success_response(region.to_dict())


@map_region_bp.route("/map-region", methods=["PUT"])
def update_map_region():
    data = request.get_json(silent=True) or {}
    for field in REGION_FIELDS:
        if field not in data:
            return validation_error_response(field, "required")

    region = get_services().map_region.update_map_region(*(data[field] for field in REGION_FIELDS))
    return success_response(region.to_dict())
