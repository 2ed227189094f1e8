"""
Pin and photo album routes
"""

from flask import Blueprint, Response, request

from virtualtourist.api_responses import not_found_response, success_response, validation_error_response
from virtualtourist.services import get_services

pins_bp = Blueprint("pins", __name__, url_prefix="/api")


@pins_bp.route("/pins")
def list_pins():
    pins = get_services().pins.list_pins()
    return success_response([pin.to_dict() for pin in pins])


@pins_bp.route("/pins", methods=["POST"])
def drop_pin():
    data = request.get_json(silent=True) or {}
    for field in ("latitude", "longitude"):
        if field not in data:
            return validation_error_response(field, "required")

    prefetch = data.get("prefetch", True)
    if not isinstance(prefetch, bool):
        return validation_error_response("prefetch", "must be true or false")

    pin = get_services().pins.drop_pin(data["latitude"], data["longitude"], prefetch=prefetch)
    return success_response(pin.to_dict(include_photos=True), status_code=201)


@pins_bp.route("/pins/lookup")
def find_pin():
    latitude = request.args.get("latitude")
    longitude = request.args.get("longitude")
    if latitude is None or longitude is None:
        return validation_error_response("latitude/longitude", "both query parameters are required")

    pin = get_services().pins.find_pin_at(latitude, longitude)
    if pin is None:
        return not_found_response("Pin")
    return success_response(pin.to_dict())


@pins_bp.route("/pins/<int:pin_id>")
def get_pin(pin_id):
    pin = get_services().pins.get_pin(pin_id)
    if pin is None:
        return not_found_response("Pin", pin_id)
    return success_response(pin.to_dict(include_photos=True))


@pins_bp.route("/pins/<int:pin_id>", methods=["DELETE"])
def delete_pin(pin_id):
    if not get_services().pins.delete_pin(pin_id):
        return not_found_response("Pin", pin_id)
    return success_response(message="Pin deleted")


@pins_bp.route("/pins/<int:pin_id>/photos")
def load_album(pin_id):
    photos = get_services().album.load_album(pin_id)
    return success_response([photo.to_dict() for photo in photos])


@pins_bp.route("/pins/<int:pin_id>/photos/new-collection", methods=["POST"])
def new_collection(pin_id):
    photos = get_services().album.new_collection(pin_id)
    return success_response([photo.to_dict() for photo in photos])


@pins_bp.route("/photos/<int:photo_id>", methods=["DELETE"])
def delete_photo(photo_id):
    if not get_services().album.delete_photo(photo_id):
        return not_found_response("Photo", photo_id)
    return success_response(message="Photo deleted")


@pins_bp.route("/photos/delete", methods=["POST"])
def delete_selected_photos():
    data = request.get_json(silent=True) or {}
    ids = data.get("ids")
    if not isinstance(ids, list) or not all(isinstance(i, int) and not isinstance(i, bool) for i in ids):
        return validation_error_response("ids", "must be a list of photo ids")

    removed = get_services().album.delete_photos(ids)
    return success_response({"deleted": removed})


@pins_bp.route("/photos/<int:photo_id>/image")
def get_photo_image(photo_id):
    data = get_services().album.get_photo_image(photo_id)
    return Response(data, mimetype="image/jpeg")
