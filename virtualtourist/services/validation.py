import math

from virtualtourist.constants import LAT_MAX, LAT_MIN, LON_MAX, LON_MIN
from virtualtourist.exceptions import ValidationException


def as_float(value, field):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationException(f"{field} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ValidationException(f"{field} must be finite")
    return number


def validate_coordinate(latitude, longitude):
    """Return (latitude, longitude) as floats inside the valid ranges"""
    latitude = as_float(latitude, "latitude")
    longitude = as_float(longitude, "longitude")
    if not LAT_MIN <= latitude <= LAT_MAX:
        raise ValidationException(f"latitude must be between {LAT_MIN} and {LAT_MAX}")
    if not LON_MIN <= longitude <= LON_MAX:
        raise ValidationException(f"longitude must be between {LON_MIN} and {LON_MAX}")
    return latitude, longitude


def validate_span(span_latitude, span_longitude):
    span_latitude = as_float(span_latitude, "span_latitude")
    span_longitude = as_float(span_longitude, "span_longitude")
    if not 0 < span_latitude <= LAT_MAX - LAT_MIN:
        raise ValidationException("span_latitude must be positive and at most 180")
    if not 0 < span_longitude <= LON_MAX - LON_MIN:
        raise ValidationException("span_longitude must be positive and at most 360")
    return span_latitude, span_longitude
