"""
Map Region Service - persisted last-viewed viewport
"""

import structlog

from virtualtourist.constants import DEFAULT_MAP_REGION
from virtualtourist.db import save_context
from virtualtourist.models.mapregion import MapRegion
from virtualtourist.repositories.mapregion_repository import MapRegionRepository
from virtualtourist.services.validation import validate_coordinate, validate_span

logger = structlog.get_logger("map_region")


class MapRegionService:
    @staticmethod
    def get_map_region() -> MapRegion:
        """The persisted region, or the default region saved on first use"""
        region = MapRegionRepository.get()
        if region is None:
            region = MapRegionRepository.create(**DEFAULT_MAP_REGION)
            save_context()
            logger.info("Default map region created")
        return region

    @staticmethod
    def update_map_region(latitude, longitude, span_latitude, span_longitude) -> MapRegion:
        latitude, longitude = validate_coordinate(latitude, longitude)
        span_latitude, span_longitude = validate_span(span_latitude, span_longitude)
        values = {
            "latitude": latitude,
            "longitude": longitude,
            "span_latitude": span_latitude,
            "span_longitude": span_longitude,
        }

        region = MapRegionRepository.get()
        if region is None:
            region = MapRegionRepository.create(**values)
        else:
            MapRegionRepository.update(region, **values)
        save_context()
        return region
