"""
Flickr REST client
Geographic photo search (flickr.photos.search) and image download
"""
import requests
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, NamedTuple, Optional

from virtualtourist.constants import (
    BOUNDING_BOX_HALF_HEIGHT,
    BOUNDING_BOX_HALF_WIDTH,
    FLICKR_BASE_URL,
    FLICKR_DATA_FORMAT,
    FLICKR_EXTRAS,
    FLICKR_METHOD_NAME,
    FLICKR_NO_JSON_CALLBACK,
    FLICKR_PAGE_LIMIT,
    FLICKR_SAFE_SEARCH,
    LAT_MAX,
    LAT_MIN,
    LON_MAX,
    LON_MIN,
    MAX_PHOTOS_TO_FETCH,
)
from virtualtourist.exceptions import FileDownloadException, FlickrRequestException, JsonParseException
from virtualtourist.utils import sanitize_sensitive_data

logger = logging.getLogger("main")


class PhotoMetadata(NamedTuple):
    url: str
    title: str
    id: str


@dataclass
class FlickrSearchResult:
    photos: List[PhotoMetadata] = field(default_factory=list)
    page: int = 1
    pages: int = 0
    total: int = 0
    # Page to request on the next search for the same location
    next_page: int = 1


def bounding_box(latitude: float, longitude: float,
                 half_width: float = BOUNDING_BOX_HALF_WIDTH,
                 half_height: float = BOUNDING_BOX_HALF_HEIGHT) -> str:
    """
    Flickr bbox parameter around a coordinate, clamped to valid ranges.

    Returns:
        "lon_min,lat_min,lon_max,lat_max"
    """
    bottom_left_lon = max(longitude - half_width, LON_MIN)
    bottom_left_lat = max(latitude - half_height, LAT_MIN)
    top_right_lon = min(longitude + half_width, LON_MAX)
    top_right_lat = min(latitude + half_height, LAT_MAX)
    return f"{bottom_left_lon},{bottom_left_lat},{top_right_lon},{top_right_lat}"


def next_page_cursor(page: int, page_limit: int) -> int:
    """Page following `page`, wrapping from the last page back to page 1"""
    if page_limit <= 0:
        return 1
    return page % page_limit + 1


def _parse_count(value, key: str) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise JsonParseException(f"Cant parse '{key}' value {value!r} in Flickr response")


class FlickrClient:
    """Client for the Flickr REST API"""

    def __init__(
        self,
        api_key: str,
        base_url: str = FLICKR_BASE_URL,
        timeout: float = 10,
        max_photos: int = MAX_PHOTOS_TO_FETCH,
        page_limit: int = FLICKR_PAGE_LIMIT,
        bbox_half_width: float = BOUNDING_BOX_HALF_WIDTH,
        bbox_half_height: float = BOUNDING_BOX_HALF_HEIGHT,
        user_agent: str = "VirtualTourist photo album",
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.max_photos = max_photos
        self.page_limit = min(page_limit, FLICKR_PAGE_LIMIT)
        self.bbox_half_width = bbox_half_width
        self.bbox_half_height = bbox_half_height
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_settings(cls, settings: Dict, session: Optional[requests.Session] = None) -> "FlickrClient":
        flickr = settings["flickr"]
        return cls(
            api_key=flickr["api_key"],
            base_url=flickr["base_url"],
            timeout=flickr["timeout"],
            max_photos=int(flickr["max_photos"]),
            page_limit=int(flickr["page_limit"]),
            bbox_half_width=float(flickr["bbox_half_width"]),
            bbox_half_height=float(flickr["bbox_half_height"]),
            user_agent=flickr["user_agent"],
            session=session,
        )

    def build_params(self, bbox: str, page: int) -> Dict[str, str]:
        return {
            "method": FLICKR_METHOD_NAME,
            "api_key": self.api_key,
            "bbox": bbox,
            "safe_search": FLICKR_SAFE_SEARCH,
            "extras": FLICKR_EXTRAS,
            "format": FLICKR_DATA_FORMAT,
            "nojsoncallback": FLICKR_NO_JSON_CALLBACK,
            "page": str(page),
        }

    def _get_json(self, params: Dict[str, str]) -> Dict:
        logger.debug(f"Flickr request {sanitize_sensitive_data(params)}")
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FlickrRequestException(f"Could not complete the Flickr request: {e}")

        try:
            payload = response.json()
        except ValueError as e:
            raise JsonParseException(f"Flickr response is not valid JSON: {e}")

        if not isinstance(payload, dict):
            raise JsonParseException("Flickr response is not a JSON object")

        if payload.get("stat") == "fail":
            raise FlickrRequestException(
                f"Flickr error {payload.get('code', '?')}: {payload.get('message', 'unknown error')}"
            )
        return payload

    def _search_page(self, bbox: str, page: int) -> Dict:
        payload = self._get_json(self.build_params(bbox, page))
        photos_dict = payload.get("photos")
        if not isinstance(photos_dict, dict):
            raise JsonParseException("Cant find key 'photos' in response to the Flickr search request.")
        if "pages" not in photos_dict:
            raise JsonParseException("Cant find key 'pages' in response to the Flickr search request.")
        return photos_dict

    def _parse_photos(self, photos_dict: Dict) -> List[PhotoMetadata]:
        photo_array = photos_dict.get("photo")
        if not isinstance(photo_array, list):
            raise JsonParseException("Cant find key 'photo' in response to the Flickr search request.")

        photos = []
        for photo in photo_array:
            if len(photos) >= self.max_photos:
                break
            url = photo.get("url_m") if isinstance(photo, dict) else None
            photo_id = photo.get("id") if isinstance(photo, dict) else None
            if not url or not photo_id:
                logger.debug(f"Skipping Flickr photo without url_m or id: {photo}")
                continue
            photos.append(PhotoMetadata(url=url, title=photo.get("title") or "", id=str(photo_id)))
        return photos

    def search_photos(
        self,
        latitude: float,
        longitude: float,
        page: int = 1,
        on_count: Optional[Callable[[int], None]] = None,
    ) -> FlickrSearchResult:
        """
        Search one page of geotagged photos around a coordinate.

        Args:
            latitude: Center latitude
            longitude: Center longitude
            page: Requested page, clamped to [1, page_limit]
            on_count: Called with the number of photos about to be returned

        Returns:
            FlickrSearchResult with at most max_photos entries and the cursor
            for the next search
        """
        page = max(1, min(int(page), self.page_limit))
        bbox = bounding_box(latitude, longitude, self.bbox_half_width, self.bbox_half_height)

        photos_dict = self._search_page(bbox, page)
        pages = _parse_count(photos_dict.get("pages"), "pages")
        page_limit = min(pages, self.page_limit)

        if page_limit and page > page_limit:
            logger.info(f"Flickr page {page} beyond last page {page_limit} for bbox {bbox}, rolling over to page 1")
            page = 1
            photos_dict = self._search_page(bbox, page)
            pages = _parse_count(photos_dict.get("pages"), "pages")
            page_limit = min(pages, self.page_limit)

        total = _parse_count(photos_dict.get("total", 0), "total")
        photos = self._parse_photos(photos_dict) if total > 0 else []

        if on_count:
            on_count(len(photos))

        result = FlickrSearchResult(
            photos=photos,
            page=page,
            pages=pages,
            total=total,
            next_page=next_page_cursor(page, page_limit),
        )
        logger.info(
            f"Flickr search ({latitude}, {longitude}) page {page}/{pages}: "
            f"{len(photos)} photos, next page {result.next_page}"
        )
        return result

    def download(self, url: str) -> bytes:
        """Fetch raw image bytes"""
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FileDownloadException(f"Image does not exist at {url}: {e}")

        if not response.content:
            raise FileDownloadException(f"Image at {url} is empty")
        return response.content
