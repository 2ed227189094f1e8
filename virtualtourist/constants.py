import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.environ.get("VIRTUALTOURIST_DATA_DIR", os.path.join(os.getcwd(), "data"))
CONFIG_DIR = os.environ.get("VIRTUALTOURIST_CONFIG_DIR", os.path.join(os.getcwd(), "config"))
DB_FILENAME = "virtualtourist.db"
CONFIG_FILENAME = "settings.yaml"
IMAGES_DIRNAME = "images"

# Flickr REST API
FLICKR_BASE_URL = "https://api.flickr.com/services/rest/"
FLICKR_METHOD_NAME = "flickr.photos.search"
FLICKR_EXTRAS = "url_m"
FLICKR_SAFE_SEARCH = "1"
FLICKR_DATA_FORMAT = "json"
FLICKR_NO_JSON_CALLBACK = "1"

# Flickr serves at most 4000 results per search (40 pages of 100)
FLICKR_PAGE_LIMIT = 40
MAX_PHOTOS_TO_FETCH = 15

BOUNDING_BOX_HALF_WIDTH = 0.5
BOUNDING_BOX_HALF_HEIGHT = 0.5
LAT_MIN = -90.0
LAT_MAX = 90.0
LON_MIN = -180.0
LON_MAX = 180.0

# Center of North America
DEFAULT_MAP_REGION = {
    "latitude": 39.50,
    "longitude": -98.35,
    "span_latitude": 30.0,
    "span_longitude": 30.0,
}

DEFAULT_SETTINGS = {
    "flickr": {
        "api_key": "",
        "base_url": FLICKR_BASE_URL,
        "timeout": 10,
        "max_photos": MAX_PHOTOS_TO_FETCH,
        "page_limit": FLICKR_PAGE_LIMIT,
        "bbox_half_width": BOUNDING_BOX_HALF_WIDTH,
        "bbox_half_height": BOUNDING_BOX_HALF_HEIGHT,
        "user_agent": "VirtualTourist photo album",
    },
    "cache": {
        "memory_max_items": 200,
        "images_dir": "",
    },
    "server": {
        "host": "0.0.0.0",
        "port": 8465,
    },
}
