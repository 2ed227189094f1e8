"""
VirtualTourist - travel photo albums for map pins
Application factory and logging setup
"""
import os
import sys
import logging

from flask import Flask
import structlog

from virtualtourist import constants
from virtualtourist.db import db, database_uri, init_db
from virtualtourist.exceptions import register_exception_handlers
from virtualtourist.flickr import FlickrClient
from virtualtourist.image_cache import configure_image_cache
from virtualtourist.photo_resolver import PhotoResolver
from virtualtourist.routes.map_region import map_region_bp
from virtualtourist.routes.pins import pins_bp
from virtualtourist.routes.system import system_bp
from virtualtourist.services import EXTENSION_KEY, build_services
from virtualtourist.settings import (
    apply_env_overrides,
    get_data_dir,
    load_settings,
    merge_settings,
    verify_settings,
)
from virtualtourist.utils import ColoredFormatter

logger = structlog.get_logger('main')


def configure_logging(level=logging.INFO):
    formatter = ColoredFormatter(
        '[%(asctime)s.%(msecs)03d] %(levelname)s (%(module)s) %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=[handler])

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if os.environ.get('LOG_FORMAT') == 'json' else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def create_app(settings=None, data_dir=None, flickr_client=None):
    """
    Application factory

    Args:
        settings: Overrides merged over DEFAULT_SETTINGS; settings.yaml is loaded when omitted
        data_dir: Directory holding the SQLite database (default: VIRTUALTOURIST_DATA_DIR)
        flickr_client: Client to use instead of one built from settings
    """
    if settings is None:
        settings = load_settings()
    else:
        settings = apply_env_overrides(merge_settings(constants.DEFAULT_SETTINGS, settings))

    valid, errors = verify_settings(settings)
    if not valid:
        for error in errors:
            logger.warning(f"Settings problem at {error['path']}: {error['error']}")

    data_dir = data_dir or get_data_dir()
    os.makedirs(data_dir, exist_ok=True)

    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = database_uri(data_dir)
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config["VIRTUALTOURIST_SETTINGS"] = settings

    db.init_app(app)
    register_exception_handlers(app)

    app.register_blueprint(system_bp)
    app.register_blueprint(pins_bp)
    app.register_blueprint(map_region_bp)

    image_cache = configure_image_cache(
        settings["cache"]["images_dir"],
        int(settings["cache"]["memory_max_items"]),
    )
    flickr_client = flickr_client or FlickrClient.from_settings(settings)
    app.extensions[EXTENSION_KEY] = build_services(flickr_client, PhotoResolver(image_cache, flickr_client))

    init_db(app)
    logger.info(f"VirtualTourist ready (database in {data_dir})")
    return app


def main():
    configure_logging()
    app = create_app()
    server = app.config["VIRTUALTOURIST_SETTINGS"]["server"]
    app.run(host=server["host"], port=int(server["port"]))


if __name__ == '__main__':
    main()
