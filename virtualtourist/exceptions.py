"""
VirtualTourist - Custom Exceptions and Exception Handlers
"""
import structlog
from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = structlog.get_logger('exceptions')

ERROR_DOMAIN = "VirtualTourist.Error"


class ErrorCodes:
    PERSISTENCE_INIT_ERROR = 9000
    JSON_PARSE_ERROR = 9001
    FLICKR_REQUEST_ERROR = 9002
    FLICKR_FILE_DOWNLOAD_ERROR = 9003
    IMAGE_CONVERSION_ERROR = 9004
    FILE_NOT_FOUND_ERROR = 9005


class VirtualTouristException(Exception):
    """Base exception for VirtualTourist"""
    status_code = 400

    def __init__(self, message: str, code: str = "VIRTUALTOURIST_ERROR", error_number: int = None):
        self.message = message
        self.code = code
        self.error_number = error_number
        super().__init__(message)

    def to_dict(self):
        data = {
            'success': False,
            'code': self.code,
            'message': self.message,
        }
        if self.error_number is not None:
            data['domain'] = ERROR_DOMAIN
            data['error_number'] = self.error_number
        return data


class PersistenceException(VirtualTouristException):
    """Local store could not be created, opened or saved"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, code="PERSISTENCE_ERROR", error_number=ErrorCodes.PERSISTENCE_INIT_ERROR)
        logger.error(f"Persistence error: {message}")


class JsonParseException(VirtualTouristException):
    """Flickr answered with a payload we could not interpret"""
    status_code = 502

    def __init__(self, message: str):
        super().__init__(message, code="JSON_PARSE_ERROR", error_number=ErrorCodes.JSON_PARSE_ERROR)
        logger.error(f"JSON parse error: {message}")


class FlickrRequestException(VirtualTouristException):
    status_code = 502

    def __init__(self, message: str):
        super().__init__(message, code="FLICKR_REQUEST_ERROR", error_number=ErrorCodes.FLICKR_REQUEST_ERROR)
        logger.error(f"Flickr request error: {message}")


class FileDownloadException(VirtualTouristException):
    status_code = 502

    def __init__(self, message: str):
        super().__init__(message, code="FILE_DOWNLOAD_ERROR", error_number=ErrorCodes.FLICKR_FILE_DOWNLOAD_ERROR)
        logger.error(f"Image download error: {message}")


class ImageConversionException(VirtualTouristException):
    status_code = 502

    def __init__(self, message: str):
        super().__init__(message, code="IMAGE_CONVERSION_ERROR", error_number=ErrorCodes.IMAGE_CONVERSION_ERROR)
        logger.error(f"Image conversion error: {message}")


class FileNotFoundException(VirtualTouristException):
    status_code = 404

    def __init__(self, message: str):
        super().__init__(message, code="FILE_NOT_FOUND", error_number=ErrorCodes.FILE_NOT_FOUND_ERROR)
        logger.warning(f"File not found: {message}")


class NotFoundException(VirtualTouristException):
    """Requested pin or photo does not exist"""
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, code="NOT_FOUND")


class ValidationException(VirtualTouristException):
    """Validation-related exceptions"""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")
        logger.warning(f"Validation error: {message}")


def register_exception_handlers(app):
    """Register exception handlers with Flask app"""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({
            'success': False,
            'code': e.name.upper().replace(' ', '_'),
            'message': e.description
        }), e.code

    @app.errorhandler(VirtualTouristException)
    def handle_virtualtourist_exception(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(Exception)
    def handle_generic_exception(e):
        """Handle all other exceptions"""
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify({
            'success': False,
            'code': 'INTERNAL_ERROR',
            'message': 'An unexpected error occurred'
        }), 500
