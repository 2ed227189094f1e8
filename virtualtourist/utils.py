import logging
import os
import tempfile
import threading
from datetime import datetime, timezone

# Serialises cache file replacement within this process
_file_write_lock = threading.Lock()

SENSITIVE_KEYS = ("api_key", "apikey", "secret", "token", "password")


class ColoredFormatter(logging.Formatter):
    """Log formatter that colours the level name for terminal output"""

    COLORS = {
        'DEBUG': '\033[94m',
        'INFO': '\033[92m',
        'WARNING': '\033[93m',
        'ERROR': '\033[91m',
        'CRITICAL': '\033[95m',
    }
    RESET = '\033[0m'

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        return super().format(record)


def now_utc():
    """Returns current datetime in UTC (aware)"""
    return datetime.now(timezone.utc)


def mask_value(value):
    if isinstance(value, str) and len(value) > 4:
        return f"{value[:2]}***{value[-2:]}"
    return "***"


def sanitize_sensitive_data(data, sensitive_keys=SENSITIVE_KEYS):
    """
    Mask secrets (API keys, tokens) before logging request parameters.

    Args:
        data: Dictionary or list to sanitize. Other values are returned unchanged.
        sensitive_keys: Key fragments that mark a value as sensitive

    Returns:
        Sanitized copy of the data
    """
    if isinstance(data, dict):
        sanitized = {}
        for k, v in data.items():
            if any(sens in str(k).lower() for sens in sensitive_keys):
                sanitized[k] = mask_value(v)
            elif isinstance(v, (dict, list)):
                sanitized[k] = sanitize_sensitive_data(v, sensitive_keys)
            else:
                sanitized[k] = v
        return sanitized

    if isinstance(data, list):
        return [sanitize_sensitive_data(item, sensitive_keys) for item in data]

    return data


def safe_write_bytes(path, data: bytes):
    """Write bytes to path atomically (temp file in the same directory, then replace)"""
    with _file_write_lock:
        dirpath = os.path.dirname(path) or "."
        os.makedirs(dirpath, exist_ok=True)
        with tempfile.NamedTemporaryFile("wb", dir=dirpath, delete=False) as tmp:
            tmp_path = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, path)


def format_size_py(size):
    if size is None:
        return "0 B"
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024:
            return f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} TB"
