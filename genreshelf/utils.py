# Copyright (c) 2025 Marcus Dillavou <line72@line72.net>
# Part of the Genreshelf Project
# Released under the AGPLv3 or later

import logging
import os
from pathlib import Path

# Development mode path
DEV_IMAGES = Path(__file__).parent.parent / "public" / "images"

# Installed mode path (system-wide: /usr/share/genreshelf/images)
INSTALLED_IMAGES = Path("/usr/share") / "genreshelf" / "images"

DEFAULT_PORT = 4000
DEFAULT_ENVIRONMENT = "development"


def get_logger():
    return logging.getLogger("genreshelf")


def default_images_path() -> Path:
    return DEV_IMAGES if os.path.exists(DEV_IMAGES) else INSTALLED_IMAGES


def port_from_env() -> int:
    value = os.getenv("PORT")
    if not value:
        return DEFAULT_PORT
    try:
        return int(value)
    except ValueError:
        get_logger().warning(f"Ignoring invalid PORT {value!r}, using {DEFAULT_PORT}")
        return DEFAULT_PORT


def environment_from_env() -> str:
    return os.getenv("GENRESHELF_ENV") or DEFAULT_ENVIRONMENT
