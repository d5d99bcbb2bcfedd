import os
import pathlib

from indiamap import constants as _map_constants

BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
OUTPUT_DIR = _map_constants.OUTPUT_DIR

WORLD_GEOJSON_URL = _map_constants.WORLD_GEOJSON_URL
REQUEST_TIMEOUT = _map_constants.REQUEST_TIMEOUT

# Set INDIAMAP_OFFLINE=1 to skip the remote source and serve the embedded dataset
OFFLINE = os.environ.get("INDIAMAP_OFFLINE", "").strip() in ("1", "true", "yes")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "INDIAMAP_CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]
