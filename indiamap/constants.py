"""Configuration constants, paths, and styling for the India map."""

import os
import pathlib
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(
            f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


def _env_list(name: str, default: tuple) -> tuple:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


# ── Remote world-boundaries source ──────────────────────────────────────
# Natural Earth admin-0 countries: carries NAME, NAME_EN and POP_EST.
WORLD_GEOJSON_URL = os.environ.get(
    "INDIAMAP_WORLD_URL",
    "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/"
    "master/geojson/ne_110m_admin_0_countries.geojson",
)

# Seconds; expiry counts as a network failure.
REQUEST_TIMEOUT = _env_float("INDIAMAP_TIMEOUT", 10.0)

USER_AGENT = "indiamap/0.1"

TARGET_COUNTRY = "India"

# Property keys checked (exact, case-sensitive) for the country name.
NAME_KEYS = _env_list("INDIAMAP_NAME_KEYS", ("NAME", "name", "NAME_EN"))

# Property keys checked for a population count, first hit wins.
POPULATION_KEYS = ("population", "POP_EST", "pop_est")

CAPITAL_KEYS = ("capital", "CAPITAL")

# ── Status messages ─────────────────────────────────────────────────────
STATUS_LOADING = "Loading India map data..."
STATUS_FALLBACK = "Using fallback map data"
STATUS_REMOTE_OK = "Loaded {count} features from remote source"

# ── Scene styling ───────────────────────────────────────────────────────
# Tallest state extrusion in projected metres.
MAX_HEIGHT_M = _env_float("INDIAMAP_MAX_HEIGHT", 150_000.0)
MIN_HEIGHT_M = 5_000.0
BASE_THICKNESS_M = 20_000.0
BASE_MARGIN_M = 100_000.0

# Population ramp endpoints (RGBA, 0-1): teal for the least populous,
# coral red for the most.
LOW_POP_COLOR = [0x4e / 255, 0xcd / 255, 0xc4 / 255, 1.0]
HIGH_POP_COLOR = [0xff / 255, 0x6b / 255, 0x6b / 255, 1.0]
BASE_COLOR = [0x0a / 255, 0x0a / 255, 0x1a / 255, 1.0]

# Viewer defaults, expressed for a map whose longest side is 60 units.
CAMERA_FOV_DEG = 60.0
CAMERA_POSITION = (0.0, 25.0, 40.0)
CAMERA_REFERENCE_EXTENT = 60.0

# Configure base paths
BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
OUTPUT_DIR = pathlib.Path(os.environ.get("INDIAMAP_OUTPUT_DIR", BASE_DIR / "output"))
