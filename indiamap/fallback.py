"""Embedded India state boundaries used when live data is unavailable.

Boundaries are hand-simplified outlines (lon, lat), good enough for a
population overview but not for anything cartographic.
"""

from .models import FeatureCollection

# (name, population, capital, closed boundary ring)
_STATES = [
    ("Maharashtra", 112374333, "Mumbai", [
        [72.6, 21.0], [76.8, 21.2], [78.2, 19.8], [77.5, 17.5],
        [75.8, 15.8], [73.5, 15.6], [72.8, 16.8], [72.6, 21.0],
    ]),
    ("Uttar Pradesh", 199812341, "Lucknow", [
        [77.0, 30.3], [84.6, 30.1], [84.4, 23.8], [82.2, 23.6],
        [80.8, 24.2], [78.5, 24.1], [77.2, 26.8], [77.0, 30.3],
    ]),
    ("West Bengal", 91276115, "Kolkata", [
        [85.8, 27.2], [89.8, 26.8], [89.6, 25.2], [88.8, 22.0],
        [87.2, 21.6], [85.2, 22.8], [85.4, 25.2], [85.8, 27.2],
    ]),
    ("Tamil Nadu", 72147030, "Chennai", [
        [76.2, 13.2], [80.3, 13.4], [80.1, 10.4], [78.8, 8.2],
        [77.2, 8.0], [76.5, 9.8], [76.0, 11.6], [76.2, 13.2],
    ]),
    ("Karnataka", 61095297, "Bangalore", [
        [74.2, 18.4], [78.8, 18.2], [78.6, 14.8], [77.6, 12.0],
        [75.8, 11.6], [74.0, 12.8], [73.8, 15.6], [74.2, 18.4],
    ]),
    ("Gujarat", 60439692, "Gandhinagar", [
        [68.2, 24.6], [74.8, 24.8], [74.6, 20.2], [72.8, 19.6],
        [70.2, 20.4], [68.8, 22.8], [68.2, 24.6],
    ]),
    ("Rajasthan", 68548437, "Jaipur", [
        [69.2, 30.2], [78.2, 30.0], [78.0, 26.2], [76.2, 24.2],
        [72.8, 23.8], [70.2, 24.8], [69.0, 27.8], [69.2, 30.2],
    ]),
    ("Andhra Pradesh", 49386799, "Amaravati", [
        [76.8, 19.2], [84.8, 19.0], [84.6, 16.2], [80.2, 13.6],
        [78.2, 13.4], [77.2, 15.8], [76.8, 19.2],
    ]),
    ("Madhya Pradesh", 72626809, "Bhopal", [
        [74.8, 26.8], [82.8, 26.6], [82.6, 21.6], [78.8, 21.4],
        [76.2, 21.8], [74.6, 23.8], [74.8, 26.8],
    ]),
    ("Kerala", 33406061, "Thiruvananthapuram", [
        [74.8, 12.8], [77.2, 12.6], [77.0, 8.2], [76.2, 8.0],
        [75.8, 10.6], [74.8, 12.8],
    ]),
]

FALLBACK_STATE_NAMES = tuple(name for name, *_ in _STATES)


def fallback_geojson() -> dict:
    """Return a fresh copy of the embedded dataset as a GeoJSON dict."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"name": name, "population": population,
                               "capital": capital},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[list(pt) for pt in ring]],
                },
            }
            for name, population, capital, ring in _STATES
        ],
    }


def fallback_collection() -> FeatureCollection:
    """The embedded ten-state FeatureCollection."""
    return FeatureCollection.from_geojson(fallback_geojson(), source="fallback")
