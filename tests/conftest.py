import os
import tempfile

# Keep test runs off the network and out of the repository's output dir.
os.environ.setdefault("INDIAMAP_OUTPUT_DIR", tempfile.mkdtemp(prefix="indiamap-test-"))
os.environ.setdefault("INDIAMAP_OFFLINE", "1")

import pytest
import requests


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error", response=self)

    def json(self):
        if self.json_error is not None:
            raise self.json_error
        return self.payload


class FakeSession:
    """Stands in for ``requests.Session``; records every GET."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def polygon(lon, lat, size=1.0):
    return {
        "type": "Polygon",
        "coordinates": [[
            [lon, lat], [lon + size, lat], [lon + size, lat + size],
            [lon, lat + size], [lon, lat],
        ]],
    }


def feature(properties, lon=78.0, lat=20.0):
    return {"type": "Feature", "properties": properties,
            "geometry": polygon(lon, lat)}


def world(*features):
    return {"type": "FeatureCollection", "features": list(features)}


@pytest.fixture
def status_log():
    messages = []
    return messages
