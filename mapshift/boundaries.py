"""Country outline lookup via the OSM Nominatim search API."""

import logging
from dataclasses import dataclass

import requests

from .errors import BoundaryLookupError, UnsupportedGeometryError
from .geojson import geometry_from_geojson
from .geometry import Bounds, Geometry, geometry_bounds

logger = logging.getLogger(__name__)

NOMINATIM_URLS = [
    "https://nominatim.openstreetmap.org/search",
]

HEADERS = {
    "User-Agent": "mapshift/1.0 (mercator shape comparison)",
}

# Simplify outlines server-side; full-resolution borders run to 100k+ vertices.
POLYGON_THRESHOLD = 0.01


@dataclass
class CountryShape:
    name: str
    geometry: Geometry
    bounds: Bounds


def _fetch_nominatim(params: dict, timeout: int) -> list:
    """Run a Nominatim search, trying each mirror in turn."""
    last_err = None
    for url in NOMINATIM_URLS:
        try:
            resp = requests.get(url, params=params, headers=HEADERS, timeout=timeout)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("nominatim mirror %s failed: %s", url, exc)
            last_err = exc
    raise BoundaryLookupError(f"boundary lookup failed: {last_err}")


def fetch_country(name: str, timeout: int = 30) -> CountryShape:
    """Return the polygon outline of the country called `name`."""
    params = {
        "country": name,
        "format": "json",
        "polygon_geojson": 1,
        "polygon_threshold": POLYGON_THRESHOLD,
        "limit": 5,
    }
    results = _fetch_nominatim(params, timeout)

    for item in results:
        outline = item.get("geojson")
        if not outline:
            continue
        try:
            geometry = geometry_from_geojson(outline)
        except UnsupportedGeometryError:
            continue  # point or line results for places that share the name
        shape_name = item.get("display_name", name).split(",")[0].strip()
        logger.info("fetched outline for %s (%s)", shape_name, outline.get("type"))
        return CountryShape(name=shape_name, geometry=geometry,
                            bounds=geometry_bounds(geometry))

    raise BoundaryLookupError(f"no polygon outline found for {name!r}")
