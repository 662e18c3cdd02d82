"""Flask application exposing shape projection sessions over JSON."""

import logging
import math
import os
import threading
import time
import uuid

from flask import Flask, jsonify, request

from .boundaries import fetch_country
from .config import ProjectionSettings
from .controller import ProjectionController
from .errors import BoundaryLookupError, MapShiftError
from .geojson import area_ratio, geometry_from_geojson, geometry_to_geojson
from .geometry import Bounds, LatLng
from .session import current_geometry, projection_info
from .viewport import MapViewport

logger = logging.getLogger(__name__)

app = Flask(__name__)

SETTINGS = ProjectionSettings.from_env()

# Shapes nobody has touched for SHAPE_TTL_SECONDS are dropped; past MAX_SHAPES
# the least recently used one goes.
MAX_SHAPES = int(os.environ.get("MAPSHIFT_MAX_SHAPES", 500))
SHAPE_TTL_SECONDS = float(os.environ.get("MAPSHIFT_SHAPE_TTL", 3600))

# shape id -> controller, and shape id -> last access (monotonic seconds)
SHAPES: dict[str, ProjectionController] = {}
LAST_SEEN: dict[str, float] = {}
_shapes_lock = threading.Lock()
_clock = time.monotonic


def _finite(value) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"expected a finite number, got {value!r}")
    return number


def _parse_bounds(data: dict | None) -> Bounds | None:
    if data is None:
        return None
    return Bounds.from_edges(_finite(data["south"]), _finite(data["west"]),
                             _finite(data["north"]), _finite(data["east"]))


def _shape_payload(shape_id: str, controller: ProjectionController) -> dict:
    # one snapshot for geometry, info and area so they always agree
    session = controller.session
    geometry = current_geometry(session)
    payload = {
        "id": shape_id,
        "geometry": geometry_to_geojson(geometry),
        "info": projection_info(session).to_dict(),
        "center": {"lat": session.original_center.lat, "lng": session.original_center.lng},
        "pending": controller.has_pending,
    }
    if session.is_transformed:
        payload["area_ratio"] = area_ratio(session.original_geometry, geometry)
    return payload


def _drop_locked(shape_id: str) -> ProjectionController | None:
    LAST_SEEN.pop(shape_id, None)
    controller = SHAPES.pop(shape_id, None)
    if controller is not None:
        controller.remove()
    return controller


def _evict_locked(now: float) -> None:
    for shape_id, seen in list(LAST_SEEN.items()):
        if now - seen > SHAPE_TTL_SECONDS:
            _drop_locked(shape_id)
            logger.info("shape %s expired", shape_id)
    while len(SHAPES) >= MAX_SHAPES and LAST_SEEN:
        oldest = min(LAST_SEEN, key=LAST_SEEN.get)
        _drop_locked(oldest)
        logger.info("shape %s evicted, registry full", oldest)


def _get_shape(shape_id: str) -> ProjectionController | None:
    now = _clock()
    with _shapes_lock:
        _evict_locked(now)
        controller = SHAPES.get(shape_id)
        if controller is not None:
            LAST_SEEN[shape_id] = now
        return controller


@app.route("/api/shapes", methods=["POST"])
def create_shape():
    data = request.get_json(force=True)
    try:
        geometry = geometry_from_geojson(data["geometry"])
        bounds = _parse_bounds(data.get("bounds"))
        viewport = MapViewport.from_dict(data["viewport"]) if data.get("viewport") else None
    except MapShiftError as exc:
        return jsonify({"error": str(exc)}), 400
    except (KeyError, TypeError, ValueError) as exc:
        return jsonify({"error": f"Invalid parameters: {exc}"}), 400

    try:
        controller = ProjectionController(
            geometry, bounds,
            to_latlng=viewport.container_point_to_latlng if viewport else None,
            settings=SETTINGS,
        )
    except MapShiftError as exc:
        return jsonify({"error": str(exc)}), 400

    shape_id = uuid.uuid4().hex
    now = _clock()
    with _shapes_lock:
        _evict_locked(now)
        SHAPES[shape_id] = controller
        LAST_SEEN[shape_id] = now
    logger.info("shape %s created", shape_id)
    return jsonify(_shape_payload(shape_id, controller)), 201


@app.route("/api/shapes/<shape_id>", methods=["GET"])
def get_shape(shape_id):
    controller = _get_shape(shape_id)
    if controller is None:
        return jsonify({"error": f"Unknown shape: {shape_id}"}), 404
    return jsonify(_shape_payload(shape_id, controller))


@app.route("/api/shapes/<shape_id>/move", methods=["POST"])
def move_shape(shape_id):
    controller = _get_shape(shape_id)
    if controller is None:
        return jsonify({"error": f"Unknown shape: {shape_id}"}), 404

    data = request.get_json(force=True)
    try:
        if data.get("viewport"):
            viewport = MapViewport.from_dict(data["viewport"])
            controller.to_latlng = viewport.container_point_to_latlng
        if "lat" in data and "lng" in data:
            controller.request_update_latlng(LatLng(_finite(data["lat"]), _finite(data["lng"])))
            accepted = True
        else:
            accepted = controller.request_update(_finite(data["x"]), _finite(data["y"]))
    except (KeyError, TypeError, ValueError) as exc:
        return jsonify({"error": f"Invalid parameters: {exc}"}), 400

    if request.args.get("sync") in ("1", "true"):
        controller.flush()

    payload = _shape_payload(shape_id, controller)
    payload["accepted"] = accepted
    return jsonify(payload), 202 if payload["pending"] else 200


@app.route("/api/shapes/<shape_id>/reset", methods=["POST"])
def reset_shape(shape_id):
    controller = _get_shape(shape_id)
    if controller is None:
        return jsonify({"error": f"Unknown shape: {shape_id}"}), 404
    controller.reset()
    return jsonify(_shape_payload(shape_id, controller))


@app.route("/api/shapes/<shape_id>", methods=["DELETE"])
def delete_shape(shape_id):
    with _shapes_lock:
        controller = _drop_locked(shape_id)
    if controller is None:
        return jsonify({"error": f"Unknown shape: {shape_id}"}), 404
    logger.info("shape %s removed", shape_id)
    return "", 204


@app.route("/api/countries/<name>")
def country(name):
    try:
        shape = fetch_country(name)
    except BoundaryLookupError as exc:
        return jsonify({"error": str(exc)}), 502
    return jsonify({
        "name": shape.name,
        "geometry": geometry_to_geojson(shape.geometry),
        "bounds": {
            "south": shape.bounds.south_west.lat,
            "west": shape.bounds.south_west.lng,
            "north": shape.bounds.north_east.lat,
            "east": shape.bounds.north_east.lng,
        },
    })
