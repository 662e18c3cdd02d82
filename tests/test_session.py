import pytest

from mapshift.config import ProjectionSettings
from mapshift.errors import UnsupportedGeometryError
from mapshift.geometry import Bounds, LatLng, Polygon
from mapshift.projection import ProjectionTransform
from mapshift.session import (
    Initialize,
    ProjectionSession,
    Reset,
    Update,
    apply_event,
    current_geometry,
    describe_distortion,
    initialize_shape_projection,
    projection_info,
    reset_projection,
    update_shape_projection,
)


def _session_with(top_h, bottom_h, unit_square, top_v=1.0, bottom_v=1.0):
    t = ProjectionTransform(0.8, 0.2, top_h, bottom_h, top_v, bottom_v, 0.5, 0.5)
    return ProjectionSession(
        original_geometry=unit_square,
        original_center=LatLng(0.5, 0.5),
        original_bounds=Bounds.from_edges(0, 0, 1, 1),
        transformed_geometry=unit_square,
        current_transform=t,
    )


def test_initialize_is_untransformed(unit_square, unit_bounds):
    s = initialize_shape_projection(unit_square, unit_bounds)
    assert not s.is_transformed
    assert s.original_center == LatLng(0.5, 0.5)
    assert s.transformed_geometry is None
    assert current_geometry(s) is unit_square
    assert projection_info(s).is_transformed is False


def test_initialize_derives_bounds_when_missing(country_like):
    s = initialize_shape_projection(country_like)
    assert s.original_bounds == Bounds.from_edges(44.0, 10.0, 52.0, 18.0)


def test_initialize_rejects_non_polygons():
    with pytest.raises(UnsupportedGeometryError):
        initialize_shape_projection({"type": "LineString", "coordinates": []},
                                    Bounds.from_edges(0, 0, 1, 1))


def test_update_sets_transform_and_geometry_together(unit_square, unit_bounds):
    s0 = initialize_shape_projection(unit_square, unit_bounds)
    s1 = update_shape_projection(s0, LatLng(60.0, 10.0))
    assert s1 is not s0
    assert s1.is_transformed
    assert s1.current_transform.center_lat == 60.0
    assert isinstance(s1.transformed_geometry, Polygon)
    # originals are carried over untouched and the old snapshot is unchanged
    assert s1.original_geometry is s0.original_geometry
    assert s1.original_bounds is s0.original_bounds
    assert s0.current_transform is None
    assert current_geometry(s1) is s1.transformed_geometry


def test_update_uses_session_settings(unit_square, unit_bounds):
    settings = ProjectionSettings(smoothing=0.0)
    s = initialize_shape_projection(unit_square, unit_bounds, settings)
    s = update_shape_projection(s, LatLng(70.0, 0.5))
    # no smoothing headroom: shape is only translated
    xs = [c[0] for c in s.transformed_geometry.rings[0]]
    assert max(xs) - min(xs) == pytest.approx(1.0)


def test_reset_always_returns_to_original(unit_square, unit_bounds):
    s = initialize_shape_projection(unit_square, unit_bounds)
    for session in (s, update_shape_projection(s, LatLng(45.0, 3.0))):
        r = reset_projection(session)
        assert projection_info(r).is_transformed is False
        assert current_geometry(r) == unit_square
        assert r.original_center == s.original_center


def test_half_set_session_is_rejected(unit_square, unit_bounds):
    t = ProjectionTransform(1, 0, 1, 1, 1, 1, 0, 0)
    with pytest.raises(ValueError):
        ProjectionSession(unit_square, unit_bounds.center, unit_bounds, current_transform=t)


@pytest.mark.parametrize("avg, expected", [
    (1.0, "Minimal distortion"),
    (1.05, "Minimal distortion"),
    (1.2, "Light distortion"),
    (1.45, "Moderate distortion"),
    (1.6, "Heavy distortion"),
    (3.0, "Heavy distortion"),
])
def test_description_tiers(avg, expected):
    assert describe_distortion(avg, 0.0) == expected


def test_gradient_suffix():
    assert describe_distortion(1.45, 0.3) == "Moderate distortion (gradient)"
    assert describe_distortion(1.45, 0.2) == "Moderate distortion"


def test_projection_info_fields(unit_square):
    info = projection_info(_session_with(1.6, 1.3, unit_square, top_v=1.2, bottom_v=1.1))
    assert info.is_transformed
    assert info.average_horizontal_scale == pytest.approx(1.45)
    assert info.average_vertical_scale == pytest.approx(1.15)
    assert info.distortion_range == pytest.approx(0.3)
    assert info.target_latitude == 0.5
    assert info.description == "Moderate distortion (gradient)"


def test_projection_info_minimal(unit_square):
    info = projection_info(_session_with(1.05, 1.05, unit_square))
    assert info.description == "Minimal distortion"
    assert info.to_dict()["description"] == "Minimal distortion"


def test_untransformed_info_dict():
    info = projection_info(initialize_shape_projection(
        Polygon.from_coords([[[0, 0], [1, 0], [1, 1], [0, 0]]])))
    d = info.to_dict()
    assert d["is_transformed"] is False
    assert d["average_horizontal_scale"] == 1.0
    assert d["target_latitude"] is None


def test_apply_event_sequence(unit_square, unit_bounds):
    s = apply_event(None, Initialize(unit_square, unit_bounds))
    s = apply_event(s, Update(LatLng(50.0, 0.0)))
    assert s.is_transformed
    s = apply_event(s, Update(LatLng(-50.0, 0.0)))
    assert s.current_transform.center_lat == -50.0
    s = apply_event(s, Reset())
    assert not s.is_transformed
    assert current_geometry(s) is unit_square


def test_apply_event_keeps_settings_on_reinitialize(unit_square, country_like):
    settings = ProjectionSettings(inset=0.1)
    s = initialize_shape_projection(unit_square, settings=settings)
    s = apply_event(s, Initialize(country_like))
    assert s.settings is settings
    assert s.original_geometry is country_like


def test_apply_event_needs_session():
    with pytest.raises(ValueError):
        apply_event(None, Update(LatLng(0, 0)))
    with pytest.raises(ValueError):
        apply_event(None, Reset())
