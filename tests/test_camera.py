import pytest

from softrender.camera import Camera, TransformStage, look_at, projection, viewport
from softrender.errors import DegenerateGeometryError
from softrender.vecmath import Vec3, Vec4, to_vec4


def _rows(m):
    return [list(r) for r in m.m]


def test_look_at_down_negative_z_is_identity():
    m = look_at(Vec3(0.0, 0.0, 3.0), Vec3(0.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))
    expected = [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]]
    for row, exp in zip(_rows(m), expected):
        assert row == pytest.approx(exp)


def test_look_at_translates_by_minus_center():
    center = Vec3(0.0, 0.0, 1.0)
    m = look_at(Vec3(0.0, 0.0, 3.0), center, Vec3(0.0, 1.0, 0.0))
    p = m.mul_vec4(to_vec4(center))
    assert (p.x, p.y, p.z, p.w) == pytest.approx((0.0, 0.0, 0.0, 1.0))


def test_look_at_basis_is_orthonormal():
    m = look_at(Vec3(2.0, 1.5, 4.0), Vec3(0.3, -0.2, 0.0), Vec3(0.0, 1.0, 0.0))
    rows = [Vec3(*m.m[i][:3]) for i in range(3)]
    for i in range(3):
        assert rows[i].norm() == pytest.approx(1.0)
        for j in range(i + 1, 3):
            assert rows[i].dot(rows[j]) == pytest.approx(0.0, abs=1e-12)
    # forward row points from the target to the eye
    forward = (Vec3(2.0, 1.5, 4.0) - Vec3(0.3, -0.2, 0.0)).normalize()
    assert rows[2].dot(forward) == pytest.approx(1.0)


def test_look_at_rejects_eye_on_target():
    with pytest.raises(DegenerateGeometryError):
        look_at(Vec3(1.0, 1.0, 1.0), Vec3(1.0, 1.0, 1.0), Vec3(0.0, 1.0, 0.0))


def test_projection_only_touches_w():
    m = projection(3.0)
    assert m.m[3][2] == pytest.approx(-1.0 / 3.0)
    p = m.mul_vec4(Vec4(1.0, 2.0, 1.5, 1.0))
    assert (p.x, p.y, p.z) == (1.0, 2.0, 1.5)
    assert p.w == pytest.approx(0.5)


def test_projection_needs_eye_off_plane():
    with pytest.raises(ValueError):
        projection(0.0)
    with pytest.raises(ValueError):
        projection(-1.5e-15)


def test_viewport_maps_unit_cube():
    m = viewport(10.0, 20.0, 200.0, 100.0, 255.0)
    lo = m.mul_vec4(Vec4(-1.0, -1.0, -1.0, 1.0))
    hi = m.mul_vec4(Vec4(1.0, 1.0, 1.0, 1.0))
    assert (lo.x, lo.y, lo.z) == pytest.approx((10.0, 20.0, 0.0))
    assert (hi.x, hi.y, hi.z) == pytest.approx((210.0, 120.0, 255.0))


def test_to_screen_origin_lands_in_buffer_center():
    stage = TransformStage.for_camera(Camera(Vec3(0.0, 0.0, 3.0)), 100, 100, 255.0)
    s = stage.to_screen(Vec3(0.0, 0.0, 0.0))
    assert (s.x, s.y, s.z) == pytest.approx((50.0, 50.0, 127.5))


def test_to_screen_foreshortens_and_orders_depth():
    stage = TransformStage.for_camera(Camera(Vec3(0.0, 0.0, 3.0)), 100, 100, 255.0)
    far = stage.to_screen(Vec3(1.0, 0.0, 0.0))
    near = stage.to_screen(Vec3(1.0, 0.0, 1.0))
    assert far.x == pytest.approx(100.0)
    # w = 1 - 1/3, so x is stretched by 3/2 around the center
    assert near.x == pytest.approx(125.0)
    # closer to the eye means greater depth
    assert near.z > far.z


def test_camera_move():
    cam = Camera(Vec3(0.0, 0.0, 3.0))
    cam.move(0.5, -0.25)
    assert cam.eye == Vec3(0.5, -0.25, 3.0)
    with pytest.raises(ValueError):
        cam.move(0.0, 0.0, -3.0)
    assert cam.eye == Vec3(0.5, -0.25, 3.0)


def test_camera_move_rejects_near_zero_eye():
    cam = Camera(Vec3(0.0, 0.0, 0.1))
    with pytest.raises(ValueError):
        cam.move(0.0, 0.0, -0.1 + 1e-12)
    assert cam.eye == Vec3(0.0, 0.0, 0.1)
    cam.move(0.0, 0.0, -0.2)
    assert cam.eye.z == pytest.approx(-0.1)
