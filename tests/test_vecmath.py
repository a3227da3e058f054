import math

import pytest

from softrender.errors import DegenerateGeometryError
from softrender.vecmath import (Mat3, Mat4, Vec3, Vec4, add, apply, cross, dehomogenize,
                                dot, length, normalize, scale, sub, to_vec4)


@pytest.mark.parametrize("v", [
    Vec3(1.0, 0.0, 0.0),
    Vec3(3.0, 4.0, 0.0),
    Vec3(-2.0, 7.5, 0.25),
    Vec3(1e-6, -1e-6, 3e-6),
    Vec3(1e6, 2e6, -3e6),
])
def test_normalize_has_unit_length(v):
    assert length(normalize(v)) == pytest.approx(1.0, abs=1e-9)


def test_normalize_zero_vector_raises():
    with pytest.raises(DegenerateGeometryError):
        normalize(Vec3(0.0, 0.0, 0.0))


def test_basic_vector_ops():
    u, v = Vec3(1.0, 2.0, 3.0), Vec3(4.0, 5.0, 6.0)
    assert add(u, v) == Vec3(5.0, 7.0, 9.0)
    assert sub(v, u) == Vec3(3.0, 3.0, 3.0)
    assert scale(u, 2.0) == Vec3(2.0, 4.0, 6.0)
    assert dot(u, v) == 32.0
    assert add(Vec4(1, 2, 3, 4), Vec4(1, 1, 1, 1)) == Vec4(2, 3, 4, 5)


def test_cross_is_orthogonal_and_right_handed():
    x, y = Vec3(1.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0)
    assert cross(x, y) == Vec3(0.0, 0.0, 1.0)

    u, v = Vec3(1.0, 2.0, 3.0), Vec3(-4.0, 0.5, 2.0)
    w = cross(u, v)
    assert dot(w, u) == pytest.approx(0.0)
    assert dot(w, v) == pytest.approx(0.0)


def test_apply_mat3_and_mat4():
    rot = Mat3.from_rows(Vec3(0, -1, 0), Vec3(1, 0, 0), Vec3(0, 0, 1))
    assert apply(rot, Vec3(1.0, 0.0, 0.0)) == Vec3(0.0, 1.0, 0.0)

    m = Mat4.from_linear(Mat3.identity(), Vec3(1.0, 2.0, 3.0))
    assert apply(m, to_vec4(Vec3(1.0, 1.0, 1.0))) == Vec4(2.0, 3.0, 4.0, 1.0)
    # direction vectors (w=0) ignore translation
    assert apply(m, Vec4(1.0, 1.0, 1.0, 0.0)) == Vec4(1.0, 1.0, 1.0, 0.0)


def test_apply_rejects_mismatched_sizes():
    with pytest.raises(TypeError):
        apply(Mat4.identity(), Vec3(1.0, 2.0, 3.0))
    with pytest.raises(TypeError):
        apply(Mat3.identity(), Vec4(1.0, 2.0, 3.0, 1.0))


def test_dehomogenize():
    v = dehomogenize(Vec4(2.0, 4.0, 6.0, 2.0))
    assert v == Vec3(1.0, 2.0, 3.0)


def test_dehomogenize_w_zero_raises():
    with pytest.raises(DegenerateGeometryError):
        dehomogenize(Vec4(1.0, 1.0, 1.0, 0.0))


def test_vec3_is_immutable():
    v = Vec3(1.0, 2.0, 3.0)
    with pytest.raises(Exception):
        v.x = 5.0
    assert math.isclose(v.norm(), math.sqrt(14.0))
