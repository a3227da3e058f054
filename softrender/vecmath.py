import math
from dataclasses import dataclass
from typing import List, Optional, Union

from .errors import DegenerateGeometryError

# Below this length a vector has no usable direction.
EPSILON = 1e-12


# ============================================================
#  Vectors
# ============================================================

@dataclass(frozen=True)
class Vec3:
    """
    3D vector for positions, normals and directions.

    Used in:
      - OBJ vertices (positions) and normals (vn)
      - face normals for flat shading
      - light direction (normalized)
      - screen-space vertices after the divide (x, y in pixels, z = depth)
    """
    x: float
    y: float
    z: float

    def __add__(self, o): return Vec3(self.x + o.x, self.y + o.y, self.z + o.z)
    def __sub__(self, o): return Vec3(self.x - o.x, self.y - o.y, self.z - o.z)
    def __mul__(self, k: float): return Vec3(self.x * k, self.y * k, self.z * k)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def dot(self, o) -> float:
        """Dot product (scalar product)."""
        return self.x * o.x + self.y * o.y + self.z * o.z

    def cross(self, o) -> "Vec3":
        """Cross product (vector product)."""
        return Vec3(
            self.y * o.z - self.z * o.y,
            self.z * o.x - self.x * o.z,
            self.x * o.y - self.y * o.x
        )

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def normalize(self) -> "Vec3":
        """
        Return normalized vector (length=1).

        Raises DegenerateGeometryError for a (near) zero vector.
        """
        n = self.norm()
        if n <= EPSILON:
            raise DegenerateGeometryError(f"cannot normalize zero-length vector {self}")
        return self * (1.0 / n)


@dataclass(frozen=True)
class Vec4:
    """
    4D homogeneous vector.
    Only lives between the view stage and the final divide by w.
    """
    x: float
    y: float
    z: float
    w: float

    def __add__(self, o): return Vec4(self.x + o.x, self.y + o.y, self.z + o.z, self.w + o.w)
    def __sub__(self, o): return Vec4(self.x - o.x, self.y - o.y, self.z - o.z, self.w - o.w)
    def __mul__(self, k: float): return Vec4(self.x * k, self.y * k, self.z * k, self.w * k)


Vector = Union[Vec3, Vec4]


# ============================================================
#  Matrices
# ============================================================

class Mat3:
    """
    3x3 matrix (row-major), a pure linear transform.

    The look-at rotation is built as a Mat3 and then embedded into a Mat4.
    """
    def __init__(self, m: Optional[List[List[float]]] = None):
        self.m = m if m is not None else [[0.0]*3 for _ in range(3)]

    @staticmethod
    def identity():
        """Create identity matrix."""
        m = Mat3()
        for i in range(3):
            m.m[i][i] = 1.0
        return m

    @staticmethod
    def from_rows(r0: Vec3, r1: Vec3, r2: Vec3) -> "Mat3":
        return Mat3([list(r0), list(r1), list(r2)])

    def mul_vec3(self, v: Vec3) -> Vec3:
        """Multiply matrix by a Vec3 (Mat3 * Vec3)."""
        x = self.m[0][0]*v.x + self.m[0][1]*v.y + self.m[0][2]*v.z
        y = self.m[1][0]*v.x + self.m[1][1]*v.y + self.m[1][2]*v.z
        z = self.m[2][0]*v.x + self.m[2][1]*v.y + self.m[2][2]*v.z
        return Vec3(x, y, z)


class Mat4:
    """
    4x4 matrix (row-major).

    We use Mat4 for:
      - View matrix (look-at)
      - Projection matrix (pinhole perspective)
      - Viewport matrix (NDC -> pixels)

    No Mat4 @ Mat4: stages are applied to the vertex one at a time, in
    order, since projection changes w.
    """
    def __init__(self, m: Optional[List[List[float]]] = None):
        self.m = m if m is not None else [[0.0]*4 for _ in range(4)]

    @staticmethod
    def identity():
        """Create identity matrix."""
        m = Mat4()
        for i in range(4):
            m.m[i][i] = 1.0
        return m

    @staticmethod
    def from_linear(r: Mat3, t: Vec3) -> "Mat4":
        """Embed a 3x3 linear part and a translation column into a Mat4."""
        m = Mat4.identity()
        for i in range(3):
            for j in range(3):
                m.m[i][j] = r.m[i][j]
        m.m[0][3] = t.x
        m.m[1][3] = t.y
        m.m[2][3] = t.z
        return m

    def mul_vec4(self, v: Vec4) -> Vec4:
        """Multiply matrix by a Vec4 (Mat4 * Vec4)."""
        x = self.m[0][0]*v.x + self.m[0][1]*v.y + self.m[0][2]*v.z + self.m[0][3]*v.w
        y = self.m[1][0]*v.x + self.m[1][1]*v.y + self.m[1][2]*v.z + self.m[1][3]*v.w
        z = self.m[2][0]*v.x + self.m[2][1]*v.y + self.m[2][2]*v.z + self.m[2][3]*v.w
        w = self.m[3][0]*v.x + self.m[3][1]*v.y + self.m[3][2]*v.z + self.m[3][3]*v.w
        return Vec4(x, y, z, w)


# ============================================================
#  Free functions
# ============================================================

def add(u: Vector, v: Vector) -> Vector:
    return u + v

def sub(u: Vector, v: Vector) -> Vector:
    return u - v

def scale(u: Vector, k: float) -> Vector:
    return u * k

def dot(u: Vec3, v: Vec3) -> float:
    return u.dot(v)

def cross(u: Vec3, v: Vec3) -> Vec3:
    return u.cross(v)

def length(u: Vec3) -> float:
    return u.norm()

def normalize(u: Vec3) -> Vec3:
    return u.normalize()


def apply(matrix: Union[Mat3, Mat4], vector: Vector) -> Vector:
    """
    Apply a matrix to a vector.

      - Mat3 * Vec3 => Vec3 (linear)
      - Mat4 * Vec4 => Vec4 (homogeneous)
    """
    if isinstance(matrix, Mat3) and isinstance(vector, Vec3):
        return matrix.mul_vec3(vector)
    if isinstance(matrix, Mat4) and isinstance(vector, Vec4):
        return matrix.mul_vec4(vector)
    raise TypeError(
        f"cannot apply {type(matrix).__name__} to {type(vector).__name__}"
    )


def to_vec4(v: Vec3, w: float = 1.0) -> Vec4:
    """Convert Vec3 to homogeneous Vec4."""
    return Vec4(v.x, v.y, v.z, w)


def dehomogenize(v: Vec4) -> Vec3:
    """Perspective divide: (x/w, y/w, z/w)."""
    if v.w == 0.0:
        raise DegenerateGeometryError(f"cannot divide by w == 0 for {v}")
    inv = 1.0 / v.w
    return Vec3(v.x * inv, v.y * inv, v.z * inv)
