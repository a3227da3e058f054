from dataclasses import dataclass

from .vecmath import Mat3, Mat4, Vec3, apply, dehomogenize, to_vec4

# Closest the eye may get to the z = 0 plane before the projection blows up.
MIN_EYE_Z = 1e-6


def off_eye_plane(z: float) -> bool:
    return abs(z) > MIN_EYE_Z


# ============================================================
#  View / projection / viewport
# ============================================================

def look_at(eye: Vec3, center: Vec3, up: Vec3) -> Mat4:
    """
    View matrix (world -> camera space).

    Basis:
      forward = normalize(eye - center)
      right   = normalize(up x forward)
      up'     = forward x right

    The rows {right, up', forward} rotate world space into camera space,
    then the result is translated by -center, i.e. M = R * T(-center).
    """
    forward = (eye - center).normalize()
    right = up.cross(forward).normalize()
    true_up = forward.cross(right)

    rotation = Mat3.from_rows(right, true_up, forward)
    return Mat4.from_linear(rotation, apply(rotation, center) * -1.0)


def projection(eye_z: float) -> Mat4:
    """
    Minimal pinhole perspective.

    Identity except m[3][2] = -1/eye_z, so w = 1 - z/eye_z grows as a point
    approaches the camera and the later divide by w shrinks distant points.
    No near/far planes, nothing is clipped.
    """
    if not off_eye_plane(eye_z):
        raise ValueError(f"perspective needs a camera off the z = 0 plane, got z = {eye_z}")
    m = Mat4.identity()
    m.m[3][2] = -1.0 / eye_z
    return m


def viewport(x: float, y: float, w: float, h: float, depth: float) -> Mat4:
    """
    Map the [-1, 1] cube to pixels.

      x: [-1, 1] -> [x, x + w]
      y: [-1, 1] -> [y, y + h]
      z: [-1, 1] -> [0, depth]
    """
    m = Mat4.identity()
    m.m[0][3] = x + w / 2.0
    m.m[1][3] = y + h / 2.0
    m.m[2][3] = depth / 2.0
    m.m[0][0] = w / 2.0
    m.m[1][1] = h / 2.0
    m.m[2][2] = depth / 2.0
    return m


# ============================================================
#  Camera
# ============================================================

@dataclass
class Camera:
    """Eye position, look-at target and up vector. Moved by input commands."""
    eye: Vec3
    center: Vec3 = Vec3(0.0, 0.0, 0.0)
    up: Vec3 = Vec3(0.0, 1.0, 0.0)

    def view_matrix(self) -> Mat4:
        return look_at(self.eye, self.center, self.up)

    def projection_matrix(self) -> Mat4:
        return projection(self.eye.z)

    def move(self, dx: float, dy: float, dz: float = 0.0):
        """Shift the eye; the look-at target stays put."""
        eye = Vec3(self.eye.x + dx, self.eye.y + dy, self.eye.z + dz)
        if not off_eye_plane(eye.z):
            raise ValueError(f"eye must not lie on the z = 0 plane, got z = {eye.z}")
        self.eye = eye


class TransformStage:
    """
    Per-vertex pipeline:

      screen = dehomogenize(viewport * (projection * (view * (v, 1))))

    The three matrices are applied one after another, never pre-multiplied.
    """
    def __init__(self, view: Mat4, proj: Mat4, port: Mat4):
        self.view = view
        self.proj = proj
        self.port = port

    @classmethod
    def for_camera(cls, camera: Camera, width: int, height: int, depth: float) -> "TransformStage":
        return cls(camera.view_matrix(),
                   camera.projection_matrix(),
                   viewport(0.0, 0.0, width, height, depth))

    def to_screen(self, v: Vec3) -> Vec3:
        """World-space position -> (pixel x, pixel y, depth)."""
        p = self.view.mul_vec4(to_vec4(v))
        p = self.proj.mul_vec4(p)
        p = self.port.mul_vec4(p)
        return dehomogenize(p)
