import math
from typing import Optional, Tuple

import numpy as np
from numba import njit

from .buffers import Color, DepthBuffer, PixelBuffer
from .errors import DegenerateGeometryError
from .vecmath import Vec3

# Doubled screen-space area under which a triangle is treated as a sliver.
DEGENERATE_AREA = 1e-2


# ============================================================
#  Numba kernels
# ============================================================

@njit(cache=True)
def _barycentric(ax, ay, bx, by, cx, cy, px, py):
    """
    Compute barycentric coordinates for point (px,py) inside triangle (A,B,C)
    in 2D screen space.

    u = (cx-ax, bx-ax, ax-px) x (cy-ay, by-ay, ay-py); u.z is twice the
    signed area of the triangle.

    Returns (alpha, beta, gamma). If triangle is degenerate => (-1, 1, 1).
    """
    ux = (bx - ax) * (ay - py) - (ax - px) * (by - ay)
    uy = (ax - px) * (cy - ay) - (cx - ax) * (ay - py)
    uz = (cx - ax) * (by - ay) - (bx - ax) * (cy - ay)
    if abs(uz) < DEGENERATE_AREA:
        return -1.0, 1.0, 1.0
    return 1.0 - (ux + uy) / uz, uy / uz, ux / uz


@njit(cache=True)
def _fill_triangle(img, zbuf,
                   x0, y0, z0,
                   x1, y1, z1,
                   x2, y2, z2,
                   r, g, b, a):
    """
    Rasterize a filled triangle with a constant color.

    Z-buffer:
      - z is interpolated linearly with the barycentric weights
      - pixel is drawn only if z > zbuf[y,x]; equal depth keeps the old pixel

    Returns the number of pixels written, or -1 for a degenerate triangle
    (nothing is touched in that case). An area that overflows counts as
    degenerate too.
    """
    H, W, _ = img.shape

    area2 = (x2 - x0) * (y1 - y0) - (x1 - x0) * (y2 - y0)
    if abs(area2) < DEGENERATE_AREA or not math.isfinite(area2):
        return -1

    # clamp in float space first, huge coordinates do not fit an int
    minx = int(math.floor(min(max(min(x0, x1, x2), 0.0), float(W))))
    maxx = int(math.ceil(max(min(max(x0, x1, x2), W - 1.0), -1.0)))
    miny = int(math.floor(min(max(min(y0, y1, y2), 0.0), float(H))))
    maxy = int(math.ceil(max(min(max(y0, y1, y2), H - 1.0), -1.0)))

    written = 0
    for y in range(miny, maxy + 1):
        for x in range(minx, maxx + 1):
            w0, w1, w2 = _barycentric(x0, y0, x1, y1, x2, y2, float(x), float(y))
            if w0 < 0.0 or w1 < 0.0 or w2 < 0.0:
                continue

            z = w0*z0 + w1*z1 + w2*z2
            if z <= zbuf[y, x]:
                continue
            zbuf[y, x] = z

            img[y, x, 0] = r
            img[y, x, 1] = g
            img[y, x, 2] = b
            img[y, x, 3] = a
            written += 1
    return written


@njit(cache=True)
def _draw_line(img, x0, y0, x1, y1, r, g, b, a):
    """
    Bresenham integer line drawing, endpoints inclusive.

    Endpoints are ordered along the major axis first, so A->B and B->A
    walk exactly the same pixels. Out-of-buffer pixels are skipped.
    """
    H, W, _ = img.shape
    written = 0

    if abs(x1 - x0) < abs(y1 - y0):
        # steep: one pixel per row
        if y0 > y1:
            x0, y0, x1, y1 = x1, y1, x0, y0
        dy = y1 - y0
        dx = abs(x1 - x0)
        xstep = 1 if x1 > x0 else -1
        error2 = 0
        x = x0
        for y in range(y0, y1 + 1):
            if 0 <= x < W and 0 <= y < H:
                img[y, x, 0] = r
                img[y, x, 1] = g
                img[y, x, 2] = b
                img[y, x, 3] = a
                written += 1
            error2 += 2 * dx
            if error2 > dy:
                x += xstep
                error2 -= 2 * dy
    else:
        # shallow: one pixel per column
        if x0 > x1:
            x0, y0, x1, y1 = x1, y1, x0, y0
        dx = x1 - x0
        dy = abs(y1 - y0)
        ystep = 1 if y1 > y0 else -1
        error2 = 0
        y = y0
        for x in range(x0, x1 + 1):
            if 0 <= x < W and 0 <= y < H:
                img[y, x, 0] = r
                img[y, x, 1] = g
                img[y, x, 2] = b
                img[y, x, 3] = a
                written += 1
            error2 += 2 * dy
            if error2 > dx:
                y += ystep
                error2 -= 2 * dx
    return written


# ============================================================
#  Python entry points
# ============================================================

def _require_finite(*coords):
    if not all(math.isfinite(c) for c in coords):
        raise DegenerateGeometryError(f"non-finite screen coordinate in {coords}")


def _clip_segment(x0, y0, x1, y1, xmin, ymin, xmax, ymax) -> Optional[Tuple[float, float, float, float]]:
    """
    Liang-Barsky: cut the segment to the rectangle, or None if it misses it.

    Works on floats so endpoints far outside the buffer never reach the
    integer walk.
    """
    dx = x1 - x0
    dy = y1 - y0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - xmin), (dx, xmax - x0), (-dy, y0 - ymin), (dy, ymax - y0)):
        if p == 0.0:
            if q < 0.0:
                return None
            continue
        t = q / p
        if p < 0.0:
            if t > t1:
                return None
            t0 = max(t0, t)
        else:
            if t < t0:
                return None
            t1 = min(t1, t)
    if t1 < 1.0:
        x1, y1 = x0 + t1 * dx, y0 + t1 * dy
    if t0 > 0.0:
        x0, y0 = x0 + t0 * dx, y0 + t0 * dy
    return x0, y0, x1, y1


def barycentric(a: Vec3, b: Vec3, c: Vec3, p: Tuple[float, float]) -> Tuple[float, float, float]:
    """Weights of p with respect to a, b, c (only x and y are used)."""
    return _barycentric(float(a.x), float(a.y), float(b.x), float(b.y),
                        float(c.x), float(c.y), float(p[0]), float(p[1]))


def fill_triangle(pixels: PixelBuffer, depth: DepthBuffer,
                  a: Vec3, b: Vec3, c: Vec3, color: Color) -> int:
    """
    Fill a screen-space triangle (x, y in pixels, z = depth).

    Raises DegenerateGeometryError for zero-area triangles and for
    non-finite corners.
    """
    _require_finite(a.x, a.y, a.z, b.x, b.y, b.z, c.x, c.y, c.z)
    written = _fill_triangle(pixels.data, depth.data,
                             float(a.x), float(a.y), float(a.z),
                             float(b.x), float(b.y), float(b.z),
                             float(c.x), float(c.y), float(c.z),
                             color[0], color[1], color[2], color[3])
    if written < 0:
        raise DegenerateGeometryError(f"zero-area triangle {a}, {b}, {c}")
    return written


def draw_line(pixels: PixelBuffer, x0, y0, x1, y1, color: Color) -> int:
    """
    Draw a 1-pixel line, no depth test. Returns pixels written.

    The segment is clipped to the buffer (plus a one pixel margin) before
    rasterizing. Raises DegenerateGeometryError for non-finite endpoints.
    """
    x0, y0, x1, y1 = float(x0), float(y0), float(x1), float(y1)
    _require_finite(x0, y0, x1, y1)

    # same orientation for A->B and B->A, so both clip to the same pixels
    if (x1, y1) < (x0, y0):
        x0, y0, x1, y1 = x1, y1, x0, y0
    clipped = _clip_segment(x0, y0, x1, y1, -1.0, -1.0, float(pixels.width), float(pixels.height))
    if clipped is None:
        return 0
    x0, y0, x1, y1 = clipped
    _require_finite(x0, y0, x1, y1)
    return _draw_line(pixels.data, int(x0), int(y0), int(x1), int(y1),
                      color[0], color[1], color[2], color[3])


def warm_up():
    """First call triggers Numba compilation; do it before the first frame."""
    img = np.zeros((4, 4, 4), dtype=np.uint8)
    zbuf = np.full((4, 4), -np.inf, dtype=np.float64)
    _fill_triangle(img, zbuf, 0.0, 0.0, 1.0, 3.0, 0.0, 1.0, 0.0, 3.0, 1.0, 255, 255, 255, 255)
    _draw_line(img, 0, 0, 3, 1, 255, 255, 255, 255)
