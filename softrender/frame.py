import enum
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from .buffers import Color, DepthBuffer, PixelBuffer
from .camera import Camera, TransformStage
from .config import RenderConfig
from .errors import DegenerateGeometryError
from .model import Mesh
from .raster import draw_line, fill_triangle
from .vecmath import Vec3

logger = logging.getLogger(__name__)


# ============================================================
#  Flat shading
# ============================================================

def face_brightness(a: Vec3, b: Vec3, c: Vec3, light: Vec3) -> float:
    """
    Lambert term for a whole triangle: dot(normalize((b-a) x (c-a)), light).

    Raises DegenerateGeometryError when the triangle has no normal.
    """
    n = (b - a).cross(c - a).normalize()
    return n.dot(light)


def shade(brightness: float, base: Tuple[int, int, int],
          ambient: float = 0.1, cull_unlit: bool = False) -> Optional[Color]:
    """
    Color of a flat-shaded triangle, or None when it should not be drawn.

    Two variants:
      - cull_unlit: brightness <= 0 means the face looks away from the light
      - otherwise brightness is clamped to max(ambient, brightness)
    """
    if cull_unlit:
        if brightness <= 0.0:
            return None
    else:
        brightness = max(ambient, brightness)
    brightness = min(1.0, brightness)
    return (int(base[0] * brightness),
            int(base[1] * brightness),
            int(base[2] * brightness),
            255)


# ============================================================
#  Input commands / presentation
# ============================================================

@dataclass(frozen=True)
class MoveEye:
    dx: float
    dy: float
    dz: float = 0.0


@dataclass(frozen=True)
class Quit:
    pass


class PresentationSurface(Protocol):
    def present(self, pixels: PixelBuffer) -> None: ...


class FrameState(enum.Enum):
    IDLE = "idle"
    DIRTY = "dirty"


@dataclass
class FrameStats:
    drawn: int = 0
    culled: int = 0
    skipped: int = 0
    pixels: int = 0


# ============================================================
#  Orchestrator
# ============================================================

class FrameOrchestrator:
    """
    Owns the camera, the pixel/depth buffers and the redraw decision.

    DIRTY means a frame is owed (start-up or the camera moved); IDLE means
    the last presented frame is still current and redraw_if_dirty() is free.
    """

    def __init__(self, mesh: Mesh, config: RenderConfig,
                 camera: Optional[Camera] = None,
                 surface: Optional[PresentationSurface] = None):
        """Raises IndexOutOfRange if a face of mesh points past its positions."""
        mesh.validate()
        self.mesh = mesh
        self.config = config
        self.camera = camera or Camera(config.eye, config.center, config.up)
        self.surface = surface
        self.pixels = PixelBuffer(config.width, config.height, config.background_rgba)
        self.depth = DepthBuffer(config.width, config.height)
        self.state = FrameState.DIRTY
        self.running = True
        self.last_stats: Optional[FrameStats] = None

    def handle(self, command) -> None:
        if isinstance(command, Quit):
            logger.info("Quit requested")
            self.running = False
        elif isinstance(command, MoveEye):
            try:
                self.camera.move(command.dx, command.dy, command.dz)
            except ValueError as e:
                logger.warning(f"Ignoring camera move: {e}")
                return
            self.state = FrameState.DIRTY
            logger.debug(f"Camera eye now at {self.camera.eye}")
        else:
            raise TypeError(f"unknown command {command!r}")

    def draw_frame(self) -> FrameStats:
        """Render every face once into the owned buffers."""
        cfg = self.config
        self.pixels.clear(cfg.background_rgba)
        self.depth.reset()

        stats = FrameStats()
        try:
            transform = TransformStage.for_camera(self.camera, cfg.width, cfg.height, cfg.depth)
        except DegenerateGeometryError as e:
            # eye on the target, or up parallel to the view direction
            logger.warning(f"Camera has no usable basis, frame left empty: {e}")
            self.last_stats = stats
            return stats

        for face in self.mesh.faces:
            a, b, c = self.mesh.triangle(face)
            try:
                color = shade(face_brightness(a, b, c, cfg.light),
                              cfg.color, cfg.ambient, cfg.cull_unlit)
                if color is None:
                    stats.culled += 1
                    continue

                sa, sb, sc = transform.to_screen(a), transform.to_screen(b), transform.to_screen(c)
                if cfg.wireframe:
                    written = (draw_line(self.pixels, sa.x, sa.y, sb.x, sb.y, color)
                               + draw_line(self.pixels, sb.x, sb.y, sc.x, sc.y, color)
                               + draw_line(self.pixels, sc.x, sc.y, sa.x, sa.y, color))
                else:
                    written = fill_triangle(self.pixels, self.depth, sa, sb, sc, color)
            except DegenerateGeometryError as e:
                stats.skipped += 1
                logger.debug(f"Skipping face {face.v}: {e}")
                continue

            stats.drawn += 1
            stats.pixels += written

        self.last_stats = stats
        logger.debug(
            f"Frame: {stats.drawn} drawn, {stats.culled} culled, "
            f"{stats.skipped} skipped, {stats.pixels} pixels"
        )
        return stats

    def redraw_if_dirty(self) -> bool:
        """Draw and present one frame if one is owed. Returns True if it did."""
        if self.state is FrameState.IDLE:
            return False
        self.draw_frame()
        if self.surface is not None:
            self.surface.present(self.pixels)
        self.state = FrameState.IDLE
        return True
