from .errors import DegenerateGeometryError, IndexOutOfRange, ModelLoadError, RenderError
from .vecmath import Mat3, Mat4, Vec3, Vec4
from .model import Face, Mesh, load_mesh
from .camera import Camera, TransformStage, look_at, projection, viewport
from .buffers import DepthBuffer, PixelBuffer
from .raster import barycentric, draw_line, fill_triangle
from .config import RenderConfig
from .frame import FrameOrchestrator, FrameState, MoveEye, Quit

__version__ = "0.1.0"
