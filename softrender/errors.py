"""Exception hierarchy shared by the loader, the rasterizer and the CLI."""


class RenderError(Exception):
    """Base class for every error raised by softrender."""


class ModelLoadError(RenderError):
    """
    The model file could not be turned into a Mesh.

    Fatal for the render: no mesh is produced and nothing must be drawn.
    """


class IndexOutOfRange(ModelLoadError):
    """A face references a vertex that was never defined in the file."""

    def __init__(self, index: int, vertex_count: int, line_no: int = 0, path: str = ""):
        self.index = index
        self.vertex_count = vertex_count
        self.line_no = line_no
        self.path = path
        where = f"{path}:{line_no}: " if path else (f"line {line_no}: " if line_no else "")
        super().__init__(
            f"{where}face index {index + 1} out of range (mesh has {vertex_count} vertices)"
        )


class DegenerateGeometryError(RenderError):
    """
    Zero-length normal, zero-area triangle or w == 0 during the divide.

    Recovered locally: the frame orchestrator skips the offending triangle.
    """
