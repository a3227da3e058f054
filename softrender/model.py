import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .errors import IndexOutOfRange, ModelLoadError
from .vecmath import Vec3

logger = logging.getLogger(__name__)


# ============================================================
#  Mesh
# ============================================================

@dataclass(frozen=True)
class Face:
    """
    Single triangle face, three indices into Mesh.positions.

    Indices are 0-based (we subtract 1 when parsing OBJ).
    """
    v: Tuple[int, int, int]

    def __iter__(self):
        return iter(self.v)


@dataclass
class Mesh:
    """
    Indexed triangle mesh.

    positions and faces grow as the file is read; normals are kept when the
    file has them but flat shading derives its own per-face normal.
    """
    positions: List[Vec3] = field(default_factory=list)
    faces: List[Face] = field(default_factory=list)
    normals: List[Vec3] = field(default_factory=list)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def face_count(self) -> int:
        return len(self.faces)

    def triangle(self, face: Face) -> Tuple[Vec3, Vec3, Vec3]:
        """Positions of the three corners of a face."""
        i0, i1, i2 = face.v
        return self.positions[i0], self.positions[i1], self.positions[i2]

    def validate(self, line_numbers: Optional[List[int]] = None, path: str = "") -> None:
        """
        Raise IndexOutOfRange if any face points outside positions.

        line_numbers, when given, holds the source line of each face so the
        error can point into the file.
        """
        n = self.vertex_count
        for i, face in enumerate(self.faces):
            for idx in face.v:
                if idx < 0 or idx >= n:
                    line_no = line_numbers[i] if line_numbers else 0
                    raise IndexOutOfRange(idx, n, line_no=line_no, path=path)

    @classmethod
    def from_obj(cls, path: str) -> "Mesh":
        return load_mesh(path)


# ============================================================
#  OBJ loader
# ============================================================

def _parse_vec3(parts: List[str]) -> Optional[Vec3]:
    if len(parts) < 4:
        return None
    try:
        return Vec3(float(parts[1]), float(parts[2]), float(parts[3]))
    except ValueError:
        return None


def _parse_face(parts: List[str]) -> Optional[Tuple[int, int, int]]:
    """
    Parse `f a/b/c d/e/f g/h/i` into three 0-based vertex indices.

    Only the first integer of each group is kept (vt and vn are ignored);
    groups after the third are ignored too.
    """
    if len(parts) < 4:
        return None
    idx = []
    for group in parts[1:4]:
        try:
            idx.append(int(group.split("/")[0]) - 1)
        except ValueError:
            return None
    return idx[0], idx[1], idx[2]


def load_mesh(path: str) -> Mesh:
    """
    Read a mesh from a minimal OBJ file.

    Supported:
      v  x y z
      vn x y z
      f  v/vt/vn v/vt/vn v/vt/vn  (triangles; `v`, `v/vt`, `v//vn` also work)

    Lines that do not parse as their expected shape are skipped, anything
    else (comments, vt, o, g, s, ...) is ignored. Face indices are checked
    once the whole file is read: a face pointing at a missing vertex
    raises IndexOutOfRange.
    """
    mesh = Mesh()
    face_lines: List[int] = []
    skipped = 0

    try:
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            for line_no, line in enumerate(f, start=1):
                parts = line.split()
                if not parts:
                    continue
                tag = parts[0]
                if tag == "v":
                    v = _parse_vec3(parts)
                    if v is None:
                        skipped += 1
                        logger.debug(f"{path}:{line_no}: skipping malformed vertex {line.strip()!r}")
                        continue
                    mesh.positions.append(v)
                elif tag == "vn":
                    n = _parse_vec3(parts)
                    if n is None:
                        skipped += 1
                        logger.debug(f"{path}:{line_no}: skipping malformed normal {line.strip()!r}")
                        continue
                    mesh.normals.append(n)
                elif tag == "f":
                    face = _parse_face(parts)
                    if face is None:
                        skipped += 1
                        logger.debug(f"{path}:{line_no}: skipping malformed face {line.strip()!r}")
                        continue
                    mesh.faces.append(Face(face))
                    face_lines.append(line_no)
    except OSError as e:
        raise ModelLoadError(f"cannot read model '{path}': {e}") from e

    mesh.validate(face_lines, path=str(path))

    logger.info(
        f"Loaded '{path}': {mesh.vertex_count} vertices, {mesh.face_count} faces, "
        f"{len(mesh.normals)} normals ({skipped} lines skipped)"
    )
    return mesh
