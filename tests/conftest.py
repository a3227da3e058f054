import pytest

TRIANGLE_OBJ = """\
# single triangle facing +z
v -1.0 -1.0 0.0
v 1.0 -1.0 0.0
v 0.0 1.0 0.0
vn 0.0 0.0 1.0
f 1/1/1 2/1/1 3/1/1
"""


@pytest.fixture
def write_obj(tmp_path):
    """Write OBJ text to a temp file and return its path as str."""
    def _write(text, name="model.obj"):
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return _write


@pytest.fixture
def triangle_obj(write_obj):
    return write_obj(TRIANGLE_OBJ)
