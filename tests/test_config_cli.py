import pytest
from PIL import Image

from softrender.cli import main, parse_args
from softrender.config import RenderConfig, parse_hex_color
from softrender.vecmath import Vec3


@pytest.fixture(autouse=True)
def _keep_test_logging(monkeypatch):
    # main() would replace the root handlers installed by pytest
    monkeypatch.setattr("softrender.cli.setup_logging", lambda *args, **kwargs: None)


def test_parse_hex_color():
    assert parse_hex_color("#FF8800") == (255, 136, 0)
    assert parse_hex_color("0e0e2c") == (14, 14, 44)
    for bad in ("#FFF", "#GG0000", ""):
        with pytest.raises(ValueError):
            parse_hex_color(bad)


def test_config_defaults_and_light_normalized():
    cfg = RenderConfig(light=Vec3(0.0, 3.0, 4.0))
    assert (cfg.width, cfg.height) == (800, 800)
    assert tuple(cfg.light) == pytest.approx((0.0, 0.6, 0.8))
    assert cfg.background_rgba == (0, 0, 0, 255)


@pytest.mark.parametrize("kw", [
    {"width": 0},
    {"height": -5},
    {"depth": 0.0},
    {"ambient": 1.5},
    {"light": Vec3(0.0, 0.0, 0.0)},
    {"eye": Vec3(1.0, 1.0, 0.0)},
    {"eye": Vec3(0.0, 0.0, 1e-9)},
])
def test_config_rejects_bad_values(kw):
    with pytest.raises(ValueError):
        RenderConfig(**kw)


def test_config_from_args():
    args = parse_args(["m.obj", "--width", "64", "--eye", "1", "2", "5",
                       "--color", "#FF0000", "--wireframe", "--cull-unlit"])
    cfg = RenderConfig.from_args(args)
    assert cfg.width == 64 and cfg.height == 800
    assert cfg.eye == Vec3(1.0, 2.0, 5.0)
    assert cfg.color == (255, 0, 0)
    assert cfg.wireframe and cfg.cull_unlit
    assert cfg.output is None


def test_headless_render_writes_png(triangle_obj, tmp_path):
    out = tmp_path / "frame.png"
    code = main([triangle_obj, "--width", "64", "--height", "64", "--output", str(out)])
    assert code == 0

    img = Image.open(out)
    assert img.size == (64, 64)
    assert img.mode == "RGBA"
    # image is top-down: apex of the triangle is near the top row
    assert img.getpixel((32, 32)) == (255, 255, 255, 255)
    assert img.getpixel((2, 2)) == (0, 0, 0, 255)
    assert img.getpixel((32, 62)) == (255, 255, 255, 255)


def test_missing_model_exits_with_load_error(tmp_path):
    assert main([str(tmp_path / "missing.obj"), "--output", str(tmp_path / "x.png")]) == 1


def test_bad_index_exits_with_load_error(write_obj, tmp_path):
    path = write_obj("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 0 1 2\n")
    assert main([path, "--output", str(tmp_path / "x.png")]) == 1
    assert not (tmp_path / "x.png").exists()


def test_bad_color_exits_with_config_error(triangle_obj, tmp_path):
    assert main([triangle_obj, "--color", "red", "--output", str(tmp_path / "x.png")]) == 2
