from __future__ import annotations

import pytest

pytest.importorskip("PySide6.QtGui")
Image = pytest.importorskip("PIL.Image")

from infrastructure.image_service import ImageService  # noqa: E402


class _Settings(dict):
    def get(self, key, default=None):
        return super().get(key, default)


@pytest.fixture
def png(tmp_path):
    path = tmp_path / "bg.png"
    Image.new("RGB", (40, 20), (200, 10, 10)).save(path)
    return str(path)


def test_load_background_reports_natural_size(png):
    loaded = ImageService().load_background(png)
    assert loaded is not None
    assert (loaded.info.width, loaded.info.height) == (40, 20)
    assert loaded.info.reference == png
    assert loaded.info.aspect == 2.0
    assert (loaded.image.width(), loaded.image.height()) == (40, 20)


def test_max_side_downscales_render_copy_only(png):
    loaded = ImageService(_Settings({"background.max_side": 10})).load_background(png)
    assert (loaded.info.width, loaded.info.height) == (40, 20)
    assert loaded.image.width() == 10


def test_rgba_image(tmp_path):
    path = tmp_path / "alpha.png"
    Image.new("RGBA", (8, 8), (0, 0, 0, 0)).save(path)
    loaded = ImageService().load_background(str(path))
    assert loaded is not None and loaded.image.hasAlphaChannel()


def test_missing_or_corrupt_file_returns_none(tmp_path):
    service = ImageService()
    assert service.load_background(str(tmp_path / "missing.png")) is None
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not an image at all")
    assert service.load_background(str(bad)) is None
    assert service.load_background("") is None


def test_probe_size_honours_exif_rotation(tmp_path):
    path = tmp_path / "rotated.jpg"
    exif = Image.Exif()
    exif[0x0112] = 6
    Image.new("RGB", (40, 20)).save(path, exif=exif)
    service = ImageService()
    assert service.probe_size(str(path)) == (20, 40)
    loaded = service.load_background(str(path))
    assert (loaded.info.width, loaded.info.height) == (20, 40)


def test_bad_max_side_setting_is_ignored(png):
    loaded = ImageService(_Settings({"background.max_side": "huge"})).load_background(png)
    assert loaded.image.width() == 40


def test_upright_copy_is_closed_after_conversion(png, monkeypatch):
    ImageOps = pytest.importorskip("PIL.ImageOps")
    real_transpose = ImageOps.exif_transpose
    closed = []

    def tracking_transpose(image, *args, **kwargs):
        upright = real_transpose(image, *args, **kwargs)
        real_close = upright.close

        def close():
            closed.append(upright)
            real_close()

        upright.close = close
        return upright

    monkeypatch.setattr(ImageOps, "exif_transpose", tracking_transpose)
    loaded = ImageService().load_background(png)
    assert loaded is not None and loaded.image.width() == 40
    assert len(closed) == 1
