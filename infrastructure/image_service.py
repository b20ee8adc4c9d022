"""Background image decoding.

Pillow is tried first so EXIF orientation is honoured; Qt's reader is the
fallback for formats Pillow cannot open (HEIC/HEIF where a Qt plugin exists).
A failed decode returns None and leaves no handle open.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import Image, ImageOps, UnidentifiedImageError
from PySide6.QtGui import QImage, QImageReader
from loguru import logger

from core.services.interfaces import BackgroundInfo


IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp *.heic *.heif)"


@dataclass
class LoadedImage:
    """A decoded background: natural size for the core, `QImage` for painting."""

    info: BackgroundInfo
    image: QImage


class ImageService:
    """Decodes user-supplied background images."""

    def __init__(self, settings: object | None = None) -> None:
        """Initialize limits from settings (`background.max_side`, 0 = unlimited)."""
        self._max_side = 0
        if settings is not None:
            try:
                self._max_side = int(settings.get("background.max_side", 0) or 0)
            except (ValueError, TypeError):
                self._max_side = 0

    # Public API
    def probe_size(self, path: str) -> tuple[int, int] | None:
        """Return the natural (width, height) of `path` without a full decode."""
        try:
            with Image.open(path) as im:
                w, h = im.size
                orientation = im.getexif().get(0x0112, 1)
        except (OSError, ValueError, UnidentifiedImageError) as ex:
            logger.debug("Pillow probe failed for {}: {}", path, ex)
            return self._probe_via_qt(path)
        # EXIF orientations 5-8 swap the axes
        if orientation in (5, 6, 7, 8):
            w, h = h, w
        if w <= 0 or h <= 0:
            return None
        return int(w), int(h)

    def load_background(self, path: str) -> LoadedImage | None:
        """Decode `path` into a renderable image plus its natural dimensions."""
        if not path or not Path(path).is_file():
            logger.warning("Background image not found: {}", path)
            return None
        result = self._load_via_pillow(path)
        if result is None:
            result = self._load_via_qt(path)
        if result is None:
            logger.warning("Background image could not be decoded: {}", path)
        return result

    # Internal helpers
    def _load_via_pillow(self, path: str) -> LoadedImage | None:
        try:
            with Image.open(path) as source:
                try:
                    upright = ImageOps.exif_transpose(source)
                except (OSError, ValueError, AttributeError):
                    upright = source.copy()
                try:
                    natural = upright.size
                    if self._max_side > 0:
                        resampling = getattr(Image, "Resampling", Image)
                        upright.thumbnail((self._max_side, self._max_side), resampling.LANCZOS)
                    qimg = self._pil_to_qimage(upright)
                finally:
                    upright.close()
        except (OSError, ValueError, UnidentifiedImageError) as ex:
            logger.debug("Pillow load failed for {}: {}", path, ex)
            return None
        if qimg is None or natural[0] <= 0 or natural[1] <= 0:
            return None
        return LoadedImage(BackgroundInfo(path, int(natural[0]), int(natural[1])), qimg)

    def _load_via_qt(self, path: str) -> LoadedImage | None:
        reader = QImageReader(path)
        reader.setAutoTransform(True)
        img = reader.read()
        if img is None or img.isNull():
            logger.debug("Qt read failed for {}: {}", path, reader.errorString())
            return None
        return LoadedImage(BackgroundInfo(path, img.width(), img.height()), img)

    def _probe_via_qt(self, path: str) -> tuple[int, int] | None:
        reader = QImageReader(path)
        reader.setAutoTransform(True)
        size = reader.size()
        if not size.isValid() or size.width() <= 0 or size.height() <= 0:
            return None
        return size.width(), size.height()

    def _pil_to_qimage(self, pil_img: Any) -> QImage | None:
        """Convert a Pillow image to `QImage` and detach from the source buffer."""
        try:
            if pil_img.mode not in ("RGBA", "RGB"):
                pil_img = pil_img.convert("RGBA")
            if pil_img.mode == "RGB":
                data = pil_img.tobytes("raw", "RGB")
                qimg = QImage(
                    data, pil_img.width, pil_img.height, pil_img.width * 3, QImage.Format_RGB888
                )
            else:
                data = pil_img.tobytes("raw", "RGBA")
                qimg = QImage(
                    data, pil_img.width, pil_img.height, pil_img.width * 4, QImage.Format_RGBA8888
                )
            if qimg is None or qimg.isNull():
                return None
            return qimg.copy()
        except (ValueError, TypeError) as ex:
            logger.debug("PIL->QImage convert failed: {}", ex)
            return None
