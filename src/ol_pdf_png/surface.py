from __future__ import annotations

import logging
from dataclasses import dataclass

import fitz  # PyMuPDF

from ol_pdf_png.exceptions import InvalidDimensionError, MissingSurfaceError

LOGGER = logging.getLogger(__name__)


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidDimensionError("Surface width and height must be greater than zero")


class DrawingSurface:
    """RGB pixel buffer (a PyMuPDF pixmap) that pages are rasterized into."""

    def __init__(self, width: int, height: int):
        self._pixmap: fitz.Pixmap | None = None
        self.resize(width, height)

    @property
    def pixmap(self) -> fitz.Pixmap:
        if self._pixmap is None:
            raise MissingSurfaceError("Surface has been released")
        return self._pixmap

    @property
    def width(self) -> int:
        return 0 if self._pixmap is None else self._pixmap.width

    @property
    def height(self) -> int:
        return 0 if self._pixmap is None else self._pixmap.height

    @property
    def released(self) -> bool:
        return self._pixmap is None

    def resize(self, width: int, height: int) -> None:
        # Content is not preserved across a resize.
        pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
        pix.clear_with(255)
        self._pixmap = pix

    def paint(self, source: fitz.Pixmap) -> None:
        # A same-size render becomes the buffer; otherwise its overlap is copied in.
        target = self.pixmap
        if (source.width, source.height) == (target.width, target.height):
            self._pixmap = source
        else:
            target.copy(source, target.irect)

    def encode_to_png(self) -> bytes:
        return self.pixmap.tobytes("png")

    def release(self) -> None:
        self._pixmap = None


class PaintContext:
    """Paint target bound to one surface; rendered page pixmaps are drawn through it."""

    def __init__(self, surface: DrawingSurface):
        self.target: DrawingSurface | None = surface

    def draw_pixmap(self, source: fitz.Pixmap) -> None:
        if self.target is None:
            raise MissingSurfaceError("Paint context has been released")
        self.target.paint(source)

    def release(self) -> None:
        self.target = None


@dataclass
class SurfaceHandle:
    surface: DrawingSurface | None
    context: PaintContext | None


class SurfaceFactory:
    def create(self, width: int, height: int) -> SurfaceHandle:
        _check_dimensions(width, height)
        surface = DrawingSurface(width, height)
        LOGGER.debug("created drawing surface %dx%d", width, height)
        return SurfaceHandle(surface=surface, context=PaintContext(surface))

    def reset(self, handle: SurfaceHandle, width: int, height: int) -> None:
        if handle.surface is None:
            raise MissingSurfaceError("Surface object is required")
        _check_dimensions(width, height)
        if handle.context is not None:
            handle.context.release()
        handle.surface.resize(width, height)
        handle.context = PaintContext(handle.surface)

    def destroy(self, handle: SurfaceHandle) -> None:
        if handle.surface is None:
            raise MissingSurfaceError("Surface object is required")
        if handle.context is not None:
            handle.context.release()
        handle.surface.release()
        handle.surface = None
        handle.context = None
        LOGGER.debug("destroyed drawing surface")
