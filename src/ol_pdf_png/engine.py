from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import fitz  # PyMuPDF

from ol_pdf_png.exceptions import DocumentOpenError, RenderError
from ol_pdf_png.models import Viewport
from ol_pdf_png.options import EngineInitParams, VerbosityLevel
from ol_pdf_png.surface import PaintContext

LOGGER = logging.getLogger(__name__)


class PdfPageHandle(Protocol):
    def get_viewport(self, scale: float) -> Viewport: ...
    async def render(self, context: PaintContext, viewport: Viewport) -> None: ...
    def cleanup(self) -> None: ...


class PdfDocumentHandle(Protocol):
    @property
    def num_pages(self) -> int: ...
    async def get_page(self, page_number: int) -> PdfPageHandle: ...
    async def cleanup(self) -> None: ...


class PdfEngine(Protocol):
    async def open_document(self, data: bytes | bytearray, params: EngineInitParams) -> PdfDocumentHandle: ...


def _apply_verbosity(verbosity: int) -> tuple[bool, bool]:
    """
    Set MuPDF message display for `verbosity` and return the previous (errors, warnings) flags.

    The flags are process-wide: overlapping conversions with different verbosity levels
    share whichever setting was applied last until each document is cleaned up.
    """
    previous = (bool(fitz.TOOLS.mupdf_display_errors()), bool(fitz.TOOLS.mupdf_display_warnings()))
    fitz.TOOLS.mupdf_display_errors(verbosity >= VerbosityLevel.ERRORS)
    fitz.TOOLS.mupdf_display_warnings(verbosity >= VerbosityLevel.WARNINGS)
    return previous


def _restore_verbosity(previous: tuple[bool, bool]) -> None:
    fitz.TOOLS.mupdf_display_errors(previous[0])
    fitz.TOOLS.mupdf_display_warnings(previous[1])


class PyMuPdfPage:
    def __init__(self, page: fitz.Page, page_number: int):
        self._page: fitz.Page | None = page
        self.page_number = page_number

    def _require_page(self) -> fitz.Page:
        if self._page is None:
            raise RenderError(f"Page {self.page_number} has already been cleaned up")
        return self._page

    def get_viewport(self, scale: float) -> Viewport:
        page = self._require_page()
        rect = page.rect
        return Viewport(
            width=rect.width * scale,
            height=rect.height * scale,
            rotation=int(page.rotation),
            scale=scale,
        )

    async def render(self, context: PaintContext, viewport: Viewport) -> None:
        page = self._require_page()
        if context.target is None:
            raise RenderError(f"Paint context for page {self.page_number} has been released")
        await asyncio.sleep(0)
        try:
            pix = page.get_pixmap(matrix=fitz.Matrix(viewport.scale, viewport.scale), alpha=False)
            context.draw_pixmap(pix)
        except Exception as e:  # noqa: BLE001
            raise RenderError(f"Failed to render page {self.page_number}: {e}") from e

    def cleanup(self) -> None:
        self._page = None


class PyMuPdfDocument:
    def __init__(self, doc: fitz.Document, previous_verbosity: tuple[bool, bool] | None = None):
        self._doc: fitz.Document | None = doc
        self._num_pages = doc.page_count
        self._previous_verbosity = previous_verbosity

    @property
    def num_pages(self) -> int:
        return self._num_pages

    async def get_page(self, page_number: int) -> PyMuPdfPage:
        if self._doc is None:
            raise RenderError("Document has already been cleaned up")
        await asyncio.sleep(0)
        return PyMuPdfPage(self._doc.load_page(page_number - 1), page_number)

    async def cleanup(self) -> None:
        if self._doc is None:
            return
        self._doc.close()
        self._doc = None
        if self._previous_verbosity is not None:
            _restore_verbosity(self._previous_verbosity)
        LOGGER.debug("closed PDF document")


def _open_and_authenticate(data: bytes | bytearray, password: str | None) -> fitz.Document:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:  # noqa: BLE001
        raise DocumentOpenError(f"Failed to open PDF document: {e}") from e

    if doc.needs_pass:
        if password is None:
            doc.close()
            raise DocumentOpenError("PDF document is encrypted and no password was given")
        if not doc.authenticate(password):
            doc.close()
            raise DocumentOpenError("Incorrect password for encrypted PDF document")
    return doc


class PyMuPdfEngine:
    """
    Rendering engine backed by PyMuPDF (fitz).

    MuPDF ships its fonts and CMaps built in, so font-face, system-font, XFA and resource
    location parameters are accepted for interface parity and only logged.
    """

    async def open_document(self, data: bytes | bytearray, params: EngineInitParams) -> PyMuPdfDocument:
        previous = _apply_verbosity(params.verbosity)
        LOGGER.debug(
            "opening PDF (%d bytes) disable_font_face=%s use_system_fonts=%s enable_xfa=%s cmap_url=%s",
            len(data),
            params.disable_font_face,
            params.use_system_fonts,
            params.enable_xfa,
            params.cmap_url,
        )
        try:
            await asyncio.sleep(0)
            doc = _open_and_authenticate(data, params.password)
        except BaseException:
            _restore_verbosity(previous)
            raise
        return PyMuPdfDocument(doc, previous)
