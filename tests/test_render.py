from __future__ import annotations

import asyncio

import fitz  # PyMuPDF
import pytest
from conftest import CountingSurfaceFactory, FakeEngine, make_pdf, png_size

from ol_pdf_png.engine import PyMuPdfEngine
from ol_pdf_png.exceptions import RenderError
from ol_pdf_png.options import options_to_engine_params
from ol_pdf_png.render import render_page


def test_render_page_with_pymupdf() -> None:
    async def run():
        doc = await PyMuPdfEngine().open_document(make_pdf(2, width=150, height=75), options_to_engine_params())
        try:
            return await render_page(doc, 2, 1.5, "p2.png", True)
        finally:
            await doc.cleanup()

    out = asyncio.run(run())
    assert out.page_number == 2
    assert out.name == "p2.png"
    assert out.path == ""
    assert out.width == pytest.approx(225)
    assert out.height == pytest.approx(112.5)
    assert png_size(out.content) == (225, 113)


def test_render_page_without_content_still_releases_surface() -> None:
    engine = FakeEngine(num_pages=1)
    factory = CountingSurfaceFactory()
    out = asyncio.run(render_page(engine.document, 1, 1.0, "x.png", False, surface_factory=factory))
    assert out.content is None
    assert factory.created == factory.destroyed == 1
    assert engine.document.page_cleanups == 1


def test_render_page_failure_releases_page_and_surface() -> None:
    engine = FakeEngine(num_pages=1, failing_pages={1})
    factory = CountingSurfaceFactory()
    with pytest.raises(RenderError):
        asyncio.run(render_page(engine.document, 1, 1.0, "x.png", True, surface_factory=factory))
    assert factory.live == 0
    assert engine.document.page_cleanups == 1


def _layout_pdf() -> bytes:
    doc = fitz.open()
    for i in range(3):
        page = doc.new_page(width=200, height=100)
        page.draw_rect(fitz.Rect(10, 10, 60, 40), color=(1, 0, 0), fill=(1, 0, 0))
        page.insert_text((70, 60), f"Page {i + 1}")
    doc[1].set_rotation(90)
    doc[2].set_cropbox(fitz.Rect(50, 20, 180, 90))
    data = doc.tobytes()
    doc.close()
    return data


@pytest.mark.parametrize("page_number", [1, 2, 3], ids=["plain", "rotated", "cropped"])
def test_rendered_pixels_match_pymupdf(page_number: int) -> None:
    data = _layout_pdf()
    scale = 1.5

    async def run():
        doc = await PyMuPdfEngine().open_document(data, options_to_engine_params())
        try:
            return await render_page(doc, page_number, scale, "p.png", True)
        finally:
            await doc.cleanup()

    out = asyncio.run(run())
    with fitz.open(stream=data, filetype="pdf") as doc:
        expected = doc[page_number - 1].get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)

    rendered = fitz.Pixmap(out.content)
    assert (rendered.width, rendered.height) == (expected.width, expected.height)
    assert rendered.samples == expected.samples
    assert set(expected.samples) != {255}
