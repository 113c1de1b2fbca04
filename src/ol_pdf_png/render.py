from __future__ import annotations

import math

from ol_pdf_png.engine import PdfDocumentHandle
from ol_pdf_png.models import PageOutput
from ol_pdf_png.surface import SurfaceFactory


async def render_page(
    document: PdfDocumentHandle,
    page_number: int,
    viewport_scale: float,
    page_name: str,
    want_content: bool,
    *,
    surface_factory: SurfaceFactory | None = None,
) -> PageOutput:
    """
    Render one 1-based page into a fresh drawing surface and return its PNG output.

    The page handle and the surface are always released before returning, including
    when rendering or encoding fails. `path` is left empty for the caller to fill in.
    """
    factory = surface_factory or SurfaceFactory()
    page = await document.get_page(page_number)
    try:
        viewport = page.get_viewport(viewport_scale)
        handle = factory.create(math.ceil(viewport.width), math.ceil(viewport.height))
        try:
            await page.render(handle.context, viewport)
            content = handle.surface.encode_to_png() if want_content else None
        finally:
            factory.destroy(handle)
    finally:
        page.cleanup()

    return PageOutput(
        page_number=page_number,
        name=page_name,
        content=content,
        path="",
        width=viewport.width,
        height=viewport.height,
    )
