from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Sequence
from dataclasses import replace
from pathlib import Path
from typing import Union

from ol_pdf_png.engine import PdfDocumentHandle, PdfEngine, PyMuPdfEngine
from ol_pdf_png.exceptions import MissingContentError, UnsupportedBufferTypeError
from ol_pdf_png.models import DocumentInfo, PageInfo, PageOutput
from ol_pdf_png.options import (
    CONVERSION_DEFAULTS,
    ConversionDefaults,
    ConversionOptions,
    options_to_engine_params,
)
from ol_pdf_png.paths import normalize_path, sanitize_path
from ol_pdf_png.render import render_page
from ol_pdf_png.surface import SurfaceFactory

LOGGER = logging.getLogger(__name__)

PdfInput = Union[str, os.PathLike, bytes, bytearray, memoryview]


def _as_buffer(value: object) -> bytes | bytearray:
    if isinstance(value, (bytes, bytearray)):
        return value
    if isinstance(value, memoryview):
        return value.tobytes()
    raise UnsupportedBufferTypeError(f"Unsupported buffer type: {type(value).__name__}")


def _is_path(pdf_input: object) -> bool:
    return isinstance(pdf_input, (str, os.PathLike))


async def read_pdf_input(pdf_input: PdfInput) -> bytes | bytearray:
    """
    Resolve a file path or an in-memory buffer to PDF bytes.

    File errors (missing file, permission denied) propagate as `OSError`.
    """
    if _is_path(pdf_input):
        data = await asyncio.to_thread(Path(pdf_input).read_bytes)
        return _as_buffer(data)
    return _as_buffer(pdf_input)


def select_pages(requested: Sequence[int] | None, num_pages: int) -> list[int]:
    """
    Pages to render, in request order.

    Out-of-range page numbers are dropped silently, so "the first N pages" can be asked of
    documents shorter than N.
    """
    if requested is None:
        return list(range(1, num_pages + 1))
    return [n for n in requested if 1 <= n <= num_pages]


def default_file_mask(pdf_input: PdfInput, options: ConversionOptions, defaults: ConversionDefaults) -> str:
    if options.output_file_mask is not None:
        return options.output_file_mask
    if _is_path(pdf_input):
        return Path(pdf_input).stem
    return defaults.output_file_mask


def page_name(page_number: int, mask: str, options: ConversionOptions) -> str:
    if options.output_file_mask_func is not None:
        name = options.output_file_mask_func(page_number)
        if name is not None:
            return name
    return f"{mask}_page_{page_number}.png"


async def save_png_file(output: PageOutput, output_folder: str) -> PageOutput:
    path = sanitize_path(output_folder, output.name)
    if output.content is None:
        raise MissingContentError(f'Cannot write PNG file "{path}" because content is undefined.')
    await asyncio.to_thread(Path(path).write_bytes, output.content)
    return replace(output, path=path)


async def _gather_in_order(aws: Sequence[Awaitable[PageOutput]]) -> list[PageOutput]:
    # First failure wins; siblings are cancelled and settled before it propagates.
    tasks = [asyncio.ensure_future(a) for a in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def _open(
    pdf_input: PdfInput,
    options: ConversionOptions,
    engine: PdfEngine,
    defaults: ConversionDefaults,
) -> PdfDocumentHandle:
    data = await read_pdf_input(pdf_input)
    document = await engine.open_document(data, options_to_engine_params(options, defaults))
    LOGGER.debug("opened PDF document with %d page(s)", document.num_pages)
    return document


async def convert_pdf_to_png(
    pdf_input: PdfInput,
    options: ConversionOptions | None = None,
    *,
    engine: PdfEngine | None = None,
    surface_factory: SurfaceFactory | None = None,
    defaults: ConversionDefaults | None = None,
) -> list[PageOutput]:
    """
    Convert the selected pages of a PDF (file path or bytes) to PNG images.

    Pages render one at a time, or in batches of `concurrency_limit` when
    `process_pages_in_parallel` is set; each batch is fully awaited before the next one
    starts. Results follow the (filtered) requested page order. When `output_folder` is
    given every page is also written to `{output_folder}/{name}`.

    Any failure aborts the whole call; the document is released on every exit path.
    Files already written by the failing batch are left in place.
    """
    opts = options or ConversionOptions()
    dflt = defaults or CONVERSION_DEFAULTS
    eng = engine or PyMuPdfEngine()

    document = await _open(pdf_input, opts, eng, dflt)
    try:
        pages = select_pages(opts.pages_to_process, document.num_pages)
        LOGGER.debug("selected pages %s", pages)

        output_folder: str | None = None
        if opts.output_folder is not None:
            output_folder = normalize_path(opts.output_folder)
            await asyncio.to_thread(os.makedirs, output_folder, exist_ok=True)

        scale = opts.viewport_scale if opts.viewport_scale is not None else dflt.viewport_scale
        return_content = (
            opts.return_page_content if opts.return_page_content is not None else dflt.return_page_content
        )
        # Writing to disk needs the PNG bytes even when the caller does not want them back.
        want_content = True if output_folder is not None else return_content
        mask = default_file_mask(pdf_input, opts, dflt)

        async def process(page_number: int) -> PageOutput:
            output = await render_page(
                document,
                page_number,
                scale,
                page_name(page_number, mask, opts),
                want_content,
                surface_factory=surface_factory,
            )
            if output_folder is None:
                return output
            output = await save_png_file(output, output_folder)
            if not return_content:
                output = replace(output, content=None)
            return output

        parallel = (
            opts.process_pages_in_parallel
            if opts.process_pages_in_parallel is not None
            else dflt.process_pages_in_parallel
        )
        results: list[PageOutput] = []
        if parallel:
            limit = opts.concurrency_limit if opts.concurrency_limit is not None else dflt.concurrency_limit
            limit = max(1, limit)
            for start in range(0, len(pages), limit):
                batch = pages[start : start + limit]
                LOGGER.debug("rendering batch %s", batch)
                results.extend(await _gather_in_order([process(n) for n in batch]))
        else:
            for n in pages:
                results.append(await process(n))
    finally:
        await document.cleanup()

    LOGGER.info("converted %d page(s) to PNG", len(results))
    return results


async def get_document_info(
    pdf_input: PdfInput,
    options: ConversionOptions | None = None,
    *,
    engine: PdfEngine | None = None,
    defaults: ConversionDefaults | None = None,
) -> DocumentInfo:
    """Page count and per-page viewport geometry, without rasterizing anything."""
    opts = options or ConversionOptions()
    dflt = defaults or CONVERSION_DEFAULTS
    eng = engine or PyMuPdfEngine()
    scale = opts.viewport_scale if opts.viewport_scale is not None else dflt.viewport_scale

    document = await _open(pdf_input, opts, eng, dflt)
    try:
        pages: list[PageInfo] = []
        for n in range(1, document.num_pages + 1):
            page = await document.get_page(n)
            try:
                viewport = page.get_viewport(scale)
            finally:
                page.cleanup()
            pages.append(
                PageInfo(page_number=n, width=viewport.width, height=viewport.height, rotation=viewport.rotation)
            )
        return DocumentInfo(num_pages=document.num_pages, pages=pages)
    finally:
        await document.cleanup()


def convert_pdf_to_png_sync(
    pdf_input: PdfInput,
    options: ConversionOptions | None = None,
    *,
    engine: PdfEngine | None = None,
    surface_factory: SurfaceFactory | None = None,
    defaults: ConversionDefaults | None = None,
) -> list[PageOutput]:
    return asyncio.run(
        convert_pdf_to_png(
            pdf_input, options, engine=engine, surface_factory=surface_factory, defaults=defaults
        )
    )


def get_document_info_sync(
    pdf_input: PdfInput,
    options: ConversionOptions | None = None,
    *,
    engine: PdfEngine | None = None,
    defaults: ConversionDefaults | None = None,
) -> DocumentInfo:
    return asyncio.run(get_document_info(pdf_input, options, engine=engine, defaults=defaults))
