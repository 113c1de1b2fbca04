from __future__ import annotations

import asyncio
from pathlib import Path

import fitz  # PyMuPDF
import pytest

from ol_pdf_png.exceptions import RenderError
from ol_pdf_png.models import Viewport
from ol_pdf_png.surface import SurfaceFactory, SurfaceHandle


def make_pdf(num_pages: int, *, width: float = 200, height: float = 100, password: str | None = None) -> bytes:
    doc = fitz.open()
    for i in range(num_pages):
        page = doc.new_page(width=width, height=height)
        page.insert_text((20, 50), f"Page {i + 1}")
    if password is None:
        data = doc.tobytes()
    else:
        data = doc.tobytes(encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw=password, user_pw=password)
    doc.close()
    return data


def png_size(data: bytes) -> tuple[int, int]:
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    return int.from_bytes(data[16:20], "big"), int.from_bytes(data[20:24], "big")


@pytest.fixture()
def pdf_bytes() -> bytes:
    return make_pdf(3)


@pytest.fixture()
def pdf_path(tmp_path: Path, pdf_bytes: bytes) -> Path:
    path = tmp_path / "foo" / "bar.pdf"
    path.parent.mkdir()
    path.write_bytes(pdf_bytes)
    return path


class CountingSurfaceFactory(SurfaceFactory):
    def __init__(self) -> None:
        self.created = 0
        self.destroyed = 0
        self.max_live = 0

    @property
    def live(self) -> int:
        return self.created - self.destroyed

    def create(self, width: int, height: int) -> SurfaceHandle:
        handle = super().create(width, height)
        self.created += 1
        self.max_live = max(self.max_live, self.live)
        return handle

    def destroy(self, handle: SurfaceHandle) -> None:
        super().destroy(handle)
        self.destroyed += 1


class FakePage:
    def __init__(self, doc: FakeDocument, page_number: int):
        self._doc = doc
        self.page_number = page_number

    def get_viewport(self, scale: float) -> Viewport:
        return Viewport(width=100 * scale, height=50 * scale, rotation=0, scale=scale)

    async def render(self, context, viewport: Viewport) -> None:
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        if self.page_number in self._doc.failing_pages:
            raise RenderError(f"boom on page {self.page_number}")

    def cleanup(self) -> None:
        self._doc.page_cleanups += 1


class FakeDocument:
    def __init__(self, num_pages: int, failing_pages: set[int]):
        self.num_pages = num_pages
        self.failing_pages = failing_pages
        self.pages_opened = 0
        self.page_cleanups = 0
        self.cleanup_calls = 0

    async def get_page(self, page_number: int) -> FakePage:
        await asyncio.sleep(0)
        self.pages_opened += 1
        return FakePage(self, page_number)

    async def cleanup(self) -> None:
        self.cleanup_calls += 1


class FakeEngine:
    def __init__(self, num_pages: int = 3, failing_pages: set[int] | None = None):
        self.document = FakeDocument(num_pages, failing_pages or set())
        self.params = None

    async def open_document(self, data, params) -> FakeDocument:
        self.params = params
        return self.document
