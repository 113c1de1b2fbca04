from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float
    rotation: int = 0
    scale: float = 1.0


@dataclass(frozen=True)
class PageOutput:
    page_number: int  # 1-based
    name: str
    content: bytes | None
    path: str
    width: float
    height: float


@dataclass(frozen=True)
class PageInfo:
    page_number: int  # 1-based
    width: float
    height: float
    rotation: int


@dataclass(frozen=True)
class DocumentInfo:
    num_pages: int
    pages: list[PageInfo] = field(default_factory=list)
