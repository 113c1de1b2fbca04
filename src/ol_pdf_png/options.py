from __future__ import annotations

import importlib.util
import math
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import TypeVar

T = TypeVar("T")


class VerbosityLevel(IntEnum):
    ERRORS = 0
    WARNINGS = 1
    INFOS = 5


def _check_viewport_scale(scale: float) -> None:
    if not (scale > 0 and math.isfinite(scale)):
        raise ValueError("viewport_scale must be a finite number > 0")


@dataclass(frozen=True)
class ConversionDefaults:
    viewport_scale: float = 1.0
    disable_font_face: bool = True
    use_system_fonts: bool = False
    enable_xfa: bool = False
    pdf_file_password: str | None = None
    output_file_mask: str = "buffer"
    return_page_content: bool = True
    process_pages_in_parallel: bool = False
    concurrency_limit: int = 4
    verbosity_level: int = VerbosityLevel.ERRORS

    def __post_init__(self) -> None:
        _check_viewport_scale(self.viewport_scale)


CONVERSION_DEFAULTS = ConversionDefaults()


@dataclass(frozen=True)
class ConversionOptions:
    """
    Caller-facing conversion options.

    `None` means "not specified": defaults are applied only to `None` fields, so an
    explicit `False` or `0` is always honoured.
    """

    viewport_scale: float | None = None
    disable_font_face: bool | None = None
    use_system_fonts: bool | None = None
    enable_xfa: bool | None = None
    pdf_file_password: str | None = None
    pages_to_process: Sequence[int] | None = None
    output_file_mask: str | None = None
    output_file_mask_func: Callable[[int], str | None] | None = None
    output_folder: str | os.PathLike[str] | None = None
    return_page_content: bool | None = None
    process_pages_in_parallel: bool | None = None
    concurrency_limit: int | None = None
    verbosity_level: int | None = None

    def __post_init__(self) -> None:
        if self.viewport_scale is not None:
            _check_viewport_scale(self.viewport_scale)


@dataclass(frozen=True)
class EngineInitParams:
    verbosity: int
    disable_font_face: bool
    use_system_fonts: bool
    enable_xfa: bool
    password: str | None
    cmap_url: str
    cmap_packed: bool
    standard_font_data_url: str


def _engine_resource_root() -> Path:
    # Resource data ships with the engine package; never relative to the cwd.
    spec = importlib.util.find_spec("fitz")
    if spec is not None and spec.origin:
        return Path(spec.origin).resolve().parent
    return Path(__file__).resolve().parent


def _coalesce(value: T | None, default: T) -> T:
    return value if value is not None else default


def options_to_engine_params(
    options: ConversionOptions | None = None,
    defaults: ConversionDefaults = CONVERSION_DEFAULTS,
) -> EngineInitParams:
    opts = options or ConversionOptions()
    root = _engine_resource_root()
    return EngineInitParams(
        verbosity=int(_coalesce(opts.verbosity_level, defaults.verbosity_level)),
        disable_font_face=_coalesce(opts.disable_font_face, defaults.disable_font_face),
        use_system_fonts=_coalesce(opts.use_system_fonts, defaults.use_system_fonts),
        enable_xfa=_coalesce(opts.enable_xfa, defaults.enable_xfa),
        password=_coalesce(opts.pdf_file_password, defaults.pdf_file_password),
        cmap_url=str(root / "cmaps") + os.sep,
        cmap_packed=True,
        standard_font_data_url=str(root / "standard_fonts") + os.sep,
    )
