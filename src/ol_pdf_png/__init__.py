from ol_pdf_png.config import Settings, load_settings
from ol_pdf_png.convert import (
    convert_pdf_to_png,
    convert_pdf_to_png_sync,
    get_document_info,
    get_document_info_sync,
)
from ol_pdf_png.engine import PdfDocumentHandle, PdfEngine, PdfPageHandle, PyMuPdfEngine
from ol_pdf_png.exceptions import (
    DocumentOpenError,
    InputReadError,
    InvalidDimensionError,
    MissingContentError,
    MissingSurfaceError,
    PathTraversalError,
    PdfToPngError,
    PersistError,
    RenderError,
    SurfaceError,
    UnsupportedBufferTypeError,
)
from ol_pdf_png.models import DocumentInfo, PageInfo, PageOutput, Viewport
from ol_pdf_png.options import (
    CONVERSION_DEFAULTS,
    ConversionDefaults,
    ConversionOptions,
    EngineInitParams,
    VerbosityLevel,
    options_to_engine_params,
)
from ol_pdf_png.paths import normalize_path, sanitize_path
from ol_pdf_png.render import render_page
from ol_pdf_png.surface import DrawingSurface, PaintContext, SurfaceFactory, SurfaceHandle

__all__ = [
    "__version__",
    "CONVERSION_DEFAULTS",
    "ConversionDefaults",
    "ConversionOptions",
    "DocumentInfo",
    "DocumentOpenError",
    "DrawingSurface",
    "EngineInitParams",
    "InputReadError",
    "InvalidDimensionError",
    "MissingContentError",
    "MissingSurfaceError",
    "PageInfo",
    "PageOutput",
    "PaintContext",
    "PathTraversalError",
    "PdfDocumentHandle",
    "PdfEngine",
    "PdfPageHandle",
    "PdfToPngError",
    "PersistError",
    "PyMuPdfEngine",
    "RenderError",
    "Settings",
    "SurfaceError",
    "SurfaceFactory",
    "SurfaceHandle",
    "UnsupportedBufferTypeError",
    "VerbosityLevel",
    "Viewport",
    "convert_pdf_to_png",
    "convert_pdf_to_png_sync",
    "get_document_info",
    "get_document_info_sync",
    "load_settings",
    "normalize_path",
    "options_to_engine_params",
    "render_page",
    "sanitize_path",
]

__version__ = "0.0.0"
