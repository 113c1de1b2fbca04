from __future__ import annotations


class PdfToPngError(Exception):
    pass


class InputReadError(PdfToPngError):
    pass


class UnsupportedBufferTypeError(InputReadError, TypeError):
    pass


class DocumentOpenError(PdfToPngError):
    pass


class RenderError(PdfToPngError):
    pass


class PersistError(PdfToPngError):
    pass


class MissingContentError(PersistError):
    pass


class PathTraversalError(PdfToPngError, ValueError):
    pass


class SurfaceError(PdfToPngError):
    pass


class InvalidDimensionError(SurfaceError, ValueError):
    pass


class MissingSurfaceError(SurfaceError):
    pass
