from __future__ import annotations

import os
from pathlib import Path

from ol_pdf_png.exceptions import PathTraversalError


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Absolute, normalised directory path that always ends with a separator."""
    raw = os.fspath(path)
    if raw == "":
        raise ValueError("Path cannot be empty")
    resolved = os.path.normpath(os.path.abspath(raw))
    if resolved.endswith(os.sep):
        return resolved
    return resolved + os.sep


def sanitize_path(base: str | os.PathLike[str], target: str | os.PathLike[str]) -> str:
    """
    Resolve `target` against `base` and require the result to stay inside `base`.

    Containment is checked on path segments, so `/base-evil` is not inside `/base`.
    """
    base_path = Path(os.path.normpath(os.path.abspath(os.fspath(base))))
    resolved = Path(os.path.normpath(base_path / os.fspath(target)))
    if resolved != base_path and base_path not in resolved.parents:
        raise PathTraversalError("Invalid path: Path traversal detected.")
    return str(resolved)
