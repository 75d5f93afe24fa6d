"""Safe static asset lookup for files shipped next to the UI index page."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_TEXT_TYPES = frozenset({"application/javascript", "application/json", "image/svg+xml"})


@dataclass(frozen=True)
class StaticAsset:
    """File body and HTTP content type for one UI asset."""
    path: Path
    body: bytes
    content_type: str


def resolve_static_file(ui_root: Path, request_path: str) -> Optional[Path]:
    """Resolve a request path to a visible file inside `ui_root`, else None."""
    relative = request_path.lstrip("/")
    if not relative:
        return None
    if any(part.startswith(".") for part in Path(relative).parts):
        return None

    root = ui_root.resolve()
    candidate = (root / relative).resolve()
    if root not in candidate.parents or not candidate.is_file():
        return None
    return candidate


def content_type_for(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(str(path))
    if not mime_type:
        return "application/octet-stream"
    if mime_type.startswith("text/") or mime_type in _TEXT_TYPES:
        return f"{mime_type}; charset=utf-8"
    return mime_type


def load_static_asset(ui_root: Path, request_path: str) -> Optional[StaticAsset]:
    path = resolve_static_file(ui_root, request_path)
    if path is None:
        return None
    try:
        body = path.read_bytes()
    except OSError:
        return None
    return StaticAsset(path=path, body=body, content_type=content_type_for(path))
