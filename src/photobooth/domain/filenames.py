"""Filename and stored-path safety helpers."""

import re
from pathlib import Path
from urllib.parse import quote

from photobooth.domain.errors import ForbiddenPathError

MAX_FILENAME_LENGTH = 255

_PATH_SEPARATORS = re.compile(r"[/\\]")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_UNSAFE_STORAGE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def sanitize_filename(name: str) -> str:
    """Make a client filename safe for headers and path segments."""
    cleaned = _PATH_SEPARATORS.sub("_", name)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    cleaned = cleaned.replace('"', "'")
    return cleaned[:MAX_FILENAME_LENGTH]


def storage_safe_stem(name: str) -> tuple[str, str]:
    """Split a filename into an ASCII-safe stem and its lowercase extension."""
    path = Path(sanitize_filename(name))
    suffix = path.suffix.lower()
    if not re.fullmatch(r"\.[a-z0-9]{1,8}", suffix):
        suffix = ""
    stem = path.name[: len(path.name) - len(suffix)] if suffix else path.name
    return _UNSAFE_STORAGE_CHARS.sub("_", stem)[:100] or "photo", suffix


def resolve_within(base_dir: Path, relative: str) -> Path:
    """Resolve ``relative`` under ``base_dir`` and refuse anything outside it."""
    root = base_dir.resolve()
    candidate = (root / relative).resolve()
    if candidate == root or not candidate.is_relative_to(root):
        raise ForbiddenPathError()
    return candidate


def content_disposition(name: str) -> str:
    """Build an attachment header value with an ASCII fallback filename."""
    safe = sanitize_filename(name) or "photo"
    ascii_name = safe.encode("ascii", "replace").decode("ascii").replace("?", "_")
    value = f'attachment; filename="{ascii_name}"'
    if ascii_name != safe:
        value += f"; filename*=UTF-8''{quote(safe, safe='')}"
    return value
