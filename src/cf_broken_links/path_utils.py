"""
String helpers for DAM content paths.
"""

import re
from typing import Optional

from .locale import is_locale_token

DAM_ROOT = "/content/dam"
DAM_PREFIX = DAM_ROOT + "/"

_PROTOCOL_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_SLASH_RUN_RE = re.compile(r"/{2,}")


def remove_locale_from_path(path: Optional[str]) -> Optional[str]:
    """
    Strip locale segments from a DAM path.

    ``/content/dam/en-US/images/photo.jpg`` becomes
    ``/content/dam/images/photo.jpg``. Paths outside the DAM, or without any
    locale segment, are returned unchanged.
    """
    if not path or not path.startswith(DAM_PREFIX):
        return path

    segments = path[len(DAM_PREFIX):].split("/")
    kept = [segment for segment in segments if not is_locale_token(segment)]

    if len(kept) == len(segments):
        return path

    return DAM_ROOT + "".join(f"/{segment}" for segment in kept if segment)


def get_parent_path(path: Optional[str]) -> Optional[str]:
    """
    Return the parent folder of a DAM path.

    Returns None for empty input, for paths outside ``/content/dam/`` and for
    the DAM root itself.
    """
    if not path:
        return None

    trimmed = path.rstrip("/")
    if not trimmed.startswith(DAM_PREFIX):
        return None

    return trimmed[: trimmed.rfind("/")]


def has_double_slashes(path: Optional[str]) -> bool:
    """Check for ``//`` anywhere except a protocol separator."""
    if not path:
        return False
    return "//" in _PROTOCOL_RE.sub("", path, count=1)


def remove_double_slashes(path: Optional[str]) -> Optional[str]:
    """Collapse runs of slashes, keeping any protocol separator intact."""
    if not path:
        return path

    match = _PROTOCOL_RE.match(path)
    if match:
        protocol = match.group(0)
        return protocol + _SLASH_RUN_RE.sub("/", path[len(protocol):])

    return _SLASH_RUN_RE.sub("/", path)
