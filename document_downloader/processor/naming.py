"""Path-segment sanitizing and the shared file-naming rule."""

import re
from collections.abc import Iterable
from urllib.parse import unquote, urlsplit

from document_downloader.processor.content_classifier import classify_extension

PLACEHOLDER_NAME = "Unknown"
MAX_FOLDER_NAME_LENGTH = 100
GENERIC_PLACEHOLDER_EXTENSIONS = frozenset({".bin", ".dat"})

_INVALID_CHARS = re.compile(r'[\x00-\x1f/\\:*?"<>|]')
_EXTENSION = re.compile(r"\.[A-Za-z0-9]{1,10}$")
_SEPARATORS = re.compile(r"[\\/]")


def _sanitize(name: str | None) -> str:
    if name is None or not name.strip():
        return PLACEHOLDER_NAME
    cleaned = _INVALID_CHARS.sub("_", name.strip())
    # "." and ".." would resolve outside the intended folder.
    if not cleaned.strip("."):
        cleaned = cleaned.replace(".", "_")
    return cleaned


def sanitize_folder_name(name: str | None) -> str:
    """Make ``name`` safe as a folder segment, capped at 100 characters."""
    cleaned = _sanitize(name)[:MAX_FOLDER_NAME_LENGTH].strip()
    return cleaned or PLACEHOLDER_NAME


def sanitize_file_name(name: str | None) -> str:
    """Make ``name`` safe as a file name. File names are never truncated."""
    return _sanitize(name)


def split_extension(name: str) -> tuple[str, str]:
    """Split ``"report.pdf"`` into ``("report", ".pdf")``.

    Only a short alphanumeric suffix counts as an extension, so titles such
    as ``"Q1. Review"`` keep their dot.
    """
    match = _EXTENSION.search(name)
    if match is None or match.start() == 0:
        return name, ""
    return name[: match.start()], match.group()


def name_from_location(location: str | None) -> str | None:
    """Return the last segment of a stored file path or document URL."""
    if location is None or not location.strip():
        return None
    location = location.strip()
    if "://" in location:
        location = unquote(urlsplit(location).path)
    name = _SEPARATORS.split(location)[-1].strip()
    return name or None


def with_inferred_extension(
    name: str, payload: bytes, content_type: str | None = None
) -> str:
    """Append or replace the extension when it is missing or generic."""
    stem, extension = split_extension(name)
    if not extension or extension.lower() in GENERIC_PLACEHOLDER_EXTENSIONS:
        return f"{stem}.{classify_extension(payload, content_type)}"
    return name


def build_file_name(
    candidates: Iterable[str | None],
    placeholder: str,
    payload: bytes,
    content_type: str | None = None,
) -> str:
    """Pick the first non-blank candidate, fix its extension, sanitize it."""
    name = next(
        (candidate.strip() for candidate in candidates if candidate and candidate.strip()),
        placeholder,
    )
    return sanitize_file_name(with_inferred_extension(name, payload, content_type))
