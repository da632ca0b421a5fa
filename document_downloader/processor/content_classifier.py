"""File-type inference from magic bytes and declared content types.

Stored content-type metadata is unreliable, so signatures win whenever the
payload carries one; the declared type only disambiguates container formats
(OLE compound files, ZIP packages) or acts as a fallback.
"""

GENERIC_EXTENSION = "bin"

PDF_SIGNATURE = b"%PDF"
OLE_SIGNATURE = b"\xd0\xcf\x11\xe0"
ZIP_SIGNATURE = b"PK"
JPEG_SIGNATURE = b"\xff\xd8"
PNG_SIGNATURE = b"\x89PNG"
GIF_SIGNATURE = b"GIF"

CONTENT_TYPE_EXTENSIONS: dict[str, str] = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/vnd.ms-excel": "xls",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "pptx",
    "application/vnd.ms-powerpoint": "ppt",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/pjpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "text/plain": "txt",
    "text/csv": "csv",
    "application/vnd.ms-outlook": "msg",
    "application/x-msg": "msg",
    "message/rfc822": "msg",
}


def _office_family(content_type: str) -> str | None:
    """Map a declared content type onto word / excel / powerpoint by substring."""
    if "word" in content_type:
        return "word"
    if "excel" in content_type or "spreadsheet" in content_type:
        return "excel"
    if "powerpoint" in content_type or "presentation" in content_type:
        return "powerpoint"
    return None


def _from_signature(payload: bytes, content_type: str) -> str | None:
    if payload.startswith(PDF_SIGNATURE):
        return "pdf"
    if payload.startswith(OLE_SIGNATURE):
        return {"word": "doc", "excel": "xls", "powerpoint": "ppt"}.get(
            _office_family(content_type) or "", "msg"
        )
    if payload.startswith(ZIP_SIGNATURE):
        return {"word": "docx", "excel": "xlsx", "powerpoint": "pptx"}.get(
            _office_family(content_type) or "", "docx"
        )
    if payload.startswith(JPEG_SIGNATURE):
        return "jpg"
    if payload.startswith(PNG_SIGNATURE):
        return "png"
    if payload.startswith(GIF_SIGNATURE):
        return "gif"
    return None


def classify_extension(payload: bytes | None, content_type: str | None = None) -> str:
    """Return a file extension (without the dot) for ``payload``.

    Priority: magic bytes, then the exact declared content type, then
    ``GENERIC_EXTENSION``.
    """
    normalized = (content_type or "").strip().lower()
    if payload:
        extension = _from_signature(payload, normalized)
        if extension is not None:
            return extension
    return CONTENT_TYPE_EXTENSIONS.get(normalized, GENERIC_EXTENSION)
