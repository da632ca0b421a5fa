import os
import uuid
from pathlib import Path


def unique_file_path(path: Path) -> Path:
    """Return ``path`` if free, else the first free ``<stem>_<n><suffix>``.

    Not atomic against other writers; callers own the folder they write in.
    """
    if not path.exists():
        return path
    counter = 1
    while True:
        candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
        if not candidate.exists():
            return candidate
        counter += 1


def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


class FileWriter:
    """Filesystem primitives used by the category driver."""

    def ensure_directory(self, path: Path) -> Path:
        return ensure_directory(path)

    def unique_path(self, path: Path) -> Path:
        return unique_file_path(path)

    def write(self, path: Path, payload: bytes) -> None:
        """Write ``payload`` to ``path`` without leaving a partial file behind.

        The bytes go to a hidden temporary sibling and are renamed into
        place once complete.
        """
        ensure_directory(path.parent)
        tmp = path.with_name(f".{path.name}.{uuid.uuid4().hex}.part")
        try:
            with open(tmp, "wb") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp, path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
