import hashlib
import threading

from document_downloader.processor.models import FileTracker


def content_hash(payload: bytes) -> str:
    """SHA-256 hex digest of the exact payload bytes."""
    return hashlib.sha256(payload).hexdigest()


class DuplicateIndex:
    """Run-scoped map from content digest to the first file written with it.

    Equal digests are treated as equal content; there is no byte-level
    comparison after a hit.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._files: dict[str, FileTracker] = {}

    def try_get(self, file_hash: str) -> FileTracker | None:
        with self._lock:
            return self._files.get(file_hash)

    def try_insert(self, tracker: FileTracker) -> tuple[bool, FileTracker]:
        """Claim ``tracker.file_hash`` atomically.

        Returns:
            ``(True, tracker)`` if the caller is first for this digest,
            otherwise ``(False, existing)`` with the tracker already stored.
        """
        with self._lock:
            existing = self._files.get(tracker.file_hash)
            if existing is not None:
                return False, existing
            self._files[tracker.file_hash] = tracker
            return True, tracker

    def release(self, file_hash: str) -> None:
        """Drop a claim whose write failed."""
        with self._lock:
            self._files.pop(file_hash, None)

    def reset(self) -> None:
        with self._lock:
            self._files.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)

    def __contains__(self, file_hash: object) -> bool:
        with self._lock:
            return file_hash in self._files
