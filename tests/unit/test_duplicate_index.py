import threading
from pathlib import Path

from document_downloader.processor.duplicate_index import DuplicateIndex, content_hash
from document_downloader.processor.models import FileTracker


def _tracker(file_hash: str, name: str = "a.pdf") -> FileTracker:
    return FileTracker(
        file_hash=file_hash,
        file_name=name,
        file_size=10,
        file_path=Path("/out") / name,
    )


class TestContentHash:
    def test_is_deterministic_sha256(self) -> None:
        assert content_hash(b"abc") == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_differs_for_different_bytes(self) -> None:
        assert content_hash(b"abc") != content_hash(b"abd")


class TestInsert:
    def test_first_insert_claims(self) -> None:
        index = DuplicateIndex()
        tracker = _tracker("h1")

        assert index.try_insert(tracker) == (True, tracker)
        assert index.try_get("h1") == tracker

    def test_second_insert_returns_original(self) -> None:
        index = DuplicateIndex()
        original = _tracker("h1", "first.pdf")
        index.try_insert(original)

        claimed, existing = index.try_insert(_tracker("h1", "second.pdf"))

        assert claimed is False
        assert existing.file_name == "first.pdf"
        assert len(index) == 1

    def test_missing_hash(self) -> None:
        assert DuplicateIndex().try_get("nope") is None


class TestReleaseAndReset:
    def test_release_allows_new_claim(self) -> None:
        index = DuplicateIndex()
        index.try_insert(_tracker("h1"))

        index.release("h1")

        assert "h1" not in index
        assert index.try_insert(_tracker("h1"))[0] is True

    def test_reset_clears_everything(self) -> None:
        index = DuplicateIndex()
        index.try_insert(_tracker("h1"))
        index.try_insert(_tracker("h2"))

        index.reset()

        assert len(index) == 0


class TestConcurrentInsert:
    def test_exactly_one_thread_wins(self) -> None:
        index = DuplicateIndex()
        barrier = threading.Barrier(16)
        winners: list[str] = []
        lock = threading.Lock()

        def attempt(n: int) -> None:
            barrier.wait()
            claimed, _ = index.try_insert(_tracker("same", f"{n}.pdf"))
            if claimed:
                with lock:
                    winners.append(f"{n}.pdf")

        threads = [threading.Thread(target=attempt, args=(n,)) for n in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(winners) == 1
        assert index.try_get("same").file_name == winners[0]
