from pathlib import Path
from unittest.mock import patch

import pytest

from document_downloader.processor.file_writer import FileWriter, unique_file_path


class TestUniqueFilePath:
    def test_free_path_is_unchanged(self, tmp_path: Path) -> None:
        target = tmp_path / "report.pdf"
        assert unique_file_path(target) == target

    def test_suffixes_on_collision(self, tmp_path: Path) -> None:
        (tmp_path / "report.pdf").write_bytes(b"existing")
        assert unique_file_path(tmp_path / "report.pdf") == tmp_path / "report_1.pdf"

    def test_probes_sequentially(self, tmp_path: Path) -> None:
        for name in ("report.pdf", "report_1.pdf", "report_2.pdf"):
            (tmp_path / name).write_bytes(b"existing")
        assert unique_file_path(tmp_path / "report.pdf") == tmp_path / "report_3.pdf"

    def test_name_without_extension(self, tmp_path: Path) -> None:
        (tmp_path / "notes").write_bytes(b"existing")
        assert unique_file_path(tmp_path / "notes") == tmp_path / "notes_1"


class TestFileWriter:
    def test_writes_bytes_and_creates_folders(self, tmp_path: Path) -> None:
        target = tmp_path / "Risk" / "Ops" / "a.pdf"

        FileWriter().write(target, b"%PDF data")

        assert target.read_bytes() == b"%PDF data"

    def test_leaves_no_temporary_files(self, tmp_path: Path) -> None:
        FileWriter().write(tmp_path / "a.pdf", b"%PDF data")

        assert [p.name for p in tmp_path.iterdir()] == ["a.pdf"]

    def test_failed_write_leaves_nothing(self, tmp_path: Path) -> None:
        target = tmp_path / "a.pdf"

        with patch(
            "document_downloader.processor.file_writer.os.fsync",
            side_effect=OSError("disk full"),
        ):
            with pytest.raises(OSError, match="disk full"):
                FileWriter().write(target, b"%PDF data")

        assert list(tmp_path.iterdir()) == []

    def test_failed_rename_leaves_nothing(self, tmp_path: Path) -> None:
        target = tmp_path / "a.pdf"

        with patch(
            "document_downloader.processor.file_writer.os.replace",
            side_effect=OSError("permission denied"),
        ):
            with pytest.raises(OSError, match="permission denied"):
                FileWriter().write(target, b"%PDF data")

        assert list(tmp_path.iterdir()) == []
