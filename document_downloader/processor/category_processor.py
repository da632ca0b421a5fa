import threading
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

from document_downloader.database.models import SourceRow
from document_downloader.logging.logger import Log
from document_downloader.processor.categories import CategoryDefinition
from document_downloader.processor.duplicate_index import DuplicateIndex, content_hash
from document_downloader.processor.exceptions import CategoryQueryError
from document_downloader.processor.file_writer import FileWriter
from document_downloader.processor.models import DocumentRecord, FileTracker, Skipped
from document_downloader.progress.log_sink import LogSink
from document_downloader.progress.models import (
    CategoryStatus,
    LogEntry,
    LogLevel,
    ProgressCounter,
    format_file_size,
)


class DocumentSource(Protocol):
    def stream(self, query: str) -> Iterator[SourceRow]: ...


class CategoryProcessor:
    """Shared driver: runs one category query and writes its documents.

    Row problems are counted and logged, never raised. A query that cannot
    be opened or read ends the category with ``CategoryStatus.ERROR``.
    Anything else escaping the loop (e.g. the category folder cannot be
    created) propagates to the caller.
    """

    def __init__(
        self,
        source: DocumentSource,
        duplicate_index: DuplicateIndex,
        output_root: Path,
        file_writer: FileWriter | None = None,
    ) -> None:
        self._source = source
        self._duplicate_index = duplicate_index
        self._output_root = output_root
        self._file_writer = file_writer if file_writer is not None else FileWriter()

    def process(
        self,
        definition: CategoryDefinition,
        progress: ProgressCounter,
        log: LogSink,
        cancel: threading.Event,
    ) -> CategoryStatus:
        """Stream and write every document of ``definition``.

        Returns:
            COMPLETED when the stream was exhausted, CANCELLED when the
            cancellation event stopped it, ERROR when the query failed.
        """
        self._file_writer.ensure_directory(self._output_root / definition.root_folder)
        Log.info(f"Processing category {definition.name}")

        rows = self._source.stream(definition.query)
        try:
            for row in rows:
                if cancel.is_set():
                    Log.info(f"Category {definition.name} cancelled")
                    return CategoryStatus.CANCELLED

                progress.total_documents += 1
                try:
                    self._process_row(definition, row, progress, log)
                except Exception as exc:
                    progress.failed_count += 1
                    log(LogEntry(definition.name, f"Error: {exc}", LogLevel.ERROR))
        except CategoryQueryError as exc:
            log(
                LogEntry(
                    definition.name,
                    f"SQL Error: {exc}. Table may not exist in this database.",
                    LogLevel.WARNING,
                )
            )
            return CategoryStatus.ERROR
        finally:
            close = getattr(rows, "close", None)
            if close is not None:
                close()

        Log.info(
            f"Category {definition.name} finished: {progress.success_count} written, "
            f"{progress.failed_count} failed, {progress.skipped_duplicates} duplicates"
        )
        return CategoryStatus.COMPLETED

    def _process_row(
        self,
        definition: CategoryDefinition,
        row: SourceRow,
        progress: ProgressCounter,
        log: LogSink,
    ) -> None:
        result = definition.extract(row, self._output_root, progress.total_documents)
        if isinstance(result, Skipped):
            progress.failed_count += 1
            log(LogEntry(definition.name, f"Skipped: {result.reason}", LogLevel.WARNING))
            return

        record = result.record
        file_hash = content_hash(record.payload)
        existing = self._duplicate_index.try_get(file_hash)
        if existing is None:
            target = self._file_writer.unique_path(record.file_path)
            claimed, existing = self._duplicate_index.try_insert(
                FileTracker(
                    file_hash=file_hash,
                    file_name=record.file_name,
                    file_size=len(record.payload),
                    file_path=target,
                )
            )
            if claimed:
                self._write(record, target, file_hash)
                progress.success_count += 1
                progress.current_file = record.file_name
                log(
                    LogEntry(
                        definition.name,
                        f"Downloaded: {record.file_name}",
                        LogLevel.SUCCESS,
                        file_name=record.file_name,
                        file_size=format_file_size(len(record.payload)),
                    )
                )
                return

        progress.skipped_duplicates += 1
        log(
            LogEntry(
                definition.name,
                f"Duplicate detected: {record.file_name} (same as {existing.file_name})",
                LogLevel.WARNING,
                file_name=record.file_name,
            )
        )

    def _write(self, record: DocumentRecord, target: Path, file_hash: str) -> None:
        try:
            self._file_writer.write(target, record.payload)
        except Exception:
            self._duplicate_index.release(file_hash)
            raise
        Log.debug(f"Wrote {len(record.payload)} bytes to {target}")
