import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from document_downloader.database.connection import check_connection, close_pool, init_pool
from document_downloader.database.models import ConnectionSettings
from document_downloader.logging.logger import Log
from document_downloader.processor.categories import CATEGORY_DEFINITIONS, CategoryDefinition
from document_downloader.processor.category_processor import CategoryProcessor, DocumentSource
from document_downloader.processor.duplicate_index import DuplicateIndex
from document_downloader.processor.exceptions import OutputFolderError, SourceConnectionError
from document_downloader.processor.file_writer import FileWriter
from document_downloader.progress.log_sink import LogSink
from document_downloader.progress.models import (
    CategoryStatus,
    LogEntry,
    LogLevel,
    ProgressBoard,
    RunTotals,
)

SYSTEM_CATEGORY = "System"


class RunCoordinator:
    """Drive all categories for one run: setup -> categories -> summary.

    Categories run one at a time unless ``max_workers`` > 1, in which case
    they share a thread pool. They only share the duplicate index, which is
    safe for concurrent use.
    """

    def __init__(
        self,
        source: DocumentSource,
        duplicate_index: DuplicateIndex | None = None,
        definitions: Sequence[CategoryDefinition] = CATEGORY_DEFINITIONS,
        max_workers: int = 1,
        file_writer: FileWriter | None = None,
        connect: Callable[[ConnectionSettings], None] | None = None,
        disconnect: Callable[[], None] | None = None,
        probe: Callable[[ConnectionSettings], tuple[bool, str]] = check_connection,
    ) -> None:
        self._source = source
        self._duplicate_index = duplicate_index if duplicate_index is not None else DuplicateIndex()
        self._definitions = tuple(definitions)
        self._max_workers = max(1, max_workers)
        self._file_writer = file_writer if file_writer is not None else FileWriter()
        self._connect = connect if connect is not None else init_pool
        self._disconnect = disconnect if disconnect is not None else close_pool
        self._probe = probe

    def new_progress_board(self) -> ProgressBoard:
        return ProgressBoard(definition.name for definition in self._definitions)

    def test_connection(self, connection: ConnectionSettings) -> tuple[bool, str]:
        """Connectivity probe, usable without starting a run."""
        return self._probe(connection)

    def run(
        self,
        connection: ConnectionSettings,
        progress: ProgressBoard,
        log: LogSink,
        cancel: threading.Event,
    ) -> RunTotals:
        """Run every category and return the aggregate counts.

        Raises:
            OutputFolderError: if the output root cannot be created.
            SourceConnectionError: if the source cannot be reached.
        """
        self._duplicate_index.reset()
        progress.reset()

        output_root = Path(connection.output_folder)
        self._prepare_output_root(output_root, log)
        self._open_source(connection, log)

        try:
            processor = CategoryProcessor(
                self._source, self._duplicate_index, output_root, self._file_writer
            )
            if self._max_workers > 1:
                self._run_parallel(processor, progress, log, cancel)
            else:
                for definition in self._definitions:
                    if cancel.is_set():
                        break
                    self._run_category(processor, definition, progress, log, cancel)
        finally:
            self._disconnect()

        totals = progress.totals()
        self._log_summary(totals, log, cancel)
        return totals

    def _prepare_output_root(self, output_root: Path, log: LogSink) -> None:
        if output_root.is_dir():
            return
        try:
            output_root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            message = f"Cannot create output folder {output_root}: {exc}"
            log(LogEntry(SYSTEM_CATEGORY, message, LogLevel.ERROR))
            raise OutputFolderError(message) from exc
        log(LogEntry(SYSTEM_CATEGORY, f"Created output folder: {output_root}", LogLevel.INFO))

    def _open_source(self, connection: ConnectionSettings, log: LogSink) -> None:
        ok, message = self._probe(connection)
        if ok:
            try:
                self._connect(connection)
            except Exception as exc:
                ok, message = False, f"Error: {exc}"
        if not ok:
            log(LogEntry(SYSTEM_CATEGORY, message, LogLevel.ERROR))
            raise SourceConnectionError(message)
        log(LogEntry(SYSTEM_CATEGORY, "Connected to database successfully", LogLevel.SUCCESS))

    def _run_parallel(
        self,
        processor: CategoryProcessor,
        progress: ProgressBoard,
        log: LogSink,
        cancel: threading.Event,
    ) -> None:
        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="category"
        ) as executor:
            futures = [
                executor.submit(self._run_category, processor, definition, progress, log, cancel)
                for definition in self._definitions
            ]
            for future in futures:
                future.result()

    def _run_category(
        self,
        processor: CategoryProcessor,
        definition: CategoryDefinition,
        progress: ProgressBoard,
        log: LogSink,
        cancel: threading.Event,
    ) -> None:
        """Run one category, isolating any failure to its own counter."""
        if cancel.is_set():
            return
        counter = progress.ensure(definition.name)
        counter.status = CategoryStatus.PROCESSING
        try:
            counter.status = processor.process(definition, counter, log, cancel)
        except Exception as exc:
            counter.status = CategoryStatus.ERROR
            Log.error(f"Category {definition.name} failed: {exc}")
            log(LogEntry(definition.name, f"Fatal error: {exc}", LogLevel.ERROR))

    def _log_summary(self, totals: RunTotals, log: LogSink, cancel: threading.Event) -> None:
        summary = (
            f"{totals.total_documents} documents, {totals.success_count} downloaded, "
            f"{totals.failed_count} failed, {totals.skipped_duplicates} duplicates skipped"
        )
        if cancel.is_set():
            log(LogEntry(SYSTEM_CATEGORY, f"Download cancelled: {summary}", LogLevel.WARNING))
        else:
            log(LogEntry(SYSTEM_CATEGORY, f"Download finished: {summary}", LogLevel.INFO))
