import signal
import sys
import threading
from functools import partial
from types import FrameType

from document_downloader.config.settings import Settings
from document_downloader.database.connection import init_pool
from document_downloader.database.repositories.document_source_repository import (
    DocumentSourceRepository,
)
from document_downloader.logging.logger import Log
from document_downloader.processor.exceptions import DownloaderError
from document_downloader.progress.log_sink import LogForwarder
from document_downloader.progress.models import ProgressBoard
from document_downloader.worker.run_coordinator import RunCoordinator


def build_coordinator(settings: Settings) -> RunCoordinator:
    """Wire the coordinator to the PostgreSQL source described by settings."""
    workers = settings.max_category_workers if settings.parallel_categories else 1
    source = DocumentSourceRepository(
        query_timeout_seconds=settings.query_timeout_seconds,
        fetch_batch_size=settings.fetch_batch_size,
    )
    return RunCoordinator(
        source,
        max_workers=workers,
        connect=partial(init_pool, max_size=max(settings.pool_max_size, workers)),
    )


def print_summary(progress: ProgressBoard) -> None:
    for counter in progress:
        Log.info(
            f"{counter.category:<20} {counter.status.value:<10} "
            f"total={counter.total_documents} ok={counter.success_count} "
            f"failed={counter.failed_count} duplicates={counter.skipped_duplicates}"
        )


def main() -> int:
    """Entry point: settings -> connectivity check -> run all categories."""
    settings = Settings()
    Log.configure(settings.log_level)

    connection = settings.connection_settings()
    if not connection.is_valid:
        Log.error("DB_HOST, DB_DATABASE, DB_USERNAME, DB_PASSWORD and OUTPUT_FOLDER are required")
        return 1

    coordinator = build_coordinator(settings)
    ok, message = coordinator.test_connection(connection)
    if not ok:
        Log.error(message)
        return 1
    Log.success(message)

    cancel = threading.Event()

    def _request_stop(signum: int, frame: FrameType | None) -> None:
        Log.warning("Cancellation requested, finishing current document")
        cancel.set()

    signal.signal(signal.SIGINT, _request_stop)

    progress = coordinator.new_progress_board()
    try:
        coordinator.run(connection, progress, LogForwarder(), cancel)
    except DownloaderError as exc:
        Log.error(f"Download aborted: {exc}")
        return 1
    finally:
        print_summary(progress)
    return 0


if __name__ == "__main__":
    sys.exit(main())
