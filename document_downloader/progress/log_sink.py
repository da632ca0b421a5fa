import threading
from collections.abc import Callable

from document_downloader.logging.logger import Log
from document_downloader.progress.models import LogEntry, LogLevel

LogSink = Callable[[LogEntry], None]


class LogForwarder:
    """Default log sink: writes each entry to the process logger.

    With ``keep=True`` entries are also collected in memory, in emission
    order. Safe to call from several category threads.
    """

    _METHODS: dict[LogLevel, str] = {
        LogLevel.INFO: "info",
        LogLevel.SUCCESS: "success",
        LogLevel.WARNING: "warning",
        LogLevel.ERROR: "error",
    }

    def __init__(self, keep: bool = False) -> None:
        self._keep = keep
        self._lock = threading.Lock()
        self.entries: list[LogEntry] = []

    def __call__(self, entry: LogEntry) -> None:
        message = f"[{entry.category}] {entry.message}"
        if entry.file_size:
            message = f"{message} ({entry.file_size})"
        getattr(Log, self._METHODS[entry.level])(message)
        if self._keep:
            with self._lock:
                self.entries.append(entry)
