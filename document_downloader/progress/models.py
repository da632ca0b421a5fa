from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class CategoryStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    ERROR = "Error"


class LogLevel(str, Enum):
    INFO = "Info"
    SUCCESS = "Success"
    WARNING = "Warning"
    ERROR = "Error"


@dataclass(frozen=True)
class LogEntry:
    """One observer-facing event. Immutable once emitted."""

    category: str
    message: str
    level: LogLevel = LogLevel.INFO
    file_name: str = ""
    file_size: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ProgressCounter:
    """Per-category counters, mutated only by the processor that owns them."""

    category: str
    status: CategoryStatus = CategoryStatus.PENDING
    total_documents: int = 0
    success_count: int = 0
    failed_count: int = 0
    skipped_duplicates: int = 0
    current_file: str = ""

    def reset(self) -> None:
        self.status = CategoryStatus.PENDING
        self.total_documents = 0
        self.success_count = 0
        self.failed_count = 0
        self.skipped_duplicates = 0
        self.current_file = ""


@dataclass(frozen=True)
class RunTotals:
    total_documents: int = 0
    success_count: int = 0
    failed_count: int = 0
    skipped_duplicates: int = 0


class ProgressBoard:
    """Ordered, externally observable set of counters keyed by category name."""

    def __init__(self, categories: Iterable[str]) -> None:
        self._names = list(categories)
        self._counters = {name: ProgressCounter(category=name) for name in self._names}

    def reset(self) -> None:
        """Put every category back to Pending with zeroed counters.

        Counters are zeroed in place so observers holding one keep seeing
        live values.
        """
        for name in self._names:
            if name in self._counters:
                self._counters[name].reset()
            else:
                self._counters[name] = ProgressCounter(category=name)

    def get(self, category: str) -> ProgressCounter | None:
        return self._counters.get(category)

    def ensure(self, category: str) -> ProgressCounter:
        """Return the counter for ``category``, appending one if it is new."""
        if category not in self._counters:
            self._names.append(category)
            self._counters[category] = ProgressCounter(category=category)
        return self._counters[category]

    def __getitem__(self, category: str) -> ProgressCounter:
        return self._counters[category]

    def __iter__(self) -> Iterator[ProgressCounter]:
        return iter(list(self._counters.values()))

    def __len__(self) -> int:
        return len(self._counters)

    def totals(self) -> RunTotals:
        counters = list(self._counters.values())
        return RunTotals(
            total_documents=sum(c.total_documents for c in counters),
            success_count=sum(c.success_count for c in counters),
            failed_count=sum(c.failed_count for c in counters),
            skipped_duplicates=sum(c.skipped_duplicates for c in counters),
        )


def format_file_size(size: int) -> str:
    """Render a byte count as e.g. ``"512 B"``, ``"1.5 KB"`` or ``"2 MB"``."""
    units = ("B", "KB", "MB", "GB")
    value = float(size)
    order = 0
    while value >= 1024 and order < len(units) - 1:
        value /= 1024
        order += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[order]}"
