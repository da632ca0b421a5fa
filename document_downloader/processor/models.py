from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class DocumentCategory(str, Enum):
    """The nine fixed document domains, in processing order."""

    RISK = "Risk"
    INCIDENT = "Incident"
    CONTROL = "Control"
    ACTION = "Action"
    COMPLIANCE = "Compliance"
    AUDIT_RECOMMENDATION = "AuditRecommendation"
    AUDIT_DETAILS = "AuditDetails"
    AUDIT_FINDING = "AuditFinding"
    POLICY = "Policy"


@dataclass(frozen=True)
class DocumentRecord:
    """A payload ready to be written: bytes plus its resolved target."""

    payload: bytes
    file_name: str
    file_path: Path


@dataclass(frozen=True)
class Extracted:
    record: DocumentRecord


@dataclass(frozen=True)
class Skipped:
    reason: str


ExtractionResult = Extracted | Skipped


@dataclass(frozen=True)
class FileTracker:
    """First file written for a given content digest."""

    file_hash: str
    file_name: str
    file_size: int
    file_path: Path
