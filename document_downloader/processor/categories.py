"""Fixed per-category queries, folder layouts and naming rules.

Every category is a ``CategoryDefinition``; the shared driver in
``category_processor`` runs them all the same way. Queries alias their
columns to lower-case names so rows are read by the same keys on any
server collation.
"""

import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from document_downloader.database.models import SourceRow
from document_downloader.processor.content_classifier import classify_extension
from document_downloader.processor.models import (
    DocumentCategory,
    DocumentRecord,
    Extracted,
    ExtractionResult,
    Skipped,
)
from document_downloader.processor.naming import (
    GENERIC_PLACEHOLDER_EXTENSIONS,
    build_file_name,
    name_from_location,
    sanitize_file_name,
    sanitize_folder_name,
    split_extension,
)

NO_FILE_DATA = "No file data"
MISSING_FOLDER_INFORMATION = "Missing folder information"

# (row) -> folder segments below the category root, or None when unknown
GroupingRule = Callable[[SourceRow], Sequence[str] | None]
# (row, payload, ordinal) -> final sanitized file name
NamingRule = Callable[[SourceRow, bytes, int], str]


@dataclass(frozen=True)
class CategoryDefinition:
    """Query, folder layout and naming for one document category."""

    category: DocumentCategory
    root_folder: str
    query: str
    payload_column: str
    grouping: GroupingRule
    naming: NamingRule
    skip_label: Callable[[SourceRow], str] | None = None

    @property
    def name(self) -> str:
        return self.category.value

    def extract(self, row: SourceRow, output_root: Path, ordinal: int) -> ExtractionResult:
        """Map one source row to a document ready to write, or a skip reason.

        ``ordinal`` is the 1-based row count within the category and feeds
        generated placeholder names. Nothing is touched on disk.
        """
        payload = row.blob(self.payload_column)
        if not payload:
            return Skipped(self._reason(row, NO_FILE_DATA))

        segments = self.grouping(row)
        if segments is None:
            return Skipped(self._reason(row, MISSING_FOLDER_INFORMATION))

        folder = output_root / self.root_folder
        for segment in segments:
            folder = folder / sanitize_folder_name(segment)

        file_name = self.naming(row, payload, ordinal)
        return Extracted(
            DocumentRecord(payload=payload, file_name=file_name, file_path=folder / file_name)
        )

    def _reason(self, row: SourceRow, reason: str) -> str:
        if self.skip_label is None:
            return reason
        return f"{self.skip_label(row)} - {reason}"


def _stored_name_or_title(row: SourceRow, payload: bytes, ordinal: int) -> str:
    return build_file_name(
        [row.text("file_name"), row.text("title")],
        "Untitled",
        payload,
    )


def _attachment_name(row: SourceRow, payload: bytes, ordinal: int) -> str:
    return build_file_name(
        [name_from_location(row.text("document_url")), row.text("title")],
        f"attachment_{uuid.uuid4().hex}",
        payload,
        row.text("content_type"),
    )


# Risk

def _risk_grouping(row: SourceRow) -> Sequence[str]:
    return (
        row.text("field_name", "Unknown_FieldName"),
        row.text("risk_code", "Unknown_RiskCode"),
    )


RISK = CategoryDefinition(
    category=DocumentCategory.RISK,
    root_folder="Risk",
    query="""
        SELECT
            radoc.assessmentdocumentid AS assessment_document_id,
            radoc.assessmentdetailid AS assessment_detail_id,
            radet.riskcode AS risk_code,
            radet.risktypeid AS risk_type_id,
            rrt.fieldname AS field_name,
            radet.title AS risk_assessment_detail_title,
            radoc.title AS title,
            radoc.filename AS file_name,
            radoc.filedata AS file_data
        FROM risk_assessmentdocument AS radoc
        INNER JOIN risk_assessmentdetail AS radet
            ON radet.assessmentdetailid = radoc.assessmentdetailid
        INNER JOIN risk_risktype AS rrt
            ON rrt.risktypeid = radet.risktypeid
        ORDER BY radet.risktypeid
    """,
    payload_column="file_data",
    grouping=_risk_grouping,
    naming=_stored_name_or_title,
)


# Incident

def _incident_name(row: SourceRow, payload: bytes, ordinal: int) -> str:
    code = row.text("incident_code", "Unknown_Code")
    stored_name = (row.text("name") or "").strip()
    stored_path = name_from_location(row.text("file_path")) or ""

    stem = split_extension(stored_name)[0] if stored_name else f"Document_{ordinal}"
    extension = split_extension(stored_name)[1] or split_extension(stored_path)[1]
    if not extension or extension.lower() in GENERIC_PLACEHOLDER_EXTENSIONS:
        extension = f".{classify_extension(payload)}"
    return sanitize_file_name(f"{code}_{stem}{extension}")


INCIDENT = CategoryDefinition(
    category=DocumentCategory.INCIDENT,
    root_folder="Incident",
    query="""
        SELECT
            i.incidentid AS incident_id,
            i.incidenttitle AS incident_title,
            i.incidentcode AS incident_code,
            e.documentid AS document_id,
            e.file AS file_data,
            e.name AS name,
            e.filepath AS file_path
        FROM incident AS i
        INNER JOIN entitydocument AS e
            ON e.objectdataid = i.incidentid
        WHERE e.file IS NOT NULL
            AND e.isdeleted = 0
        ORDER BY i.incidentcode
    """,
    payload_column="file_data",
    grouping=lambda row: (row.text("incident_code", "Unknown_Code"),),
    naming=_incident_name,
)


# Control and Action share one layout: "<Prefix>_<id>_<title>".

def _detail_grouping(prefix: str, id_column: str) -> GroupingRule:
    def grouping(row: SourceRow) -> Sequence[str] | None:
        detail_id = row.integer(id_column)
        if detail_id is None:
            return None
        return (f"{prefix}_{detail_id}_{row.text('title', 'Untitled')}",)

    return grouping


CONTROL = CategoryDefinition(
    category=DocumentCategory.CONTROL,
    root_folder="Control",
    query="""
        SELECT
            b.controldetailid AS control_detail_id,
            a.title AS title,
            b.filename AS file_name,
            b.filedata AS file_data
        FROM controldetails AS a
        INNER JOIN controldocuments AS b
            ON a.id = b.controldetailid
        ORDER BY b.controldetailid
    """,
    payload_column="file_data",
    grouping=_detail_grouping("Control", "control_detail_id"),
    naming=_stored_name_or_title,
    skip_label=lambda row: f"Control ID {row.text('control_detail_id', 'Unknown')}",
)

ACTION = CategoryDefinition(
    category=DocumentCategory.ACTION,
    root_folder="Action",
    query="""
        SELECT
            actiondetailid AS action_detail_id,
            title AS title,
            filename AS file_name,
            filedata AS file_data
        FROM action_document
        ORDER BY actiondetailid
    """,
    payload_column="file_data",
    grouping=_detail_grouping("Action", "action_detail_id"),
    naming=_stored_name_or_title,
    skip_label=lambda row: f"Action ID {row.text('action_detail_id', 'Unknown')}",
)


# Compliance: the folder comes from whichever linked entity the document
# belongs to. (application folder, id column, code column, title column)
COMPLIANCE_ENTITIES: tuple[tuple[str, str, str, str], ...] = (
    ("Incident_Linked_Compliance_Documents", "incident_id", "incident_code", "incident_title"),
    ("Compliance", "compliance_id", "compliance_code", "compliance_title"),
    ("AuthorityDocument", "authority_document_id", "authority_code", "authority_title"),
    ("Policy", "policy_id", "policy_code", "policy_title"),
)


def _compliance_grouping(row: SourceRow) -> Sequence[str] | None:
    linked = [entity for entity in COMPLIANCE_ENTITIES if row.get(entity[1]) is not None]
    if len(linked) != 1:
        return None
    application_folder, _id_column, code_column, title_column = linked[0]
    code = row.text(code_column)
    title = row.text(title_column)
    if code is None or title is None:
        return None
    return (application_folder, f"{code} - {title}")


def _compliance_name(row: SourceRow, payload: bytes, ordinal: int) -> str:
    return build_file_name(
        [name_from_location(row.text("file_path"))],
        f"document_{ordinal}",
        payload,
    )


COMPLIANCE = CategoryDefinition(
    category=DocumentCategory.COMPLIANCE,
    root_folder="Compliance",
    query="""
        SELECT
            i.incidentid AS incident_id,
            i.incidentcode AS incident_code,
            i.incidenttitle AS incident_title,
            c.complianceid AS compliance_id,
            c.code AS compliance_code,
            c.title AS compliance_title,
            ad.authoritydocumentid AS authority_document_id,
            ad.code AS authority_code,
            ad.title AS authority_title,
            p.policyid AS policy_id,
            p.code AS policy_code,
            p.title AS policy_title,
            ed.file AS file_data,
            ed.filepath AS file_path
        FROM entitydocument AS ed
        LEFT OUTER JOIN incident AS i
            ON ed.objectdataid = i.incidentid
            AND ed.imsapplicationid = 1
        LEFT OUTER JOIN compliance AS c
            ON ed.objectdataid = c.complianceid
            AND ed.imsapplicationid = 2 AND ed.imssubapplicationid = 3
        LEFT OUTER JOIN authoritydocument AS ad
            ON ed.objectdataid = ad.authoritydocumentid
            AND ed.imsapplicationid = 2 AND ed.imssubapplicationid = 4
        LEFT OUTER JOIN policy AS p
            ON ed.objectdataid = p.policyid
            AND ed.imsapplicationid = 2 AND ed.imssubapplicationid = 5
        WHERE ed.file IS NOT NULL
            AND ed.isdeleted = 0
        ORDER BY ed.imsapplicationid, ed.imssubapplicationid, ed.objectdataid
    """,
    payload_column="file_data",
    grouping=_compliance_grouping,
    naming=_compliance_name,
)


# Audit attachments

AUDIT_RECOMMENDATION = CategoryDefinition(
    category=DocumentCategory.AUDIT_RECOMMENDATION,
    root_folder="Audit_Recommendations",
    query="""
        SELECT
            ar.recommendationid AS recommendation_id,
            ar.recommendationno AS recommendation_no,
            ar.recommendationtitle AS recommendation_title,
            a.attachmentid AS attachment_id,
            a.title AS title,
            a.documenturl AS document_url,
            a.filedata AS file_data,
            a.contenttype AS content_type
        FROM auditrecommendation AS ar
        INNER JOIN attachment AS a
            ON ar.recommendationid = a.objectid
        WHERE a.filedata IS NOT NULL
            AND (a.deleted IS NULL OR a.deleted = 0)
        ORDER BY ar.recommendationno
    """,
    payload_column="file_data",
    grouping=lambda row: (
        "Recommendation_"
        f"{row.text('recommendation_no', 'Unknown')}_"
        f"{row.text('recommendation_title', 'Untitled')}",
    ),
    naming=_attachment_name,
)

AUDIT_DETAILS = CategoryDefinition(
    category=DocumentCategory.AUDIT_DETAILS,
    root_folder="Audit_Details_Attachments",
    query="""
        SELECT
            ad.auditdetailid AS audit_detail_id,
            ad.auditno AS audit_no,
            ad.audittitle AS audit_title,
            a.attachmentid AS attachment_id,
            a.title AS title,
            a.documenturl AS document_url,
            a.filedata AS file_data,
            a.contenttype AS content_type
        FROM auditdetail AS ad
        INNER JOIN attachment AS a
            ON ad.auditdetailid = a.objectid
        WHERE a.filedata IS NOT NULL
            AND (a.deleted IS NULL OR a.deleted = 0)
        ORDER BY ad.auditno
    """,
    payload_column="file_data",
    grouping=lambda row: (
        f"{row.text('audit_no', 'Unknown')}_{row.text('audit_title', 'Untitled')}",
    ),
    naming=_attachment_name,
)

AUDIT_FINDING = CategoryDefinition(
    category=DocumentCategory.AUDIT_FINDING,
    root_folder="Audit_Finding_Attachments",
    query="""
        SELECT
            af.auditfindingid AS audit_finding_id,
            af.auditfindingno AS audit_finding_no,
            ad.auditno AS audit_no,
            ad.audittitle AS audit_title,
            a.attachmentid AS attachment_id,
            a.title AS title,
            a.documenturl AS document_url,
            a.filedata AS file_data,
            a.contenttype AS content_type
        FROM auditfinding AS af
        INNER JOIN auditdetail AS ad
            ON af.auditdetailid = ad.auditdetailid
        INNER JOIN attachment AS a
            ON af.auditfindingid = a.objectid
        WHERE a.filedata IS NOT NULL
            AND (a.deleted IS NULL OR a.deleted = 0)
        ORDER BY ad.auditno, af.auditfindingno
    """,
    payload_column="file_data",
    grouping=lambda row: (
        f"{row.text('audit_no', 'Unknown')}_{row.text('audit_title', 'Untitled')}",
        f"Finding_{row.text('audit_finding_no', 'N/A')}",
    ),
    naming=_attachment_name,
)


# Policy

def _policy_name(row: SourceRow, payload: bytes, ordinal: int) -> str:
    return build_file_name(
        [name_from_location(row.text("file_path")), row.text("document_name")],
        f"policy_document_{ordinal}",
        payload,
    )


POLICY = CategoryDefinition(
    category=DocumentCategory.POLICY,
    root_folder="Policy",
    query="""
        SELECT
            p.policyid AS policy_id,
            p.code AS code,
            p.title AS title,
            ed.documentid AS document_id,
            ed.name AS document_name,
            ed.filepath AS file_path,
            ed.file AS file_data
        FROM policy AS p
        INNER JOIN entitydocument AS ed
            ON p.objectid = ed.objectid
        WHERE ed.file IS NOT NULL
            AND (ed.isdeleted IS NULL OR ed.isdeleted = 0)
            AND (p.isdeleted IS NULL OR p.isdeleted = 0)
        ORDER BY p.code, p.title
    """,
    payload_column="file_data",
    grouping=lambda row: (
        f"{row.text('code', 'Unknown')}_{row.text('title', 'Untitled')}",
    ),
    naming=_policy_name,
)


CATEGORY_DEFINITIONS: tuple[CategoryDefinition, ...] = (
    RISK,
    INCIDENT,
    CONTROL,
    ACTION,
    COMPLIANCE,
    AUDIT_RECOMMENDATION,
    AUDIT_DETAILS,
    AUDIT_FINDING,
    POLICY,
)
