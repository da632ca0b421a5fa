import io
from collections.abc import Callable, Iterator, Mapping
from typing import Any

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from document_downloader.database.models import SourceRow
from document_downloader.processor.exceptions import CategoryQueryError


def _render_pdf(text: str) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, text)
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _render_pdf("Hello PDF World")


@pytest.fixture()
def make_pdf() -> Callable[[str], bytes]:
    """Factory for PDFs whose bytes differ by their drawn text."""
    return _render_pdf


class FakeSource:
    """In-memory document source keyed by query text."""

    def __init__(
        self,
        rows: Mapping[str, list[dict[str, Any]]] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.rows = dict(rows or {})
        self.failing = set(failing or ())
        self.queries: list[str] = []

    def stream(self, query: str) -> Iterator[SourceRow]:
        self.queries.append(query)
        if query in self.failing:
            raise CategoryQueryError('relation "missing_table" does not exist')
        for values in self.rows.get(query, []):
            yield SourceRow(values)


@pytest.fixture()
def fake_source() -> type[FakeSource]:
    return FakeSource
