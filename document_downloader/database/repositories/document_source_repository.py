import uuid
from collections.abc import Iterator

import psycopg
from psycopg.rows import dict_row

from document_downloader.database.connection import get_connection
from document_downloader.database.models import SourceRow
from document_downloader.processor.exceptions import CategoryQueryError


class DocumentSourceRepository:
    """Forward-only streaming of category queries from the document source."""

    def __init__(self, query_timeout_seconds: int = 300, fetch_batch_size: int = 50) -> None:
        self._timeout_ms = query_timeout_seconds * 1000
        self._fetch_batch_size = fetch_batch_size

    def stream(self, query: str) -> Iterator[SourceRow]:
        """Yield the rows of ``query`` one at a time.

        A pooled connection is held for the lifetime of the iterator and
        released when it is exhausted or closed. Rows come from a server-side
        cursor so large payloads are never buffered in bulk.

        Raises:
            CategoryQueryError: if the query cannot run or the stream breaks.
        """
        try:
            with get_connection() as conn:
                conn.execute(
                    "SELECT set_config('statement_timeout', %s, true)",
                    (str(self._timeout_ms),),
                )
                cursor_name = f"documents_{uuid.uuid4().hex}"
                with conn.cursor(name=cursor_name, row_factory=dict_row) as cur:
                    cur.itersize = self._fetch_batch_size
                    cur.execute(query)
                    for row in cur:
                        yield SourceRow(row)
        except psycopg.Error as exc:
            raise CategoryQueryError(str(exc).strip()) from exc
