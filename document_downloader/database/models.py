from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from psycopg.conninfo import make_conninfo


@dataclass(frozen=True)
class ConnectionSettings:
    """Connection parameters and output root for one download run."""

    server: str
    database: str
    user: str
    password: str
    output_folder: str
    port: int = 5432
    connect_timeout_seconds: int = 15

    @property
    def is_valid(self) -> bool:
        return all(
            value.strip()
            for value in (
                self.server,
                self.database,
                self.user,
                self.password,
                self.output_folder,
            )
        )

    @property
    def conninfo(self) -> str:
        return make_conninfo(
            host=self.server,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password,
            connect_timeout=self.connect_timeout_seconds,
        )


class SourceRow:
    """Read-only, name-based accessor over one result row.

    Missing columns and SQL NULLs both read as ``None`` so category rules
    can treat them alike.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values = {key.lower(): value for key, value in values.items()}

    def get(self, name: str) -> Any:
        return self._values.get(name.lower())

    def text(self, name: str, default: str | None = None) -> str | None:
        """Return the column as a string, or ``default`` when NULL."""
        value = self.get(name)
        if value is None:
            return default
        return str(value)

    def integer(self, name: str) -> int | None:
        value = self.get(name)
        if value is None:
            return None
        return int(value)

    def blob(self, name: str) -> bytes | None:
        """Return a byte-array column as ``bytes``.

        psycopg hands ``bytea`` back as ``memoryview`` on some code paths.
        """
        value = self.get(name)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        return None

    def __repr__(self) -> str:
        return f"SourceRow({sorted(self._values)})"
