"""The database artifact: the only coupling between build and query time.

The build writes a single DuckDB file. Query sessions open that file
read-only through an explicit ``ScheduleDatabase`` handle, which is passed to
the query functions rather than kept as module state.
"""

import os
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, TypeVar

import duckdb

from dropin.config import DB_PATH
from dropin.exceptions import ArtifactLoadError, ArtifactWriteError, QueryError
from dropin.logging_config import create_logger
from dropin.schema import TABLES, VIEW_NAME

logger = create_logger(__name__)

T = TypeVar("T")

REQUIRED_RELATIONS = (*TABLES, VIEW_NAME)


class ArtifactStats(NamedTuple):
    path: str
    records: int
    size_bytes: int

    @property
    def size_kb(self) -> float:
        return self.size_bytes / 1024


def _remove_if_exists(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)


def write_artifact(
    populate: Callable[[duckdb.DuckDBPyConnection], T], path: str = DB_PATH
) -> T:
    """Build a fresh database file at ``path``.

    The database is populated in a temporary file beside the target and only
    moved into place once ``populate`` has returned, so a failed build never
    leaves a partial artifact and a prior artifact is replaced atomically.

    :param populate: Callback that creates and fills the schema
    :param path: Artifact location; its directory is created if absent
    :return: Whatever ``populate`` returns
    :raises ArtifactWriteError: On filesystem failures
    """
    out_dir = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(out_dir, exist_ok=True)
    except OSError as e:
        raise ArtifactWriteError(f"Unable to create output directory {out_dir}: {e}") from e

    tmp_path = f"{path}.tmp"
    try:
        _remove_if_exists(tmp_path)
        _remove_if_exists(f"{tmp_path}.wal")
        con = duckdb.connect(tmp_path)
    except (OSError, duckdb.Error) as e:
        raise ArtifactWriteError(f"Unable to create database file {tmp_path}: {e}") from e

    try:
        result = populate(con)
        con.execute("CHECKPOINT")
    except Exception:
        con.close()
        _remove_if_exists(tmp_path)
        _remove_if_exists(f"{tmp_path}.wal")
        raise
    con.close()

    try:
        os.replace(tmp_path, path)
        _remove_if_exists(f"{path}.wal")
    except OSError as e:
        raise ArtifactWriteError(f"Unable to write artifact to {path}: {e}") from e

    logger.info(f"💿 Exported database to {path}")
    return result


class ScheduleDatabase:
    """Read-only session handle over a database artifact.

    Use ``ScheduleDatabase.open(path)``; the handle is a context manager and
    closes its connection on exit.
    """

    def __init__(self, con: duckdb.DuckDBPyConnection, path: str) -> None:
        self.con = con
        self.path = path

    @classmethod
    def open(cls, path: str = DB_PATH) -> "ScheduleDatabase":
        """Open and validate an artifact.

        :raises ArtifactLoadError: If the file is missing, unreadable, or
            lacks any of the schedule tables or view
        """
        if not os.path.isfile(path):
            raise ArtifactLoadError(f"Database artifact not found: {path}")

        try:
            con = duckdb.connect(path, read_only=True)
        except duckdb.Error as e:
            raise ArtifactLoadError(f"Failed to open database {path}: {e}") from e

        try:
            found = {
                row[0]
                for row in con.execute(
                    "SELECT table_name FROM information_schema.tables"
                ).fetchall()
            }
        except duckdb.Error as e:
            con.close()
            raise ArtifactLoadError(f"Failed to read database {path}: {e}") from e

        missing = [name for name in REQUIRED_RELATIONS if name not in found]
        if missing:
            con.close()
            raise ArtifactLoadError(
                f"Database {path} is missing {', '.join(missing)}"
            )

        logger.info(f"✅ Database loaded: {path}")
        return cls(con, path)

    def fetch_all(
        self, sql: str, params: Optional[Sequence[Any]] = None
    ) -> List[Dict[str, Any]]:
        """Run a query and materialize every row as a column-keyed dict."""
        if self.con is None:
            raise QueryError("Database handle is closed")
        cursor = self.con.execute(sql, list(params or []))
        columns = [d[0] for d in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def fetch_column(
        self, sql: str, params: Optional[Sequence[Any]] = None
    ) -> List[Any]:
        """Run a query and return its first column as a list."""
        if self.con is None:
            raise QueryError("Database handle is closed")
        return [row[0] for row in self.con.execute(sql, list(params or [])).fetchall()]

    def close(self) -> None:
        if self.con is not None:
            self.con.close()
            self.con = None

    def __enter__(self) -> "ScheduleDatabase":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def artifact_stats(path: str = DB_PATH) -> ArtifactStats:
    """Count schedule rows in a finished artifact and report its size."""
    with ScheduleDatabase.open(path) as db:
        records = db.fetch_column(f"SELECT COUNT(*) FROM {VIEW_NAME}")[0]
    return ArtifactStats(path=path, records=records, size_bytes=os.path.getsize(path))
