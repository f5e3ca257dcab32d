"""
One-shot SQL migration runner.

Loads a static SQL resource, executes it against the database, then runs
read-only verification queries and prints their results as console tables.

There is no applied-migrations ledger and no locking: re-running a migration
is safe only when its statements are idempotent. The one tolerated failure is
"column already exists", which is reported and skipped.
"""

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.sql.elements import TextClause

from ..database import connect
from ..errors import MigrationError
from ..utils.db_errors import classify_db_error

logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).parent / "sql"

_DOLLAR_TAG = re.compile(r"\$[A-Za-z_][A-Za-z_0-9]*\$|\$\$")


@dataclass
class VerificationQuery:
    """A read-only query run after a migration, and how to print its rows."""

    title: str
    statement: str | TextClause
    params: dict[str, Any] = field(default_factory=dict)
    # Empty result means the migration did not take effect
    require_rows: bool = False
    # One line per row; falls back to a table when not given
    formatter: Optional[Callable[[dict[str, Any]], str]] = None


@dataclass
class MigrationResult:
    name: str
    mode: str
    statements_executed: int = 0
    skipped: list[str] = field(default_factory=list)
    verification: dict[str, list[dict[str, Any]]] = field(default_factory=dict)


def split_statements(sql: str) -> list[str]:
    """
    Split SQL text into individual statements.

    Splits on ``;`` outside of quoted strings and dollar-quoted bodies, drops
    ``--`` comments, and discards empty chunks. Statements are returned without
    the trailing semicolon.
    """
    statements: list[str] = []
    buf: list[str] = []
    dollar_tag: Optional[str] = None
    in_quote = False
    i, n = 0, len(sql)

    def flush() -> None:
        statement = "".join(buf).strip()
        if statement:
            statements.append(statement)
        buf.clear()

    while i < n:
        ch = sql[i]
        if dollar_tag is not None:
            if sql.startswith(dollar_tag, i):
                buf.append(dollar_tag)
                i += len(dollar_tag)
                dollar_tag = None
                continue
        elif in_quote:
            if ch == "'":
                in_quote = False
        elif ch == "'":
            in_quote = True
        elif sql.startswith("--", i):
            end = sql.find("\n", i)
            i = n if end == -1 else end
            continue
        elif ch == "$":
            match = _DOLLAR_TAG.match(sql, i)
            if match:
                dollar_tag = match.group(0)
                buf.append(dollar_tag)
                i = match.end()
                continue
        elif ch == ";":
            flush()
            i += 1
            continue
        buf.append(ch)
        i += 1

    flush()
    return statements


def render_table(rows: Sequence[dict[str, Any]], columns: Optional[Sequence[str]] = None) -> str:
    """Render rows as an aligned text table."""
    if not rows:
        return "  (no rows)"
    columns = list(columns or rows[0].keys())
    cells = [[("" if row.get(col) is None else str(row.get(col))) for col in columns] for row in rows]
    widths = [max(len(col), *(len(r[idx]) for r in cells)) for idx, col in enumerate(columns)]

    def line(values: Sequence[str]) -> str:
        return "  " + " | ".join(value.ljust(width) for value, width in zip(values, widths))

    separator = "  " + "-+-".join("-" * width for width in widths)
    return "\n".join([line(columns), separator, *(line(r) for r in cells)])


def _error_from(exc: Exception, prefix: str) -> MigrationError:
    classified = classify_db_error(exc)
    logger.error(
        f"{prefix}: {classified.message}",
        extra={"code": classified.code, "detail": classified.detail, "hint": classified.hint},
    )
    return MigrationError(
        f"{prefix}: {classified.message}",
        code=classified.code,
        detail=classified.detail,
        hint=classified.hint,
    )


def add_column(
    conn: Connection,
    table: str,
    column: str,
    definition: str,
    out: Callable[[str], None] = print,
) -> bool:
    """
    Add a column to a table, treating "column already exists" as a skip.

    Returns True if the column was added, False if it already existed.
    Any other database error raises MigrationError.
    """
    try:
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {definition}"))
        conn.commit()
    except DBAPIError as e:
        conn.rollback()
        if classify_db_error(e).is_duplicate_column:
            out(f"[INFO]  Column '{column}' already exists in '{table}', skipping...")
            return False
        raise _error_from(e, f"Failed to add column '{column}' to '{table}'") from e

    out(f"[OK] Added column '{column}' to '{table}'")
    return True


class MigrationRunner:
    """
    Applies SQL resources and verifies them.

    Args:
        engine: Engine to run against; defaults to the shared engine
        sql_dir: Directory relative migration names are resolved against
        out: Console writer for the human-readable report
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        sql_dir: Path = SQL_DIR,
        out: Callable[[str], None] = print,
    ):
        self.engine = engine
        self.sql_dir = Path(sql_dir)
        self.out = out

    def resolve(self, migration: str | Path) -> Path:
        path = Path(migration)
        if not path.is_absolute() and not path.exists():
            path = self.sql_dir / path
        return path

    def load_sql(self, migration: str | Path) -> str:
        path = self.resolve(migration)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise MigrationError(f"Could not read migration file {path}: {e}") from e

    def run(
        self,
        migration: str | Path,
        verifications: Iterable[VerificationQuery] = (),
        mode: str = "batch",
    ) -> MigrationResult:
        """
        Execute one migration and its verification queries.

        Args:
            migration: File name under ``sql_dir`` or a path
            verifications: Queries to run after execution
            mode: "batch" sends the whole text in one call; "statements" splits
                  it and commits statement by statement

        Raises:
            MigrationError: On any execution or verification failure other than
                            a duplicate column
        """
        if mode not in ("batch", "statements"):
            raise ValueError(f"Unknown migration mode: {mode}")

        path = self.resolve(migration)
        sql = self.load_sql(path)
        result = MigrationResult(name=path.name, mode=mode)

        self.out(f"[LOADING] Running migration: {path.name}")

        with connect(self.engine) as conn:
            if mode == "batch":
                self._execute_batch(conn, sql, result)
            else:
                for statement in split_statements(sql):
                    self._execute_statement(conn, statement, result)

            if result.skipped:
                self.out(f"[INFO]  Migration {path.name} skipped {len(result.skipped)} statement(s)")
            else:
                self.out(f"[OK] Migration completed: {path.name}")

            verifications = list(verifications)
            if verifications:
                self.out("\n[SEARCH] Verifying migration results...")
                result.verification = self.verify(conn, verifications)

        return result

    def run_all(self, directory: Optional[str | Path] = None) -> list[MigrationResult]:
        """Run every ``*.sql`` file in ``directory`` in filename order. The first failure aborts."""
        directory = Path(directory) if directory is not None else self.sql_dir
        files = sorted(p for p in directory.iterdir() if p.suffix == ".sql")

        self.out(f"Found {len(files)} migration(s) to run:")
        for path in files:
            self.out(f"  - {path.name}")

        return [self.run(path, mode="statements") for path in files]

    def verify(
        self, conn: Connection, verifications: Iterable[VerificationQuery]
    ) -> dict[str, list[dict[str, Any]]]:
        report: dict[str, list[dict[str, Any]]] = {}
        for query in verifications:
            statement = text(query.statement) if isinstance(query.statement, str) else query.statement
            try:
                rows = [dict(row) for row in conn.execute(statement, query.params).mappings()]
            except DBAPIError as e:
                conn.rollback()
                raise _error_from(e, f"Verification '{query.title}' failed") from e

            if query.require_rows and not rows:
                raise MigrationError(
                    f"Verification '{query.title}' returned no rows - migration did not take effect"
                )

            self.out(f"\n[DATA] {query.title}:")
            if query.formatter is not None:
                for row in rows:
                    self.out(query.formatter(row))
            else:
                self.out(render_table(rows))
            report[query.title] = rows
        return report

    def _execute_batch(self, conn: Connection, sql: str, result: MigrationResult) -> None:
        try:
            conn.exec_driver_sql(sql)
            conn.commit()
        except DBAPIError as e:
            conn.rollback()
            if not classify_db_error(e).is_duplicate_column:
                raise _error_from(e, f"Migration failed: {result.name}") from e

            statements = split_statements(sql)
            if len(statements) <= 1:
                self.out("[INFO]  Column already exists, skipping...")
                result.skipped.append(result.name)
                return

            # The rollback undid the whole batch; replay it so only the duplicate is skipped
            logger.info(f"Batch {result.name} hit an existing column, re-running statement by statement")
            self.out("[INFO]  Column already exists, re-running statement by statement...")
            for statement in statements:
                self._execute_statement(conn, statement, result)
            return
        result.statements_executed += 1

    def _execute_statement(self, conn: Connection, statement: str, result: MigrationResult) -> None:
        try:
            conn.exec_driver_sql(statement)
            conn.commit()
        except DBAPIError as e:
            conn.rollback()
            if classify_db_error(e).is_duplicate_column:
                self.out(f"[INFO]  Column already exists, skipping: {_summarize(statement)}")
                result.skipped.append(statement)
                return
            raise _error_from(e, f"Migration failed: {result.name}") from e
        result.statements_executed += 1


def _summarize(statement: str, limit: int = 80) -> str:
    flat = " ".join(statement.split())
    return flat if len(flat) <= limit else flat[: limit - 3] + "..."


# ============================================================================
# STOCK VERIFICATION QUERIES (PostgreSQL catalog)
# ============================================================================


def columns_of(table: str, names: Optional[Sequence[str]] = None) -> VerificationQuery:
    """Columns of ``table``, optionally restricted to ``names``."""
    sql = (
        "SELECT column_name, data_type, is_nullable, column_default "
        "FROM information_schema.columns WHERE table_name = :table"
    )
    params: dict[str, Any] = {"table": table}
    if names:
        sql += " AND column_name IN :names ORDER BY column_name"
        statement = text(sql).bindparams(bindparam("names", expanding=True))
        params["names"] = list(names)
    else:
        statement = text(sql + " ORDER BY ordinal_position")
    return VerificationQuery(
        title=f"{table} columns",
        statement=statement,
        params=params,
        require_rows=True,
        formatter=lambda row: f"  - {row['column_name']}: {row['data_type']} (nullable: {row['is_nullable']})",
    )


def indexes_of(table: str) -> VerificationQuery:
    return VerificationQuery(
        title=f"{table} indexes",
        statement="SELECT indexname, indexdef FROM pg_indexes WHERE tablename = :table ORDER BY indexname",
        params={"table": table},
        formatter=lambda row: f"  - {row['indexname']}",
    )


def routines_named(*names: str) -> VerificationQuery:
    statement = text("SELECT proname FROM pg_proc WHERE proname IN :names ORDER BY proname").bindparams(
        bindparam("names", expanding=True)
    )
    return VerificationQuery(
        title="Functions created",
        statement=statement,
        params={"names": list(names)},
        require_rows=True,
        formatter=lambda row: f"  - {row['proname']}()",
    )


def count_by(table: str, column: str) -> VerificationQuery:
    return VerificationQuery(
        title=f"{table} by {column}",
        statement=f"SELECT {column}, COUNT(*) AS count FROM {table} GROUP BY {column} ORDER BY {column}",
        formatter=lambda row: f"  - {row[column]}: {row['count']}",
    )


def table_exists(table: str) -> VerificationQuery:
    return VerificationQuery(
        title=f"{table} table",
        statement="SELECT table_name FROM information_schema.tables WHERE table_name = :table",
        params={"table": table},
        require_rows=True,
        formatter=lambda row: f"  - {row['table_name']} exists",
    )
