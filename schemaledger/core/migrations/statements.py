"""
Statement splitting for migration scripts.

Scripts are split on the bare ``;`` character. This is a textual split, not a
SQL parser: a ``;`` inside a string literal, a comment or a procedural block
(e.g. a PL/pgSQL function body) will split the statement. Migration authors
must keep semicolons out of such constructs.
"""
from typing import List


def split_statements(sql: str) -> List[str]:
    """
    Split raw SQL text into individual statements.

    Args:
        sql: Raw script text

    Returns:
        Trimmed, non-empty statements in source order.
    """
    return [stmt.strip() for stmt in sql.split(";") if stmt.strip()]


def escape_bind_markers(statement: str) -> str:
    """
    Escape colons so the statement reaches the driver unchanged.

    The database layer compiles query strings with SQLAlchemy ``text()``,
    which reads ``:word`` as a bind parameter. Escaped colons are restored
    at compile time, so literals like ``'{"enabled":true}'`` and PostgreSQL
    ``::`` casts are executed as written.
    """
    return statement.replace(":", "\\:")
