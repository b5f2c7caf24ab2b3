"""Shared SQL query builder utilities for the transaction API routes.

Provides the WHERE clause construction used by the list, statistics, chart
and frontend routes, plus the fixed price-range ladder used by the bar chart.
"""

import re
from typing import Any

# Month-of-year of the stored ISO timestamp.  Aware timestamps are stored in
# UTC, so the month is the UTC month.
MONTH_EXPR = "CAST(strftime('%m', date_of_sale) AS INTEGER)"

# Search matches title, description, and the price's stored text form.
# The price clause only hits when the pattern lines up with how SQLite
# renders the REAL value ("150.0", "329.85"), which is kept as-is.
SEARCH_COLUMNS = ("title", "description", "CAST(price AS TEXT)")

# (label, lower bound exclusive, upper bound inclusive); None = unbounded.
PRICE_BUCKETS: list[tuple[str, float | None, float | None]] = [
    ("0-100", None, 100),
    ("101-200", 100, 200),
    ("201-300", 200, 300),
    ("301-400", 300, 400),
    ("401-500", 400, 500),
    ("501-600", 500, 600),
    ("601-700", 600, 700),
    ("701-800", 700, 800),
    ("801-900", 800, 900),
    ("901-above", 900, None),
]


def compile_search(search: str) -> str:
    """Validate a free-text search pattern and return it unchanged.

    Raises:
        ValueError: If the pattern is not a valid regular expression.
    """
    try:
        re.compile(search)
    except re.error as exc:
        raise ValueError(f"Invalid search pattern '{search}': {exc}") from exc
    return search


def build_where_clause(
    month: int | None = None,
    search: str | None = None,
    sold: bool | None = None,
) -> tuple[str, list[Any]]:
    """Build a SQL WHERE clause from filter parameters.

    Args:
        month: Calendar month (1-12) to match on date_of_sale, any year.
        search: Case-insensitive regular expression matched against
            SEARCH_COLUMNS (the connection must have REGEXP registered).
        sold: Restrict to sold / unsold rows.

    Returns:
        Tuple of (where_clause_string, params_list). The where_clause_string
        starts with "WHERE " if any conditions exist, or is "" if none.
    """
    conditions: list[str] = []
    params: list[Any] = []

    if month is not None:
        conditions.append(f"{MONTH_EXPR} = ?")
        params.append(month)

    if search:
        ors = " OR ".join(f"{col} REGEXP ?" for col in SEARCH_COLUMNS)
        conditions.append(f"({ors})")
        params.extend([search] * len(SEARCH_COLUMNS))

    if sold is not None:
        conditions.append("sold = ?")
        params.append(1 if sold else 0)

    where = ("WHERE " + " AND ".join(conditions)) if conditions else ""
    return where, params


def bucket_case_expression() -> str:
    """Return a CASE expression mapping price to its PRICE_BUCKETS label."""
    whens = []
    for label, low, high in PRICE_BUCKETS:
        if high is None:
            whens.append(f"WHEN price > {low} THEN '{label}'")
        else:
            whens.append(f"WHEN price <= {high} THEN '{label}'")
    return "CASE " + " ".join(whens) + " END"
