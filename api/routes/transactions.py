"""
GET /api/transactions endpoint.

Lists transactions with an optional month-of-year filter, an optional
case-insensitive free-text search and offset pagination.  Rows come back in
insertion order (ORDER BY id) so pages are stable.
"""

import sqlite3

from fastapi import APIRouter, Depends, Query

from api.database import get_db
from api.errors import store_errors
from api.models import ErrorResponse, TransactionOut
from utils.months import parse_month
from utils.query import build_where_clause, compile_search

router = APIRouter(prefix="/transactions", tags=["transactions"])

DEFAULT_PER_PAGE = 10

_SELECT_COLUMNS = "id, title, description, price, date_of_sale, category, sold"


def fetch_transactions(
    conn: sqlite3.Connection,
    month: int | None = None,
    search: str | None = None,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
) -> list[TransactionOut]:
    """Return one page of transactions matching the filters."""
    where, params = build_where_clause(month=month, search=search)
    offset = (page - 1) * per_page
    rows = conn.execute(
        f"SELECT {_SELECT_COLUMNS} FROM transactions {where} "
        f"ORDER BY id LIMIT ? OFFSET ?",
        params + [per_page, offset],
    ).fetchall()
    return [TransactionOut.from_row(r) for r in rows]


@router.get(
    "",
    response_model=list[TransactionOut],
    summary="List transactions",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid month or search pattern"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
)
def list_transactions(
    month: str | None = Query(None, description="Month name, e.g. 'March' (any year)"),
    search_text: str | None = Query(
        None, alias="searchText",
        description="Case-insensitive pattern matched against title, description and price",
    ),
    page: int = Query(1, ge=1, description="1-based page number"),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, alias="perPage",
                          description="Rows per page"),
    conn: sqlite3.Connection = Depends(get_db),
) -> list[TransactionOut]:
    """Return a page of transactions, optionally filtered by month and search text."""
    month_number = parse_month(month) if month else None
    search = compile_search(search_text) if search_text else None

    with store_errors("Error fetching transactions."):
        return fetch_transactions(conn, month_number, search, page, per_page)
