"""GET /api/statistics endpoint.

Sale total and sold / not-sold counts for one month of the year.
"""

import sqlite3

from fastapi import APIRouter, Depends, Query

from api.database import get_db
from api.errors import store_errors
from api.models import ErrorResponse, StatisticsOut
from utils.months import parse_month
from utils.query import build_where_clause

router = APIRouter(prefix="/statistics", tags=["statistics"])


def fetch_statistics(conn: sqlite3.Connection, month: int) -> StatisticsOut:
    """Aggregate the month's rows in a single pass."""
    where, params = build_where_clause(month=month)
    row = conn.execute(
        f"""
        SELECT
            COALESCE(SUM(price), 0) AS total_sale_amount,
            COALESCE(SUM(CASE WHEN sold = 1 THEN 1 ELSE 0 END), 0) AS total_sold_items,
            COALESCE(SUM(CASE WHEN sold = 0 THEN 1 ELSE 0 END), 0) AS total_not_sold_items
        FROM transactions
        {where}
        """,
        params,
    ).fetchone()
    return StatisticsOut(**dict(row))


@router.get(
    "",
    response_model=StatisticsOut,
    summary="Monthly sale statistics",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid month"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
)
def statistics(
    month: str = Query(..., description="Month name, e.g. 'March' (any year)"),
    conn: sqlite3.Connection = Depends(get_db),
) -> StatisticsOut:
    """Return total sale amount, sold count and not-sold count for the month."""
    month_number = parse_month(month)
    with store_errors("Error fetching statistics."):
        return fetch_statistics(conn, month_number)
