"""
GET /api/bar-chart and GET /api/pie-chart endpoints.

Both group one month's transactions:

* bar chart: fixed price ladder 0-100 ... 801-900, 901-above (every bucket
  is returned, empty ones with count 0, in ladder order);
* pie chart: one slice per distinct category present, ordered by category.
"""

import sqlite3

from fastapi import APIRouter, Depends, Query

from api.database import get_db
from api.errors import store_errors
from api.models import CategoryCount, ErrorResponse, PriceRangeCount
from utils.months import parse_month
from utils.query import PRICE_BUCKETS, bucket_case_expression, build_where_clause

router = APIRouter(tags=["charts"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid month"},
    500: {"model": ErrorResponse, "description": "Store failure"},
}


def fetch_bar_chart(conn: sqlite3.Connection, month: int) -> list[PriceRangeCount]:
    """Count the month's rows per price bucket."""
    where, params = build_where_clause(month=month)
    rows = conn.execute(
        f"SELECT {bucket_case_expression()} AS bucket, COUNT(*) AS count "
        f"FROM transactions {where} GROUP BY bucket",
        params,
    ).fetchall()
    counts = {r["bucket"]: r["count"] for r in rows}
    return [
        PriceRangeCount(range=label, count=counts.get(label, 0))
        for label, _low, _high in PRICE_BUCKETS
    ]


def fetch_pie_chart(conn: sqlite3.Connection, month: int) -> list[CategoryCount]:
    """Count the month's rows per category."""
    where, params = build_where_clause(month=month)
    rows = conn.execute(
        f"SELECT category, COUNT(*) AS count FROM transactions {where} "
        f"GROUP BY category ORDER BY category",
        params,
    ).fetchall()
    return [
        CategoryCount(group_id=r["category"], category=r["category"], count=r["count"])
        for r in rows
    ]


@router.get(
    "/bar-chart",
    response_model=list[PriceRangeCount],
    summary="Price-range buckets for a month",
    responses=_ERROR_RESPONSES,
)
def bar_chart(
    month: str = Query(..., description="Month name, e.g. 'March' (any year)"),
    conn: sqlite3.Connection = Depends(get_db),
) -> list[PriceRangeCount]:
    month_number = parse_month(month)
    with store_errors("Error fetching bar chart data."):
        return fetch_bar_chart(conn, month_number)


@router.get(
    "/pie-chart",
    response_model=list[CategoryCount],
    summary="Category buckets for a month",
    responses=_ERROR_RESPONSES,
)
def pie_chart(
    month: str = Query(..., description="Month name, e.g. 'March' (any year)"),
    conn: sqlite3.Connection = Depends(get_db),
) -> list[CategoryCount]:
    month_number = parse_month(month)
    with store_errors("Error fetching pie chart data."):
        return fetch_pie_chart(conn, month_number)
