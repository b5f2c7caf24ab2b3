"""
GET /api/combined-data endpoint.

Runs the list, statistics, bar-chart and pie-chart queries for one month
concurrently, each on its own store connection, and returns them together.
Nothing is returned until all four finish; any sub-query failure, whatever
its type, fails the call with one message.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

from fastapi import APIRouter, Depends, Query, Request

from api.database import TransactionStore, get_store
from api.errors import QueryError
from api.models import CombinedOut, ErrorResponse
from api.routes.charts import fetch_bar_chart, fetch_pie_chart
from api.routes.statistics import fetch_statistics
from api.routes.transactions import DEFAULT_PER_PAGE, fetch_transactions
from utils.months import parse_month

logger = logging.getLogger("transactions_api")

router = APIRouter(prefix="/combined-data", tags=["combined"])

DEFAULT_WORKERS = 4


def _run_on_own_connection(store: TransactionStore, query: Callable[..., Any], *args: Any) -> Any:
    conn = store.connect()
    try:
        return query(conn, *args)
    finally:
        conn.close()


def fetch_combined(store: TransactionStore, month: int,
                   max_workers: int = DEFAULT_WORKERS) -> CombinedOut:
    """Fan the four month queries out to a thread pool and gather the results.

    Raises:
        QueryError: If any of the sub-queries fails.
    """
    jobs: dict[str, tuple] = {
        "transactions": (fetch_transactions, month, None, 1, DEFAULT_PER_PAGE),
        "statistics": (fetch_statistics, month),
        "bar_chart_data": (fetch_bar_chart, month),
        "pie_chart_data": (fetch_pie_chart, month),
    }
    with ThreadPoolExecutor(max_workers=max_workers,
                            thread_name_prefix="combined") as pool:
        futures = {
            name: pool.submit(_run_on_own_connection, store, *job)
            for name, job in jobs.items()
        }
        try:
            results = {name: fut.result() for name, fut in futures.items()}
        except Exception as exc:
            for fut in futures.values():
                fut.cancel()
            logger.exception("combined sub-query failed month=%d", month)
            raise QueryError("Error fetching combined data.") from exc
    return CombinedOut(**results)


@router.get(
    "",
    response_model=CombinedOut,
    summary="Transactions, statistics and chart buckets for a month",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid month"},
        500: {"model": ErrorResponse, "description": "A sub-query failed"},
    },
)
def combined_data(
    request: Request,
    month: str = Query(..., description="Month name, e.g. 'March' (any year)"),
    store: TransactionStore = Depends(get_store),
) -> CombinedOut:
    """Return the first page of transactions plus all aggregates for the month."""
    month_number = parse_month(month)
    config = getattr(request.app.state, "config", None)
    workers = getattr(config, "combined_workers", DEFAULT_WORKERS)
    return fetch_combined(store, month_number, max_workers=workers)
