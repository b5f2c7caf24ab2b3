"""
Frontend HTML routes.

Serves the Jinja2 dashboard page and its HTMX partial.

Routes:
    GET /                       → index.html (filters + dashboard)
    GET /partials/dashboard     → partials/dashboard.html (HTMX swap target)

The view state (month, search text, page) lives in the query string.  Each
state change is one request, and the transaction table, statistics and both
bucket tables are rendered from a single query pass on one connection, so a
slow response for an older state can never be mixed into a newer one.  The
form's ``hx-sync="this:replace"`` drops the in-flight request when a newer
one starts.
"""

import sqlite3
from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from api.database import get_db
from api.errors import store_errors
from api.routes.charts import fetch_bar_chart, fetch_pie_chart
from api.routes.statistics import fetch_statistics
from api.routes.transactions import fetch_transactions
from utils.months import MONTH_NAMES, parse_month
from utils.query import compile_search

router = APIRouter(tags=["frontend"])

DEFAULT_MONTH = "March"
PAGE_SIZE = 10

# Templates instance is set by create_app() after mounting.
_templates: Jinja2Templates | None = None


def set_templates(t: Jinja2Templates) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised; call set_templates() first")
    return _templates


@dataclass(frozen=True)
class ViewState:
    """Client-held view state; page size is fixed."""

    month: str = DEFAULT_MONTH
    search_text: str = ""
    page: int = 1
    per_page: int = PAGE_SIZE

    @classmethod
    def from_request(cls, request: Request) -> "ViewState":
        params = request.query_params
        try:
            page = max(1, int(params.get("page", 1)))
        except ValueError:
            page = 1
        return cls(
            month=params.get("month") or DEFAULT_MONTH,
            search_text=params.get("searchText", ""),
            page=page,
        )

    def next_page(self) -> "ViewState":
        # No upper bound: past the last page the table is simply empty.
        return replace(self, page=self.page + 1)

    def previous_page(self) -> "ViewState":
        if self.page <= 1:
            return self
        return replace(self, page=self.page - 1)

    def query_string(self) -> str:
        params = {"month": self.month, "page": self.page}
        if self.search_text:
            params["searchText"] = self.search_text
        return urlencode(params)


def _dashboard_context(state: ViewState, conn: sqlite3.Connection) -> tuple[dict[str, Any], int]:
    """Run every query the page needs for one state; returns (context, status)."""
    context: dict[str, Any] = {
        "state": state,
        "months": MONTH_NAMES,
        "prev_query": state.previous_page().query_string(),
        "next_query": state.next_page().query_string(),
        "error": None,
        "transactions": [],
        "statistics": None,
        "bar_chart": [],
        "pie_chart": [],
    }
    try:
        month = parse_month(state.month)
        search = compile_search(state.search_text) if state.search_text else None
    except ValueError as exc:
        context["error"] = str(exc)
        return context, 400

    with store_errors("Error fetching dashboard data."):
        context["transactions"] = fetch_transactions(
            conn, month, search, state.page, state.per_page,
        )
        context["statistics"] = fetch_statistics(conn, month)
        context["bar_chart"] = fetch_bar_chart(conn, month)
        context["pie_chart"] = fetch_pie_chart(conn, month)
    return context, 200


# ── Routes ────────────────────────────────────────────────────────────────────

@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(request: Request, conn: sqlite3.Connection = Depends(get_db)) -> HTMLResponse:
    """Dashboard page."""
    state = ViewState.from_request(request)
    context, status = _dashboard_context(state, conn)
    return _tmpl().TemplateResponse(
        request, "index.html", context, status_code=status,
    )


@router.get("/partials/dashboard", response_class=HTMLResponse, include_in_schema=False)
def dashboard_partial(
    request: Request,
    conn: sqlite3.Connection = Depends(get_db),
) -> HTMLResponse:
    """HTMX partial: table, statistics and bucket tables for the current state.

    The response also refreshes the form's hidden page input out of band, so
    a later month or search change keeps the current page, and pushes the
    full-page URL for this state into the browser history.
    """
    state = ViewState.from_request(request)
    context, status = _dashboard_context(state, conn)
    context["page_input_oob"] = True
    return _tmpl().TemplateResponse(
        request, "partials/dashboard.html", context, status_code=status,
        headers={"HX-Push-Url": f"/?{state.query_string()}"},
    )
