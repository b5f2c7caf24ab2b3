"""
Pydantic request/response models for the transaction API.

Wire names follow the published JSON contract (camelCase, ``_id`` on pie
chart slices); Python attribute names are snake_case and mapped with
aliases.  ``populate_by_name`` lets routes build models from either form.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Transaction models ────────────────────────────────────────────────────────

class TransactionIn(BaseModel):
    """A transaction as it arrives in the seed payload.

    Keys outside the stored shape (``id``, ``image``, ...) are ignored.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = None
    description: str | None = None
    price: float | None = None
    date_of_sale: datetime | None = Field(None, alias="dateOfSale")
    category: str | None = None
    sold: bool = False

    @field_validator("date_of_sale", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        return value

    def to_row(self) -> tuple:
        """Return the INSERT parameter tuple for the transactions table."""
        sale = self.date_of_sale
        if sale is not None and sale.tzinfo is not None:
            sale = sale.astimezone(timezone.utc)
        return (
            self.title,
            self.description,
            self.price,
            sale.isoformat() if sale is not None else None,
            self.category,
            1 if self.sold else 0,
        )


class TransactionOut(BaseModel):
    """A stored transaction."""
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Store-assigned row ID", examples=[1])
    title: str | None = Field(None, examples=["Fjallraven - Foldsack No. 1 Backpack"])
    description: str | None = Field(None)
    price: float | None = Field(None, examples=[329.85])
    date_of_sale: datetime | None = Field(None, alias="dateOfSale", examples=["2021-11-27T14:59:54+00:00"])
    category: str | None = Field(None, examples=["men's clothing"])
    sold: bool = Field(False)

    @classmethod
    def from_row(cls, row: Any) -> "TransactionOut":
        d = dict(row)
        return cls(
            id=d["id"],
            title=d["title"],
            description=d["description"],
            price=d["price"],
            date_of_sale=d["date_of_sale"],
            category=d["category"],
            sold=bool(d["sold"]),
        )


# ── Aggregate models ──────────────────────────────────────────────────────────

class StatisticsOut(BaseModel):
    """Response body for GET /api/statistics."""
    model_config = ConfigDict(populate_by_name=True)

    total_sale_amount: float = Field(0, alias="totalSaleAmount", description="Sum of price over the month's rows")
    total_sold_items: int = Field(0, alias="totalSoldItems")
    total_not_sold_items: int = Field(0, alias="totalNotSoldItems")


class PriceRangeCount(BaseModel):
    """One bar-chart bucket."""
    range: str = Field(..., examples=["101-200"])
    count: int = Field(..., examples=[4])


class CategoryCount(BaseModel):
    """One pie-chart slice.  ``_id`` carries the category, as ``category`` does."""
    model_config = ConfigDict(populate_by_name=True)

    group_id: str | None = Field(None, alias="_id")
    category: str | None = Field(None, examples=["electronics"])
    count: int = Field(..., examples=[3])


class CombinedOut(BaseModel):
    """Response body for GET /api/combined-data."""
    model_config = ConfigDict(populate_by_name=True)

    transactions: list[TransactionOut]
    statistics: StatisticsOut
    bar_chart_data: list[PriceRangeCount] = Field(..., alias="barChartData")
    pie_chart_data: list[CategoryCount] = Field(..., alias="pieChartData")


# ── Seed / message models ────────────────────────────────────────────────────

class MessageOut(BaseModel):
    """Plain status message."""
    message: str = Field(..., examples=["Database initialized successfully."])


class SeedOut(MessageOut):
    """Response body for GET /api/initialize-database."""
    inserted: int = Field(..., description="Rows inserted by this call", examples=[60])


# ── Error model ───────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response body."""
    message: str = Field(..., description="Human-readable error message", examples=["Error fetching statistics."])
    detail: Any | None = Field(None, description="Extended error detail")
    status_code: int = Field(..., ge=400, le=599, examples=[500])
