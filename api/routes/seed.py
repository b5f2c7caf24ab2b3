"""
GET /api/initialize-database endpoint.

Fetches the seed JSON array and bulk-inserts every element.  The insert is
unconditional: calling the endpoint twice stores every record twice.
"""

import logging
import sqlite3

import requests
from fastapi import APIRouter, Depends, Request
from pydantic import TypeAdapter

from api.database import TransactionStore, get_store
from api.errors import QueryError
from api.models import ErrorResponse, SeedOut, TransactionIn
from utils.config import SeedConfig
from utils.http import RetryStrategy, SessionManager, fetch_json

logger = logging.getLogger("transactions_api")

router = APIRouter(prefix="/initialize-database", tags=["seed"])

_PAYLOAD = TypeAdapter(list[TransactionIn])


def load_seed(store: TransactionStore, seed: SeedConfig | None = None) -> int:
    """Fetch the seed payload and insert it; returns the number of rows inserted.

    Raises:
        QueryError: On any fetch, decode, validation or insert failure.
    """
    seed = seed or SeedConfig()
    try:
        with SessionManager(RetryStrategy(max_retries=seed.max_retries)) as sm:
            payload = fetch_json(seed.url, timeout=seed.timeout, session_manager=sm)
        records = _PAYLOAD.validate_python(payload)
        inserted = store.insert_many([r.to_row() for r in records])
    except (requests.RequestException, ValueError, sqlite3.Error) as exc:
        logger.exception("seed load failed url=%s", seed.url)
        raise QueryError("Error initializing database.") from exc
    logger.info("seed load inserted=%d url=%s", inserted, seed.url)
    return inserted


@router.get(
    "",
    response_model=SeedOut,
    summary="Load the seed transactions",
    responses={500: {"model": ErrorResponse, "description": "Fetch or insert failed"}},
)
def initialize_database(
    request: Request,
    store: TransactionStore = Depends(get_store),
) -> SeedOut:
    """Fetch the seed resource and append all of its records to the store."""
    config = getattr(request.app.state, "config", None)
    inserted = load_seed(store, getattr(config, "seed", None))
    return SeedOut(message="Database initialized successfully.", inserted=inserted)
