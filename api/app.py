"""
FastAPI application factory.

Usage:
    python -m api.app                    # Dev server on port 5000
    APP_DB_PATH=/data/tx.sqlite python -m api.app

OpenAPI docs available at http://localhost:5000/docs after starting.

Lifecycle: the TransactionStore is opened in the lifespan handler (schema
ensured) and released on shutdown.  Routes receive it via Depends().

Logging: plain text by default, newline-delimited JSON when
APP_LOG_FORMAT=json.  Every request is logged with a short request id that
is also returned in the X-Request-ID header.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.database import TransactionStore
from api.errors import QueryError
from api.routes import charts, combined, seed, statistics, transactions
from api.routes import frontend as frontend_routes
from utils.config import AppConfig, DatabaseConfig

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "client_ip",
                    "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def configure_logging(cfg: AppConfig) -> None:
    """Install a single stream handler on the root logger."""
    handler = logging.StreamHandler()
    if cfg.log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    logging.basicConfig(handlers=[handler], level=cfg.log_level, force=True)


configure_logging(_cfg)
_logger = logging.getLogger("transactions_api")


def _error(status_code: int, message: str, detail=None) -> JSONResponse:
    content = {"message": message, "status_code": status_code}
    if detail is not None:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup, release it on shutdown."""
    store: TransactionStore = app.state.store
    store.open()
    try:
        yield
    finally:
        store.close()


def create_app(db_path: Path | None = None, config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: Override the database path (useful for testing).
        config: Override the environment-derived configuration.

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config or _cfg
    db_config = DatabaseConfig()
    db_config.db_path = Path(db_path) if db_path is not None else cfg.db_path

    app = FastAPI(
        title="Transactions API",
        summary="Product transaction listing, search and monthly statistics.",
        description=(
            "## Transactions API\n\n"
            "Read-only access to product transactions loaded from a seed "
            "resource.\n\n"
            "### Key concepts\n"
            "- **month** is a month name (`March`, `mar`). It matches sales "
            "in that calendar month of *any* year. Unknown names return 400.\n"
            "- **searchText** is a case-insensitive regular expression matched "
            "against title, description and the price's text form.\n"
            "- **Price buckets** run 0-100, 101-200, ... 801-900, 901-above.\n"
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "transactions", "description": "Paginated, searchable transaction list."},
            {"name": "statistics", "description": "Monthly sale totals and sold counts."},
            {"name": "charts", "description": "Price-range and category buckets."},
            {"name": "combined", "description": "All month views in one response."},
            {"name": "seed", "description": "One-shot bulk load from the seed resource."},
            {"name": "meta", "description": "Health check."},
        ],
    )
    app.state.config = cfg
    app.state.store = TransactionStore(db_config.db_path, db_config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request with its duration and a request id."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "client_ip": client_ip,
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f ip=%s rid=%s",
                request.method, path, response.status_code, duration_ms,
                client_ip, request_id,
            )
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(QueryError)
    async def query_error_handler(request: Request, exc: QueryError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        detail = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
            for e in exc.errors()
        ]
        return _error(422, "Invalid request parameters.", detail)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of HTML traceback."""
        _logger.error("unhandled error path=%s", request.url.path,
                      exc_info=(type(exc), exc, exc.__traceback__))
        return _error(500, "Internal server error.")

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """Return 200 OK if the API is running and can reach the store."""
        store: TransactionStore = app.state.store
        try:
            count = store.count()
        except Exception as exc:
            return JSONResponse(
                status_code=503,
                content={"status": "degraded", "error": str(exc)},
            )
        return {"status": "ok", "database": str(store.db_path), "transactions": count}

    # ── Register routers ──────────────────────────────────────────────────────

    prefix = "/api"
    app.include_router(seed.router,         prefix=prefix)
    app.include_router(transactions.router, prefix=prefix)
    app.include_router(statistics.router,   prefix=prefix)
    app.include_router(charts.router,       prefix=prefix)
    app.include_router(combined.router,     prefix=prefix)

    # ── Static files + Jinja2 templates ───────────────────────────────────────
    _here = Path(__file__).parent.parent  # project root

    static_dir = _here / "static"
    templates_dir = _here / "templates"

    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    if templates_dir.exists():
        frontend_routes.set_templates(Jinja2Templates(directory=str(templates_dir)))
        app.include_router(frontend_routes.router)

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
