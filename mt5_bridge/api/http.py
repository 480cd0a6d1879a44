"""
FastAPI REST endpoints.

Thin projections of the QuerySurface. Route functions are synchronous, so
FastAPI runs them in its worker thread pool concurrently with ingestion on
the event loop.
"""

from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..errors import MissingDataError, NotFoundError
from ..query import REQUIRED_FIELDS_MESSAGE, QuerySurface


class OhlcvRequest(BaseModel):
    """Body of POST /api/request-ohlcv."""
    symbol: Optional[str] = None
    timeframe: Optional[str] = None
    bars: Optional[int] = None


def _validation_message(exc: RequestValidationError) -> str:
    """Flatten FastAPI validation errors into one client-facing message."""
    errors = exc.errors()
    if not errors or any(err.get("type") in ("missing", "json_invalid") for err in errors):
        return REQUIRED_FIELDS_MESSAGE

    details = []
    for err in errors:
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "Invalid request: " + "; ".join(details)


def _parse_limit(raw: Optional[str]) -> Optional[int]:
    """Lenient integer parse; anything unparseable means 'use the default'."""
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def create_router(query: QuerySurface) -> APIRouter:
    router = APIRouter(prefix="/api")

    @router.get("/health")
    def health() -> dict:
        return query.health()

    @router.get("/symbols")
    def symbols() -> dict:
        return query.list_symbols()

    @router.get("/price/{symbol}")
    def price(symbol: str) -> dict:
        return query.get_price(symbol)

    @router.get("/prices")
    def prices() -> dict:
        return query.get_all_prices()

    @router.get("/ohlcv/{symbol}/{timeframe}")
    def ohlcv(symbol: str, timeframe: str, limit: Optional[str] = None) -> dict:
        return query.get_candles(symbol, timeframe, _parse_limit(limit))

    @router.get("/timeframes/{symbol}")
    def timeframes(symbol: str) -> dict:
        return query.get_timeframes(symbol)

    @router.post("/request-ohlcv")
    def request_ohlcv(body: OhlcvRequest) -> dict:
        return query.acknowledge_request(body.symbol, body.timeframe, body.bars)

    return router


def create_app(query: QuerySurface) -> FastAPI:
    """Build the FastAPI application serving the given query surface."""
    app = FastAPI(
        title="MT5 Bridge",
        description="Latest MetaTrader 5 prices, candles and symbols received over the bridge socket.",
        version=__version__,
    )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(MissingDataError)
    async def missing_data_handler(request: Request, exc: MissingDataError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    app.include_router(create_router(query))
    return app
