"""
App-level exception handlers.

Services raise HTTPException for expected failures. Store write failures
arrive here as StoreWriteError and are reported without internal detail.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from eventbook.core.logging import get_logger
from eventbook.stores.interfaces import StoreWriteError

logger = get_logger(__name__)


async def store_write_error_handler(request: Request, exc: Exception) -> JSONResponse:
    entity = exc.entity if isinstance(exc, StoreWriteError) else "record"
    logger.error("request_store_write_failed", entity=entity)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Store write failed"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StoreWriteError, store_write_error_handler)
