import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config import CREATE_TABLES, HOST, LOG_FILE, LOG_LEVEL, PORT
from database import create_db_and_tables, engine
from links.exceptions import (
    GenerationExhaustedError,
    InvalidURLError,
    LinkError,
    NotFoundError,
)
from links.router import router as links_router
from logging_config import setup_logging

import uvicorn

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidURLError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    GenerationExhaustedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_status(exc: LinkError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    setup_logging(LOG_LEVEL, LOG_FILE)
    if CREATE_TABLES:
        logger.info("Creating tables")
        await create_db_and_tables()
    yield
    await engine.dispose()


app = FastAPI(title="Short links", lifespan=lifespan)


@app.exception_handler(LinkError)
async def link_error_handler(request: Request, exc: LinkError):
    status_code = error_status(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"error": exc.error})


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": "invalid body"}
    )


app.include_router(links_router)


if __name__ == "__main__":
    uvicorn.run("main:app", reload=True, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
