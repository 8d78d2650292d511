"""Entry point for the FileHeap development server."""

import time
import traceback
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.constants import HEADER_REQUEST_ID
from common.logging_config import setup_logging
from common.models import ErrorBody
from server.config import SERVER_HOST, SERVER_PORT
from server.exceptions import FileHeapServerError
from server.routes import file_router, package_router

logger = setup_logging('server')

app = FastAPI(
    title="FileHeap Development Server",
    description="In-memory, content-addressed file storage implementing the FileHeap API",
    version="0.1.0"
)


def error_response(code: int, message: str, detail: str | None = None) -> JSONResponse:
    """Build the JSON error envelope returned with every error status."""
    body = ErrorBody(code=code, message=message, detail=detail)
    return JSONResponse(status_code=code, content=body.model_dump(exclude_none=True))


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = request.headers.get(HEADER_REQUEST_ID) or str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers[HEADER_REQUEST_ID] = request_id

    return response


@app.exception_handler(FileHeapServerError)
async def fileheap_error_handler(request: Request, exc: FileHeapServerError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return error_response(exc.status_code, exc.message, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Invalid request: {exc.errors()} [request_id={request_id}] path={request.url.path}"
    )
    return error_response(status.HTTP_400_BAD_REQUEST, "invalid request", str(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail).lower())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Unhandled error: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal server error",
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    )


app.include_router(package_router)
app.include_router(file_router)


@app.get("/")
async def root():
    """
    Health check endpoint. Returns 200 if the service is alive.
    """
    return {"service": "FileHeap Development Server", "status": "running"}


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "server.main:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
    )


if __name__ == "__main__":
    main()
