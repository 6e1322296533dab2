import logging
import time
from dotenv import load_dotenv

# Load environment variables from .env file before anything else
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from assetdesk.core.config import settings
from assetdesk.core.errors import RemoteQueryError
from assetdesk.core.logging import request_id_ctx, setup_logging
from assetdesk.api.router import api_router
from assetdesk.platform.provider_registry import registry

setup_logging()
app = FastAPI(title=settings.APP_NAME)

logger = logging.getLogger(__name__)

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id", "-")
    request_id_ctx.set(rid)
    response = await call_next(request)
    return response

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = (time.time() - start_time) * 1000
    logger.info(
        f"Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {process_time:.2f}ms"
    )
    return response

@app.exception_handler(RemoteQueryError)
async def remote_query_error_handler(request: Request, exc: RemoteQueryError):
    logger.error(f"Store call failed for {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(status_code=502, content={"message": exc.message})

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled exception for request {request.method} {request.url.path}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "An internal server error occurred."},
    )

@app.on_event("shutdown")
async def on_shutdown():
    await registry.aclose()

app.include_router(api_router, prefix=settings.API_PREFIX)
