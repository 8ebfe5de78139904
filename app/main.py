import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from app.api.deps import get_store
from app.api.exception_handlers import register_exception_handlers
from app.api.routers import health
from app.api.v1.router import api_router
from app.core.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Build the store up front so configuration errors surface at startup.
    store = get_store()
    yield
    store.close()


app = FastAPI(title="Volunteers API", lifespan=lifespan)

if settings.debug_enabled:

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.debug("Request received: %s %s", request.method, request.url.path)
        start = time.perf_counter()
        response = await call_next(request)
        logger.debug(
            "Response sent: %s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        return response


register_exception_handlers(app)
app.include_router(api_router, prefix="/v1")
app.include_router(health.router)
