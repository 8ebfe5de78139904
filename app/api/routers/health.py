import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import get_operation_context, get_store
from app.core.context import OperationContext
from app.errors import InternalStoreError, OperationCancelledError
from app.repositories.base import Store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    """Liveness probe. Returns 503 when the store backend is unusable."""
    try:
        store.healthcheck(ctx)
    except (InternalStoreError, OperationCancelledError) as exc:
        logger.warning("Healthcheck failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable"},
        )
    return {"status": "ok"}
