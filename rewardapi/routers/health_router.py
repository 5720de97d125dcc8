import logging

from fastapi import APIRouter, Depends

from rewardapi.containers import Container
from rewardapi.deps import get_container
from rewardapi.schemas.health import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(container: Container = Depends(get_container)) -> HealthCheckResponse:
    """Health check endpoint (includes record store reachability)."""
    store = container.repositories.record_store()
    try:
        await store.ping()
    except Exception as e:
        logger.warning(f"Record store health check failed: {e}")
        return HealthCheckResponse(
            status="degraded",
            store_backend=store.backend_name,
            store_reachable=False,
            error=str(e),
        )
    return HealthCheckResponse(store_backend=store.backend_name)
