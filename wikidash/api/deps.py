from fastapi import Depends, HTTPException, Request, status

from wikidash.domain.dashboard_repository import DashboardRepository
from wikidash.domain.registry import RepositoryRegistry


def get_registry(request: Request) -> RepositoryRegistry:
    """Return the registry built by the app lifespan."""
    registry: RepositoryRegistry | None = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up",
        )
    return registry


def get_dashboard_repository(
    registry: RepositoryRegistry = Depends(get_registry),
) -> DashboardRepository:
    return registry.dashboard_repository()
