from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from wikidash.api.deps import get_dashboard_repository, get_registry
from wikidash.domain.dashboard_repository import DashboardRepository
from wikidash.domain.registry import RepositoryRegistry

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=dict)
async def get_configured_dashboard(
    registry: RepositoryRegistry = Depends(get_registry),
    repo: DashboardRepository = Depends(get_dashboard_repository),
) -> dict[str, Any]:
    """
    Get the dashboard for the configured user.

    Returns 404 when no username is configured.
    """
    username = registry.settings.configured_username
    if not username:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No username configured",
        )
    dashboard = await repo.get_dashboard(username)
    return asdict(dashboard)


@router.get("/{username}", response_model=dict)
async def get_dashboard(
    username: str,
    repo: DashboardRepository = Depends(get_dashboard_repository),
) -> dict[str, Any]:
    """Get the dashboard for a user, served from cache when fresh."""
    dashboard = await repo.get_dashboard(username)
    return asdict(dashboard)


@router.post("/{username}/refresh", response_model=dict)
async def refresh_dashboard(
    username: str,
    repo: DashboardRepository = Depends(get_dashboard_repository),
) -> dict[str, Any]:
    """Rebuild the dashboard from upstream, bypassing the cache."""
    dashboard = await repo.refresh_dashboard(username)
    return asdict(dashboard)
