from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends

from wikidash.api.deps import get_dashboard_repository
from wikidash.domain.dashboard_repository import DashboardRepository

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/dashboard", response_model=dict)
async def get_dashboard_config(
    repo: DashboardRepository = Depends(get_dashboard_repository),
) -> dict[str, Any]:
    """
    Get the dashboard knobs the front end needs.

    ``refresh_interval`` is the auto-refresh cadence in seconds; the
    other fields describe how the served aggregate is sized.
    """
    return asdict(repo.config)
