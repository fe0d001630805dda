from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, Query

from wikidash.api.deps import get_registry
from wikidash.domain.registry import RepositoryRegistry

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{username}", response_model=dict)
async def get_user(
    username: str,
    registry: RepositoryRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Get account metadata for a user."""
    user = await registry.users.get_user(username)
    return asdict(user)


@router.get("/{username}/contributions", response_model=list[dict])
async def list_contributions(
    username: str,
    limit: int = Query(50, ge=1, le=500, description="Number of contributions"),
    registry: RepositoryRegistry = Depends(get_registry),
) -> list[dict[str, Any]]:
    """Get a user's recent contributions, newest first."""
    contributions = await registry.contributions.get_recent_contributions(username, limit)
    return [asdict(c) for c in contributions]


@router.get("/{username}/contributions/summary", response_model=dict)
async def get_contribution_summary(
    username: str,
    registry: RepositoryRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Totals by contribution type and the most edited articles."""
    summary = await registry.contributions.get_contribution_summary(username)
    return asdict(summary)


@router.get("/{username}/stats", response_model=dict)
async def get_stats(
    username: str,
    registry: RepositoryRegistry = Depends(get_registry),
) -> dict[str, Any]:
    stats = await registry.stats.get_editor_stats(username)
    return asdict(stats)


@router.get("/{username}/activity", response_model=list[dict])
async def get_activity(
    username: str,
    days: int = Query(30, ge=1, le=365, description="Lookback window in days"),
    registry: RepositoryRegistry = Depends(get_registry),
) -> list[dict[str, Any]]:
    """Per-day edit counts and bytes added, oldest first."""
    activity = await registry.stats.get_daily_activity(username, days)
    return [asdict(a) for a in activity]


@router.get("/{username}/streak", response_model=dict)
async def get_streak(
    username: str,
    registry: RepositoryRegistry = Depends(get_registry),
) -> dict[str, Any]:
    streak = await registry.contributions.get_edit_streak(username)
    return asdict(streak)
