from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from wikidash.api.deps import get_registry
from wikidash.domain.registry import RepositoryRegistry

router = APIRouter(prefix="/impact", tags=["impact"])

MAX_TITLES = 50


@router.get("", response_model=dict)
async def get_impact(
    titles: str = Query(..., description="Pipe-separated article titles"),
    days: int = Query(30, ge=1, le=365, description="Lookback window in days"),
    registry: RepositoryRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """
    Get pageview impact for a set of articles.

    Titles are separated by ``|``, as in the MediaWiki API.
    """
    title_list = [t.strip() for t in titles.split("|") if t.strip()]
    if not title_list:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one title is required",
        )
    if len(title_list) > MAX_TITLES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Too many titles (max {MAX_TITLES})",
        )

    metrics = await registry.impact.get_impact_metrics(title_list, days)
    return asdict(metrics)
