"""
API endpoints for loading a league's teams.
"""
from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_league_import_client, get_team_store
from app.core.exceptions import LeagueImportError
from app.core.logging import logger
from app.core.team_store import TeamStore
from app.schemas.league import LeagueImportRequest
from app.schemas.team import TeamDraft, TeamListResponse
from app.utils.league_client import LeagueImportClient
from app.utils.teams import demo_teams, normalize_team

router = APIRouter()


@router.post("/import", response_model=TeamListResponse)
async def import_league(
    request: LeagueImportRequest,
    store: TeamStore = Depends(get_team_store),
    client: LeagueImportClient = Depends(get_league_import_client),
) -> TeamListResponse:
    """
    Import a league and replace the current team collection.

    ESPN private leagues need the SWID and espn_s2 cookies.
    """
    try:
        result = await client.fetch_league(request)
    except LeagueImportError as e:
        logger.error(f"League import failed for {request.provider.value}/{request.league_id}: {str(e)}")
        raise HTTPException(
            status_code=502,
            detail="Could not load league. Double-check provider and ID (ESPN may require SWID/S2).",
        )

    teams = [
        normalize_team(TeamDraft(id=record.id, name=record.name, owner=record.owner), index=i)
        for i, record in enumerate(result.teams)
    ]
    store.replace_all(teams, league_name=result.league_name or None)
    return TeamListResponse(league_name=store.league_name, teams=store.list())


@router.post("/demo", response_model=TeamListResponse)
async def load_demo_league(store: TeamStore = Depends(get_team_store)) -> TeamListResponse:
    """Load the sample teams."""
    store.replace_all(demo_teams(), league_name="Demo League")
    return TeamListResponse(league_name=store.league_name, teams=store.list())
