"""
API endpoints for viewing and editing teams.
"""
from fastapi import APIRouter, Depends, HTTPException, Path

from app.api.deps import get_team_store
from app.core.exceptions import TeamNotFoundError
from app.core.logging import logger
from app.core.team_store import TeamStore
from app.schemas.team import Team, TeamDraft, TeamListResponse, TeamUpdate
from app.utils.teams import (
    apply_nfl_palette,
    apply_update,
    derive_mascot,
    next_free_id,
    normalize_team,
    remix_palette,
)

router = APIRouter()


def _team_list(store: TeamStore) -> TeamListResponse:
    return TeamListResponse(league_name=store.league_name, teams=store.list())


@router.get("", response_model=TeamListResponse)
async def list_teams(store: TeamStore = Depends(get_team_store)) -> TeamListResponse:
    return _team_list(store)


@router.post("", response_model=Team, status_code=201)
async def add_team(draft: TeamDraft, store: TeamStore = Depends(get_team_store)) -> Team:
    """Add a team; missing fields get the same defaults as imported teams."""
    index = len(store)
    taken = {t.id for t in store.list()}
    if not (draft.id or "").strip():
        draft = draft.model_copy(update={"id": next_free_id(taken, index + 1)})
    team = normalize_team(draft, index=index)
    if team.id in taken:
        raise HTTPException(status_code=409, detail=f"Team id {team.id} already exists")
    logger.info(f"Adding team {team.name}")
    return store.put(team)


@router.get("/{team_id}", response_model=Team)
async def get_team(team_id: str = Path(..., description="Team ID"), store: TeamStore = Depends(get_team_store)) -> Team:
    try:
        return store.get(team_id)
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{team_id}/mascot-suggestion")
async def suggest_mascot(team_id: str = Path(..., description="Team ID"), store: TeamStore = Depends(get_team_store)):
    """Mascot guessed from the team name (falls back to "wolf")."""
    try:
        team = store.get(team_id)
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"team_id": team.id, "mascot": derive_mascot(team.name) or "wolf"}


@router.patch("/{team_id}", response_model=Team)
async def update_team(
    patch: TeamUpdate,
    team_id: str = Path(..., description="Team ID"),
    store: TeamStore = Depends(get_team_store),
) -> Team:
    """Edit name, mascot, colors, seed or style. Invalid colors become white."""
    try:
        team = store.get(team_id)
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return store.put(apply_update(team, patch))


@router.delete("/{team_id}", response_model=Team)
async def remove_team(team_id: str = Path(..., description="Team ID"), store: TeamStore = Depends(get_team_store)) -> Team:
    try:
        return store.remove(team_id)
    except TeamNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/palette/apply", response_model=TeamListResponse)
async def apply_palette(store: TeamStore = Depends(get_team_store)) -> TeamListResponse:
    """Give each team an NFL-style palette in league order."""
    for team in apply_nfl_palette(store.list()):
        store.put(team)
    return _team_list(store)


@router.post("/palette/remix", response_model=TeamListResponse)
async def remix(store: TeamStore = Depends(get_team_store)) -> TeamListResponse:
    """Give each team a random NFL-style palette."""
    for team in remix_palette(store.list()):
        store.put(team)
    return _team_list(store)


@router.post("/logos/clear", response_model=TeamListResponse)
async def clear_logos(store: TeamStore = Depends(get_team_store)) -> TeamListResponse:
    for team in store.list():
        store.update(team.id, logo_url="")
    return _team_list(store)
