from fastapi import APIRouter, Depends, Response, status

from app.api.deps import (
    get_current_email,
    get_operation_context,
    get_store,
    require_matching_email,
)
from app.core.context import OperationContext
from app.domain.models import Team as TeamRecord
from app.errors import AlreadyExistsError
from app.repositories.base import Store
from app.schemas.team import Team, TeamCreate
from app.schemas.volunteer import VolunteerOut

# Every teams endpoint requires a valid token.
router = APIRouter(
    prefix="/teams",
    tags=["teams"],
    dependencies=[Depends(get_current_email)],
)


@router.post(
    "",
    response_model=Team,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_team(
    team_data: TeamCreate,
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    """Create a new team. The id is chosen by the caller and must be unused."""
    team = TeamRecord(id=team_data.id, name=team_data.name)
    store.create_team(ctx, team)
    return Team.model_validate(team)


@router.get("/{team_id}", response_model=Team, response_model_exclude_none=True)
def get_team(
    team_id: str,
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    team = store.get_team_by_id(ctx, team_id)
    return Team.model_validate(team)


@router.get("/{team_id}/members", response_model=list[VolunteerOut])
def list_team_members(
    team_id: str,
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    members = store.list_team_members(ctx, team_id)
    return [VolunteerOut.model_validate(member) for member in members]


@router.put("/{team_id}/members/{email}", status_code=status.HTTP_201_CREATED)
def join_team(
    team_id: str,
    email: str = Depends(require_matching_email),
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    """
    Add the current volunteer to a team.

    Joining is idempotent: joining a team again is not an error.
    """
    try:
        store.add_team_member(ctx, team_id, email)
    except AlreadyExistsError:
        pass
    return Response(status_code=status.HTTP_201_CREATED)


@router.delete("/{team_id}/members/{email}", status_code=status.HTTP_204_NO_CONTENT)
def leave_team(
    team_id: str,
    email: str = Depends(require_matching_email),
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    """Remove the current volunteer from a team."""
    store.remove_team_member(ctx, team_id, email)
