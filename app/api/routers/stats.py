from fastapi import APIRouter, Depends

from app.api.deps import get_operation_context, get_store, require_stats_credentials
from app.core.context import OperationContext
from app.repositories.base import Store
from app.schemas.stats import TeamMemberCounts

router = APIRouter(
    prefix="/stats",
    tags=["stats"],
    dependencies=[Depends(require_stats_credentials)],
)


@router.get("/teams/member-count", response_model=TeamMemberCounts)
def get_team_member_counts(
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    """
    Get the number of members per team.

    Teams without any member are not listed.
    """
    return TeamMemberCounts(store.count_team_members(ctx))
