"""
Users API Router - the roster shown in the sidebar.

GET /users → every user except the caller, each with a derived online flag.
"""

from logging import getLogger
from fastapi import APIRouter, Depends, HTTPException, status
from dishka.integrations.fastapi import FromDishka, inject
from chatline.application.dto.user import RosterEntryDTO
from chatline.application.queries.users import ListRosterQuery, ListRosterHandler
from chatline.domain.exceptions import StoreUnavailableError
from chatline.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== ROUTER ====================

router = APIRouter(prefix="/users", tags=["users"])


# ==================== ENDPOINTS ====================


@router.get(
    "",
    response_model=list[RosterEntryDTO],
    status_code=status.HTTP_200_OK,
)
@inject
async def list_users(
    handler: FromDishka[ListRosterHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """List every other user with their online status."""
    try:
        return await handler.execute(ListRosterQuery(user_id=current_user.user_id))
    except StoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from e
