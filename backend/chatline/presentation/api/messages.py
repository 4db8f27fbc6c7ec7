"""
Messages API Router - history and sending.

Flow:
  POST /messages/send/{peer_id} → SendMessageCommand → Handler → Repository
                                                             ↓
                                                     MessageRouter → recipient's socket
  HTTP 201 ← MessageDTO ←

The sender's own view is updated from the 201 response, not from a push.
"""

from logging import getLogger
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import BaseModel
from chatline.application.commands.messages import (
    SendMessageCommand,
    SendMessageHandler,
)
from chatline.application.queries.messages import (
    GetMessageHistoryQuery,
    GetMessageHistoryHandler,
)
from chatline.application.dto.message import MessageDTO
from chatline.domain.exceptions import (
    DomainValidationError,
    EntityNotFoundError,
    PayloadTooLargeError,
    StoreUnavailableError,
    UnsupportedMediaError,
)
from chatline.domain.value_objects.user_id import UserId
from chatline.presentation.dependencies.auth import AuthUser, get_current_user
from chatline.config.settings import Config

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class SendMessageRequest(BaseModel):
    """
    Request body for sending a message.

    {
        "text": "hello",
        "image": "data:image/png;base64,...",   # or
        "video": "data:video/mp4;base64,..."
    }
    """

    text: Optional[str] = None
    image: Optional[str] = None
    video: Optional[str] = None


# ==================== ROUTER ====================

router = APIRouter(prefix="/messages", tags=["messages"])


def _peer(peer_id: str) -> UserId:
    try:
        return UserId(peer_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


# ==================== ENDPOINTS ====================


@router.get(
    "/{peer_id}",
    response_model=list[MessageDTO],
    status_code=status.HTTP_200_OK,
)
@inject
async def get_messages(
    peer_id: str,
    handler: FromDishka[GetMessageHistoryHandler],
    current_user: AuthUser = Depends(get_current_user),
    limit: int = Query(Config.MESSAGE_HISTORY_LIMIT, ge=1, le=Config.MESSAGE_HISTORY_LIMIT),
):
    """Messages between the caller and ``peer_id``, oldest first."""
    query = GetMessageHistoryQuery(
        user_id=current_user.user_id,
        peer_id=_peer(peer_id),
        limit=limit,
    )
    try:
        messages = await handler.execute(query)
    except StoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from e

    return [MessageDTO.from_entity(message) for message in messages]


@router.post(
    "/send/{peer_id}",
    response_model=MessageDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def send_message(
    peer_id: str,
    request: SendMessageRequest,
    handler: FromDishka[SendMessageHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Persist a message to ``peer_id`` and push it if they are online."""
    command = SendMessageCommand(
        sender_id=current_user.user_id,
        recipient_id=_peer(peer_id),
        text=request.text,
        image=request.image,
        video=request.video,
    )
    try:
        message = await handler.execute(command)
    except UnsupportedMediaError as e:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=e.message
        ) from e
    except DomainValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except PayloadTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e)
        ) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except StoreUnavailableError as e:
        logger.error(f"[send_message] Store unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from e

    return MessageDTO.from_entity(message)
