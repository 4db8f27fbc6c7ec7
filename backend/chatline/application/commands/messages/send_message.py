"""
SendMessage Command - Validate, persist and route one direct message.

Handler:
1. Validate content (all checks run before any side effect)
2. Verify the recipient exists
3. Persist exactly once; the store assigns id and created_at
4. Route the canonical record to the recipient's live connection
5. Return the record, whatever the routing outcome

Step 3 and 4 run under the sender's lock and are shielded from caller
cancellation: a client that times out or disconnects mid-request does not
leave a message persisted but unrouted.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional

from chatline.application.common.interfaces import Command, CommandHandler
from chatline.application.realtime.router import MessageRouter
from chatline.application.realtime.sequencer import SenderSequencer
from chatline.config.settings import Config
from chatline.domain.entities.message import Message, MessageDraft
from chatline.domain.exceptions import (
    DomainValidationError,
    EntityNotFoundError,
    PayloadTooLargeError,
)
from chatline.domain.ports.repositories import MessageRepository, UserRepository
from chatline.domain.value_objects.media_payload import MediaKind, MediaPayload
from chatline.domain.value_objects.user_id import UserId
from chatline.observability.metrics import (
    MessageKind,
    increment_messages_sent,
    observe_send_duration,
)

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


def _log_detached_failure(task: asyncio.Task) -> None:
    # Also retrieves the exception when the awaiting request was cancelled
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(f"[SendMessage] Persist/route failed: {error}")


@dataclass(frozen=True)
class SendMessageCommand(Command[Message]):
    sender_id: UserId
    recipient_id: UserId
    text: Optional[str] = None
    image: Optional[str] = None
    video: Optional[str] = None


class SendMessageHandler(CommandHandler[Message]):
    def __init__(
        self,
        message_repository: MessageRepository,
        user_repository: UserRepository,
        router: MessageRouter,
        sequencer: SenderSequencer,
        max_text_chars: int = Config.MAX_MESSAGE_TEXT_CHARS,
        max_image_bytes: int = int(Config.MAX_IMAGE_ENCODED_MB * _MB),
        max_video_bytes: int = int(Config.MAX_VIDEO_ENCODED_MB * _MB),
    ):
        self._message_repository = message_repository
        self._user_repository = user_repository
        self._router = router
        self._sequencer = sequencer
        self._max_text_chars = max_text_chars
        self._limits = {
            MediaKind.IMAGE: max_image_bytes,
            MediaKind.VIDEO: max_video_bytes,
        }

    async def execute(self, command: SendMessageCommand) -> Message:
        """
        Raises:
            DomainValidationError: Empty message, both image and video, or text too long
            UnsupportedMediaError: Media is not a data URL of the declared kind
            PayloadTooLargeError: Encoded media above its ceiling
            EntityNotFoundError: Recipient does not exist
            StoreUnavailableError: Message store cannot be reached
        """
        draft = self._build_draft(command)

        recipient = await self._user_repository.get_by_id(command.recipient_id)
        if recipient is None:
            raise EntityNotFoundError(f"User {command.recipient_id} not found")

        task = asyncio.ensure_future(self._persist_and_route(draft))
        task.add_done_callback(_log_detached_failure)
        return await asyncio.shield(task)

    def _build_draft(self, command: SendMessageCommand) -> MessageDraft:
        # Whitespace-only text counts as absent; anything else is stored verbatim
        text = command.text if (command.text or "").strip() else None
        image = command.image or None
        video = command.video or None

        if text is None and image is None and video is None:
            raise DomainValidationError("Message must contain text, an image or a video.")
        if image is not None and video is not None:
            raise DomainValidationError("A message can carry an image or a video, not both.")
        if text is not None and len(text) > self._max_text_chars:
            raise DomainValidationError(
                f"Message text exceeds {self._max_text_chars} characters."
            )

        media = None
        if image is not None:
            media = MediaPayload(kind=MediaKind.IMAGE, data=image)
        elif video is not None:
            media = MediaPayload(kind=MediaKind.VIDEO, data=video)

        if media is not None:
            limit = self._limits[media.kind]
            size = media.encoded_size
            if size > limit:
                raise PayloadTooLargeError(media.kind.value, size, limit)

        return MessageDraft(
            sender_id=command.sender_id,
            recipient_id=command.recipient_id,
            text=text,
            media=media,
        )

    async def _persist_and_route(self, draft: MessageDraft) -> Message:
        started = time.perf_counter()
        async with self._sequencer.hold(draft.sender_id):
            message = await self._message_repository.create(draft)
            outcome = self._router.route(message)

        observe_send_duration(time.perf_counter() - started)
        increment_messages_sent(
            draft.media.kind.value if draft.media else MessageKind.TEXT
        )
        logger.info(
            f"[SendMessage] {message.id} {draft.sender_id} -> {draft.recipient_id} "
            f"({outcome.value})"
        )
        return message
